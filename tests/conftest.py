"""
Configuración de pytest para tests
"""
import os
import tempfile
from types import SimpleNamespace

# Antes de importar la app: Settings lee el entorno al importarse
os.environ.setdefault("MEDIA_DIR", tempfile.mkdtemp(prefix="petadmin-media-"))
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("APP_ENV", "dev")

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

BREEDS_PAYLOAD = {
    "message": {
        "beagle": [],
        "retriever": ["golden", "chesapeake"],
    },
    "status": "success",
}

# ---------- base de datos en memoria ----------

class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs = sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    async def to_list(self, length):
        return [dict(d) for d in self._docs[:length]]

class FakeCollection:
    """Lo justo de la API de motor que usa la app."""
    def __init__(self):
        self.docs = []

    @staticmethod
    def _match(doc, query):
        return all(doc.get(k) == v for k, v in (query or {}).items())

    async def find_one(self, query):
        for doc in self.docs:
            if self._match(doc, query):
                return dict(doc)
        return None

    def find(self, query=None):
        return FakeCursor([d for d in self.docs if self._match(d, query)])

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def replace_one(self, query, doc):
        for i, current in enumerate(self.docs):
            if self._match(current, query):
                self.docs[i] = {**doc, "_id": current["_id"]}
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

class FakeDatabase:
    def __init__(self):
        self.users = FakeCollection()
        self.pets = FakeCollection()

# ---------- fixtures ----------

@pytest.fixture
def fake_db():
    return FakeDatabase()

@pytest.fixture
def breeds_transport():
    """Proveedor de razas simulado"""
    return httpx.MockTransport(lambda request: httpx.Response(200, json=BREEDS_PAYLOAD))

@pytest.fixture
def test_app(fake_db, breeds_transport):
    """
    App con la base de datos en memoria. El formulario del panel habla con
    el propio /api/pet de la app vía ASGITransport.
    """
    from app.main import app
    from app.db import get_db
    from app.breeds import BreedCatalog
    from app.pet_client import PetApiClient
    from app.routers.admin import get_breed_catalog, get_pet_api

    async def _pet_api():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield PetApiClient(client)

    async def _breed_catalog():
        async with httpx.AsyncClient(transport=breeds_transport) as client:
            yield BreedCatalog(client, "https://breeds.test/api")

    app.state.limiter = None
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_pet_api] = _pet_api
    app.dependency_overrides[get_breed_catalog] = _breed_catalog
    yield app
    app.dependency_overrides.clear()

@pytest.fixture
def client(test_app):
    """Fixture para cliente de test de FastAPI"""
    return TestClient(test_app, follow_redirects=False)

@pytest.fixture
def auth_headers():
    from app.security import create_access_token
    return {"Authorization": f"Bearer {create_access_token('operator-1')}"}

@pytest.fixture
def stored_pet(fake_db):
    """Mascota guardada con imagen 'dog.jpg'"""
    oid = ObjectId()
    fake_db.pets.docs.append({
        "_id": oid,
        "name": "Thor",
        "age": 3,
        "description": "Muy cariñoso",
        "breed": "retriever/golden",
        "type": "Macho",
        "weight": "Grande",
        "image": "dog.jpg",
    })
    return str(oid)
