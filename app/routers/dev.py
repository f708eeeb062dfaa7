# app/routers/dev.py
# Endpoint de desarrollo para crear datos de prueba
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from ..db import get_db
from ..security import hash_password

router = APIRouter()

OPERATOR = {"name": "Admin", "email": "admin@test.com", "password": "abc12345"}

SAMPLE_PETS = [
    {
        "name": "Thor",
        "age": 3,
        "description": "Muy cariñoso, le encanta correr en el parque.",
        "breed": "retriever/golden",
        "type": "Macho",
        "weight": "Grande",
        "image": "/media/pets/thor.jpg",
    },
    {
        "name": "Luna",
        "age": 1,
        "description": "Tranquila y sociable con otros perros.",
        "breed": "beagle",
        "type": "Fêmea",
        "weight": "Médio",
        "image": "/media/pets/luna.jpg",
    },
    {
        "name": "Pipoca",
        "age": 5,
        "description": "Pequeña pero valiente.",
        "breed": "terrier/yorkshire",
        "type": "Fêmea",
        "weight": "Pequeno",
        "image": "/media/pets/pipoca.jpg",
    },
]

@router.post("/seed-data")
async def seed_data(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Crea un operador del panel y unas mascotas de ejemplo.
    Solo para desarrollo.
    """
    if not await db.users.find_one({"email": OPERATOR["email"]}):
        await db.users.insert_one({
            "name": OPERATOR["name"],
            "email": OPERATOR["email"],
            "password_hash": hash_password(OPERATOR["password"]),
        })

    pet_ids = []
    for pet in SAMPLE_PETS:
        existing = await db.pets.find_one({"name": pet["name"]})
        if existing:
            pet_ids.append(str(existing["_id"]))
            continue
        res = await db.pets.insert_one(dict(pet))
        pet_ids.append(str(res.inserted_id))

    return {
        "message": "Datos de prueba creados",
        "operator_email": OPERATOR["email"],
        "pet_ids": pet_ids,
    }
