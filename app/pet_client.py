# app/pet_client.py
"""Cliente HTTP del API de almacenamiento de mascotas (/api/pet)."""
from dataclasses import dataclass
from typing import Dict, Union
from urllib.parse import quote
import httpx

from .schemas.pet import PetRecord


@dataclass(frozen=True)
class ImageUpload:
    """Fichero elegido por el operador en el selector de imagen."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class PetUpdatePayload:
    # Todos los campos de texto, siempre; el backend reemplaza el registro entero
    fields: Dict[str, str]
    # Fichero nuevo o la referencia de la imagen ya guardada
    image: Union[ImageUpload, str]

    def to_multipart(self) -> dict:
        files: dict = {name: (None, value.encode()) for name, value in self.fields.items()}
        if isinstance(self.image, ImageUpload):
            files["image"] = (self.image.filename, self.image.content, self.image.content_type)
        else:
            files["image"] = (None, self.image.encode())
        return files


class PetApiClient:
    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def get(self, pet_id: str) -> PetRecord:
        response = await self._client.get(f"/api/pet/{quote(pet_id, safe='')}")
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict) or "body" not in data:
            raise ValueError("Respuesta del API de mascotas sin 'body'")
        return PetRecord.model_validate(data["body"])

    async def update(self, pet_id: str, payload: PetUpdatePayload) -> httpx.Response:
        return await self._client.put(f"/api/pet/{quote(pet_id, safe='')}", files=payload.to_multipart())
