from fastapi import APIRouter, Depends, HTTPException, Request, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.datastructures import UploadFile
from uuid import uuid4
from pathlib import Path
from typing import Tuple
import aiofiles
import logging

from ..db import get_db
from ..config import get_settings
from ..utils import to_id, to_object_id
from ..schemas.pet import EDITABLE_FIELDS, PetForm, validate_pet_form

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

def to_out(doc: dict) -> dict:
    d = to_id(doc)
    d.setdefault("image", "")
    return d

async def save_image(upload: UploadFile) -> str:
    """Guarda el fichero en media/pets y devuelve la referencia pública."""
    ext = Path(upload.filename or "").suffix.lower() or ".jpg"
    filename = f"{uuid4().hex}{ext}"
    rel_path = Path("pets") / filename
    abs_path = Path(settings.media_dir) / rel_path

    async with aiofiles.open(abs_path, "wb") as out:
        while chunk := await upload.read(1024 * 1024):
            await out.write(chunk)

    return f"/media/{rel_path.as_posix()}"

async def read_pet_form(request: Request) -> Tuple[PetForm, UploadFile | str | None]:
    """
    Lee el multipart del formulario. La imagen puede llegar como fichero
    o como la referencia (string) de la imagen ya guardada.
    """
    form = await request.form()
    pet, errors = validate_pet_form({f: form.get(f) for f in EDITABLE_FIELDS})
    if errors:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=errors)
    image = form.get("image")
    if isinstance(image, UploadFile) and not image.filename:
        image = None
    if isinstance(image, str) and not image.strip():
        image = None
    return pet, image

async def resolve_image(image: UploadFile | str | None) -> str:
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"image": "Campo obligatorio"},
        )
    if isinstance(image, UploadFile):
        return await save_image(image)
    return image

@router.get("")
async def list_pets(db: AsyncIOMotorDatabase = Depends(get_db)):
    docs = await db.pets.find().to_list(500)
    return {"body": [to_out(d) for d in docs]}

@router.get("/{pet_id}")
async def get_pet(pet_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    doc = await db.pets.find_one({"_id": to_object_id(pet_id, "pet_id")})
    if not doc:
        raise HTTPException(status_code=404, detail="Mascota no encontrada")
    return {"body": to_out(doc)}

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_pet(request: Request, db: AsyncIOMotorDatabase = Depends(get_db)):
    pet, image = await read_pet_form(request)
    doc = pet.model_dump()
    doc["image"] = await resolve_image(image)
    res = await db.pets.insert_one(doc)
    doc["_id"] = res.inserted_id
    logger.info("Mascota %s creada", res.inserted_id)
    return {"body": to_out(doc)}

@router.put("/{pet_id}")
async def update_pet(pet_id: str, request: Request, db: AsyncIOMotorDatabase = Depends(get_db)):
    oid = to_object_id(pet_id, "pet_id")
    if not await db.pets.find_one({"_id": oid}):
        raise HTTPException(status_code=404, detail="Mascota no encontrada")

    pet, image = await read_pet_form(request)
    doc = pet.model_dump()
    doc["image"] = await resolve_image(image)

    # el registro se reemplaza entero; gana la última escritura
    await db.pets.replace_one({"_id": oid}, doc)
    logger.info("Mascota %s actualizada", pet_id)
    doc["_id"] = oid
    return {"body": to_out(doc)}
