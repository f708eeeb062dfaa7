# app/routers/admin.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.datastructures import UploadFile
from typing import AsyncIterator, List, Set
import httpx
import logging

from ..db import get_db
from ..config import get_settings
from ..utils import to_id
from ..breeds import BreedCatalog
from ..pet_client import ImageUpload, PetApiClient
from ..edit_controller import PetEditController
from ..schemas.pet import EDITABLE_FIELDS, PetSummary

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

# Mascotas con un guardado en curso: como mucho un PUT a la vez por mascota
_saving: Set[str] = set()

# --------- dependencias ----------

async def get_pet_api() -> AsyncIterator[PetApiClient]:
    async with httpx.AsyncClient(base_url=settings.pet_api_base_url, timeout=settings.http_timeout) as client:
        yield PetApiClient(client)

async def get_breed_catalog() -> AsyncIterator[BreedCatalog]:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield BreedCatalog(client, settings.breeds_api_url)

async def _to_upload(file: UploadFile) -> ImageUpload:
    return ImageUpload(
        filename=file.filename,
        content=await file.read(),
        content_type=file.content_type or "application/octet-stream",
    )

# --------- rutas ----------

@router.get("", response_model=List[PetSummary])
async def admin_home(db: AsyncIOMotorDatabase = Depends(get_db)):
    docs = await db.pets.find().sort("name", 1).to_list(500)
    return [to_id(d) for d in docs]

@router.get("/pets/{pet_id}/edit")
async def edit_form(
    pet_id: str,
    pets: PetApiClient = Depends(get_pet_api),
    breeds: BreedCatalog = Depends(get_breed_catalog),
):
    """Estado inicial del formulario: valores guardados + opciones de raza."""
    controller = PetEditController(pet_id, pets, breeds)
    await controller.mount()
    return controller.view()

@router.post("/pets/{pet_id}/edit")
async def submit_edit(
    pet_id: str,
    request: Request,
    pets: PetApiClient = Depends(get_pet_api),
    breeds: BreedCatalog = Depends(get_breed_catalog),
):
    """
    Envío del formulario (multipart). Los campos presentes se aplican como
    ediciones del operador sobre el registro cargado; un fichero no vacío en
    `image` cuenta como selección en el input de fichero.
    """
    if pet_id in _saving:
        raise HTTPException(status.HTTP_409_CONFLICT, "Ya hay un guardado en curso para esta mascota")
    _saving.add(pet_id)
    try:
        form = await request.form()
        controller = PetEditController(pet_id, pets, breeds)
        await controller.mount()

        for name in EDITABLE_FIELDS:
            value = form.get(name)
            if isinstance(value, str):
                controller.set_value(name, value)

        files = [
            await _to_upload(f) for f in form.getlist("image")
            if isinstance(f, UploadFile) and f.filename
        ]
        if files:
            controller.select_files(files)

        saved = await controller.submit()
    finally:
        _saving.discard(pet_id)

    if saved:
        return RedirectResponse(controller.navigate_to, status_code=status.HTTP_303_SEE_OTHER)

    code = status.HTTP_502_BAD_GATEWAY if "form" in controller.form.errors else status.HTTP_422_UNPROCESSABLE_ENTITY
    return JSONResponse(status_code=code, content=controller.view())
