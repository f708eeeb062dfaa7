# app/edit_controller.py
"""
Formulario de edición de una mascota en el panel.

Junta tres fuentes: el registro guardado, el catálogo de razas y lo que va
tecleando el operador. Ciclo de vida:

    loading -> ready -> submitting -> navigated
                 ^           |
                 +-----------+  (validación o guardado fallido)

Las dos cargas (mascota y razas) son concurrentes e independientes: si una
falla se registra en el log y esa parte del estado se queda vacía, pero el
formulario pasa igualmente a `ready`.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import httpx

from .breeds import BreedCatalog, BreedOption
from .pet_client import ImageUpload, PetApiClient, PetUpdatePayload
from .schemas.pet import EDITABLE_FIELDS, PetForm, PetRecord, validate_pet_form

logger = logging.getLogger(__name__)

ADMIN_HOME = "/admin"

# Lo que puede haber en el campo imagen: la referencia guardada, un fichero
# puesto por código o la lista del selector de ficheros.
ImageValue = Union[None, str, ImageUpload, Sequence[ImageUpload]]


class EditState(str, Enum):
    loading = "loading"
    ready = "ready"
    submitting = "submitting"
    navigated = "navigated"


class SubmitInProgressError(RuntimeError):
    """Ya hay un guardado en curso para esta mascota."""


class FormLockedError(RuntimeError):
    """El formulario no admite cambios en su estado actual."""


@dataclass
class FormState:
    values: Dict[str, Any] = field(default_factory=dict)
    image: ImageValue = None
    errors: Dict[str, str] = field(default_factory=dict)
    is_submitting: bool = False


def pick_image(image: ImageValue, snapshot: Optional[PetRecord]) -> Union[ImageUpload, str, None]:
    """
    1. Ficheros elegidos en el selector -> el primero.
    2. Un único fichero ya puesto en el campo -> ese.
    3. Si no hay fichero nuevo -> la imagen guardada de la copia intacta,
       para que el PUT nunca deje la mascota sin imagen.
    """
    if isinstance(image, (list, tuple)) and image:
        return image[0]
    if isinstance(image, ImageUpload):
        return image
    if snapshot is not None and snapshot.image:
        return snapshot.image
    return None


def build_update_payload(form: PetForm, image: Union[ImageUpload, str]) -> PetUpdatePayload:
    fields = {
        "name": form.name,
        "age": str(form.age),
        "description": form.description,
        "breed": form.breed,
        "type": form.type,
        "weight": form.weight,
    }
    return PetUpdatePayload(fields=fields, image=image)


class PetEditController:
    def __init__(self, pet_id: str, pets: PetApiClient, breeds: BreedCatalog):
        self.pet_id = pet_id
        self._pets = pets
        self._breeds = breeds
        self.state = EditState.loading
        self.form = FormState()
        self.breed_options: List[BreedOption] = []
        # Dos capturas de solo lectura tomadas una vez al cargar:
        # valores por defecto del formulario y copia intacta para el fallback de imagen.
        self.defaults: Mapping[str, Any] = MappingProxyType({})
        self.snapshot: Optional[PetRecord] = None
        self.navigate_to: Optional[str] = None

    async def mount(self) -> None:
        if self.state is not EditState.loading:
            raise RuntimeError("El formulario ya está montado")
        await asyncio.gather(self._load_breeds(), self._load_pet())
        self.state = EditState.ready

    async def _load_breeds(self) -> None:
        try:
            options = await self._breeds.fetch_options()
        except (httpx.HTTPError, ValueError):
            logger.exception("No se pudo cargar el catálogo de razas")
            return
        self.breed_options = options

    async def _load_pet(self) -> None:
        try:
            record = await self._pets.get(self.pet_id)
        except (httpx.HTTPError, ValueError):
            logger.exception("No se pudo cargar la mascota %s", self.pet_id)
            return
        self.snapshot = record
        self.defaults = MappingProxyType(record.model_dump(exclude={"id"}))
        self.form.values = {name: self.defaults[name] for name in EDITABLE_FIELDS}
        self.form.image = record.image

    # ---------- entrada del operador ----------

    def _ensure_editable(self) -> None:
        if self.state is not EditState.ready:
            raise FormLockedError(f"Formulario en estado {self.state.value}")

    def set_value(self, name: str, value: Any) -> None:
        self._ensure_editable()
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Campo no editable: {name}")
        self.form.values[name] = value
        self.form.errors.pop(name, None)

    def select_files(self, files: Sequence[ImageUpload]) -> None:
        """Equivale a elegir ficheros en el input de tipo file."""
        self._ensure_editable()
        self.form.image = list(files)
        self.form.errors.pop("image", None)

    def set_image(self, upload: ImageUpload) -> None:
        self._ensure_editable()
        self.form.image = upload
        self.form.errors.pop("image", None)

    # ---------- envío ----------

    async def submit(self) -> bool:
        """
        Valida, construye el payload y hace el PUT.
        Devuelve True si se guardó (y hay que navegar a `navigate_to`).
        """
        if self.state is EditState.submitting:
            raise SubmitInProgressError(self.pet_id)
        self._ensure_editable()

        form, errors = validate_pet_form(self.form.values)
        image = pick_image(self.form.image, self.snapshot)
        if image is None:
            errors["image"] = "Selecciona una imagen"
        if errors:
            self.form.errors = errors
            logger.info("Envío bloqueado para la mascota %s: %s", self.pet_id, sorted(errors))
            return False

        payload = build_update_payload(form, image)
        self.state = EditState.submitting
        self.form.is_submitting = True
        self.form.errors = {}
        try:
            response = await self._pets.update(self.pet_id, payload)
        except httpx.HTTPError:
            logger.exception("Error de red al guardar la mascota %s", self.pet_id)
            return self._back_to_ready("No se pudo guardar la mascota")

        if not response.is_success:
            logger.error(
                "El API de mascotas rechazó la actualización de %s (HTTP %s): %s",
                self.pet_id, response.status_code, response.text,
            )
            return self._back_to_ready("No se pudo guardar la mascota")

        self.form.is_submitting = False
        self.state = EditState.navigated
        self.navigate_to = ADMIN_HOME
        return True

    def _back_to_ready(self, message: str) -> bool:
        # Los valores tecleados se conservan
        self.form.is_submitting = False
        self.form.errors = {"form": message}
        self.state = EditState.ready
        return False

    def view(self) -> Dict[str, Any]:
        return {
            "id": self.pet_id,
            "state": self.state.value,
            "values": dict(self.form.values),
            "image": self.snapshot.image if self.snapshot else None,
            "breeds": [option.model_dump() for option in self.breed_options],
            "errors": dict(self.form.errors),
            "is_submitting": self.form.is_submitting,
            "navigate_to": self.navigate_to,
        }
