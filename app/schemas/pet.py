from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

PetSex = Literal["Fêmea", "Macho"]
PetSize = Literal["Pequeno", "Médio", "Grande"]

DESCRIPTION_MAX_LENGTH = 255

# Campos que el operador puede editar (id e imagen van aparte)
EDITABLE_FIELDS = ("name", "age", "description", "breed", "type", "weight")

class PetForm(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    breed: str = Field(..., min_length=1)
    type: PetSex
    weight: PetSize

class PetRecord(BaseModel):
    """
    Mascota tal y como la devuelve el API de almacenamiento. Inmutable.
    Se acepta lo que haya guardado; las reglas del formulario se aplican al enviar.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    age: int = 0
    description: str = ""
    breed: str = ""
    type: str = ""
    weight: str = ""
    image: str = ""

class PetSummary(BaseModel):
    id: str
    name: str
    breed: str
    image: Optional[str] = None


_MESSAGES = {
    "string_too_long": "Texto demasiado largo",
    "int_parsing": "La edad debe ser un número entero",
    "int_from_float": "La edad debe ser un número entero",
    "greater_than_equal": "La edad no puede ser negativa",
    "literal_error": "Valor no permitido",
}

def validate_pet_form(values: Mapping[str, Any]) -> Tuple[Optional[PetForm], Dict[str, str]]:
    """
    Valida los campos del formulario antes de construir el payload.
    Devuelve (formulario, {}) si es válido o (None, errores por campo).
    """
    errors: Dict[str, str] = {}
    for field in EDITABLE_FIELDS:
        value = values.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[field] = "Campo obligatorio"
    if errors:
        return None, errors

    try:
        form = PetForm.model_validate({f: values[f] for f in EDITABLE_FIELDS})
    except ValidationError as exc:
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            if field == "description" and err["type"] == "string_too_long":
                errors[field] = f"La descripción debe tener como máximo {DESCRIPTION_MAX_LENGTH} caracteres"
            else:
                errors.setdefault(field, _MESSAGES.get(err["type"], err["msg"]))
        return None, errors
    return form, {}
