# app/breeds.py
"""
Catálogo de razas para el selector del formulario.

El proveedor externo devuelve {raza: [subrazas]}; aquí se aplana a una lista
de opciones {id, label}. Se reconstruye en cada carga, no se guarda nada.
"""
from typing import Dict, List, Mapping, Sequence
import httpx
from pydantic import BaseModel, ConfigDict


class BreedOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str


class BreedsResponse(BaseModel):
    message: Dict[str, List[str]]
    status: str = ""


def flatten_breeds(message: Mapping[str, Sequence[str]]) -> List[BreedOption]:
    """
    Raza sin subrazas -> una opción (id = label = raza).
    Raza con subrazas -> una opción por subraza: id "raza/sub", label "sub raza".
    """
    options: List[BreedOption] = []
    for breed, sub_breeds in message.items():
        if not sub_breeds:
            options.append(BreedOption(id=breed, label=breed))
            continue
        for sub in sub_breeds:
            options.append(BreedOption(id=f"{breed}/{sub}", label=f"{sub} {breed}"))
    return options


class BreedCatalog:
    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self._client = client
        self._url = f"{base_url.rstrip('/')}/breeds/list/all"

    async def fetch_options(self) -> List[BreedOption]:
        """
        Lanza httpx.HTTPError si falla la petición y ValueError si la
        respuesta no tiene el formato esperado.
        """
        response = await self._client.get(self._url)
        response.raise_for_status()
        payload = BreedsResponse.model_validate(response.json())
        return flatten_breeds(payload.message)
