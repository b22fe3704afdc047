"""
Esquemas Pydantic para la colección `User` y conversión wire <-> Mongo.

Reglas clave:
- Campos en snake_case; solo `name` es obligatorio.
- Entrada estricta: tipos JSON exactos y sin campos desconocidos (incluido `id`).
- En Mongo el identificador vive en `_id` (ObjectId); en JSON es `id` (hex, 24 chars).
- Los campos en None no se guardan ni se devuelven.
"""

from typing import Annotated, Any, Dict, Mapping, Optional
from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from app.core.exceptions import InvalidIdentifier

# Rango de un int64 BSON; fuera de él el driver no puede codificar el documento
BsonInt = Annotated[int, Field(ge=-2**63, le=2**63 - 1)]


class UserIn(BaseModel):
    """Cuerpo de POST/PUT. PUT reemplaza el documento completo."""
    model_config = ConfigDict(strict=True, extra="forbid")

    name: str
    location: Optional[str] = None
    title: Optional[str] = None
    email: Optional[str] = None
    age: Optional[BsonInt] = None


class UserOut(BaseModel):
    id: str
    name: str
    location: Optional[str] = None
    title: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None


def parse_object_id(value: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise InvalidIdentifier(f"'{value}' is not a valid user id")
    return ObjectId(value)


def to_document(user: UserIn) -> Dict[str, Any]:
    """Documento a guardar (sin `_id`; Mongo lo asigna en el insert)."""
    return user.model_dump(exclude_none=True)


def from_document(doc: Mapping[str, Any]) -> UserOut:
    data = dict(doc)
    oid = data.pop("_id")
    data.pop("id", None)
    return UserOut(id=str(oid), **data)


def with_id(oid: ObjectId, user: UserIn) -> UserOut:
    """Registro en memoria a partir del cuerpo recibido y el id ya asignado."""
    return UserOut(id=str(oid), **to_document(user))
