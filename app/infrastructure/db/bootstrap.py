"""
Bootstrap de la base Mongo: define y aplica el validador (JSON Schema) de `User`.
Se ejecuta al inicio de la app para asegurar la colección y su consistencia.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict
import logging
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

_log = logging.getLogger("users.mongo.bootstrap")

USER_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["name"],
    "properties": {
        "name": {"bsonType": "string"},
        "location": {"bsonType": "string"},
        "title": {"bsonType": "string"},
        "email": {"bsonType": "string"},
        "age": {"bsonType": ["int", "long"]},
    },
}


async def _collmod_or_create(db: AsyncIOMotorDatabase, name: str, validator: Dict[str, Any]) -> None:
    try:
        # Intenta aplicar validator con collMod (colección existente)
        await db.command({
            "collMod": name,
            "validator": {"$jsonSchema": validator},
            "validationLevel": "moderate",
        })
        return
    except PyMongoError:
        pass
    # collMod falla si la colección no existe: se crea con validator
    try:
        if name not in await db.list_collection_names():
            await db.create_collection(name, validator={"$jsonSchema": validator})
    except PyMongoError as e:
        # No aborta el arranque; solo deja sin validator estricto.
        _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


async def ensure_collections(db: AsyncIOMotorDatabase, collection: str = "User") -> None:
    """Garantiza la colección de usuarios con su validador mínimo."""
    await _collmod_or_create(db, collection, USER_VALIDATOR)
    _log.info("Colección '%s' lista", collection)
