"""
Repositorio asíncrono para la colección `User`.

- Única pieza que habla con Mongo; una operación Motor por método.
- Traduce errores de pymongo a StoreUnavailable / StoreRejected (sin reintentos).
- "No encontrado" es un resultado normal (None / False), no una excepción.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import AsyncIterator, Iterator, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import ConnectionFailure, ExecutionTimeout, PyMongoError

from app.api.schemas.user import UserIn, UserOut, from_document, to_document
from app.core.exceptions import StoreRejected, StoreUnavailable

_log = logging.getLogger("users.repo")


@contextmanager
def _store_errors(op: str) -> Iterator[None]:
    try:
        yield
    except (ConnectionFailure, ExecutionTimeout) as e:
        _log.warning("%s: Mongo no disponible: %s", op, e)
        raise StoreUnavailable(f"{op} failed: store unavailable") from e
    except PyMongoError as e:
        _log.warning("%s: Mongo rechazó la operación: %s", op, e)
        raise StoreRejected(f"{op} failed: {e}") from e


class UserStore:
    """Acceso a `User`. Se crea una vez y se comparte entre peticiones."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._col = collection

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._col

    async def insert(self, user: UserIn) -> ObjectId:
        """Inserta el usuario y retorna el `_id` asignado por Mongo."""
        with _store_errors("insert"):
            res = await self._col.insert_one(to_document(user))
        return res.inserted_id

    async def find_by_id(self, oid: ObjectId) -> Optional[UserOut]:
        with _store_errors("find_by_id"):
            doc = await self._col.find_one({"_id": oid})
        return from_document(doc) if doc is not None else None

    async def find_all(self) -> AsyncIterator[UserOut]:
        """Itera todos los usuarios con un cursor nuevo por llamada.

        Sin orden garantizado ni snapshot: escrituras concurrentes durante una
        iteración larga pueden o no verse.
        """
        with _store_errors("find_all"):
            async for doc in self._col.find({}):
                yield from_document(doc)

    async def replace_by_id(self, oid: ObjectId, user: UserIn) -> bool:
        """Reemplazo completo (no merge). False si no existe el id."""
        with _store_errors("replace_by_id"):
            res = await self._col.replace_one({"_id": oid}, to_document(user))
        return res.matched_count == 1

    async def delete_by_id(self, oid: ObjectId) -> bool:
        with _store_errors("delete_by_id"):
            res = await self._col.delete_one({"_id": oid})
        return res.deleted_count == 1
