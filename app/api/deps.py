"""
Dependencias reutilizables para routers (FastAPI Depends).

- Store: el `UserStore` compartido que el startup publica en `app.state`.
- Identificador: convierte el segmento `{user_id}` en ObjectId antes de tocar Mongo.
- Mantener esta capa delgada: sin lógica de negocio.
"""
from bson import ObjectId
from fastapi import Request

from app.api.schemas.user import parse_object_id
from app.core.exceptions import StoreUnavailable
from app.repositories.user_repo import UserStore


def get_user_store(request: Request) -> UserStore:
    store = getattr(request.app.state, "user_store", None)
    if store is None:
        raise StoreUnavailable("Store not initialized")
    return store


def get_object_id(user_id: str) -> ObjectId:
    return parse_object_id(user_id)
