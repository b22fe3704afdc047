"""
Endpoints CRUD para `users`.

Cada handler hace a lo sumo una operación contra el store y traduce el
resultado: None/False del repositorio -> 404; errores de Mongo -> 500 vía
los handlers globales de `app.core.exceptions`.
"""
from typing import List
from bson import ObjectId
from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_object_id, get_user_store
from app.api.schemas.user import UserIn, UserOut, with_id
from app.core.exceptions import NotFound
from app.repositories.user_repo import UserStore


router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserOut,
    response_model_exclude_none=True,
    summary="Crear usuario",
)
async def create_user(payload: UserIn, store: UserStore = Depends(get_user_store)) -> UserOut:
    oid = await store.insert(payload)
    return with_id(oid, payload)


@router.get(
    "/{user_id}",
    response_model=UserOut,
    response_model_exclude_none=True,
    summary="Obtener usuario",
)
async def get_user(
    oid: ObjectId = Depends(get_object_id),
    store: UserStore = Depends(get_user_store),
) -> UserOut:
    user = await store.find_by_id(oid)
    if user is None:
        raise NotFound()
    return user


@router.put(
    "/{user_id}",
    response_model=UserOut,
    response_model_exclude_none=True,
    summary="Reemplazar usuario",
    description="Reemplazo completo: los campos ausentes en el cuerpo se eliminan.",
)
async def update_user(
    payload: UserIn,
    oid: ObjectId = Depends(get_object_id),
    store: UserStore = Depends(get_user_store),
) -> UserOut:
    if not await store.replace_by_id(oid, payload):
        raise NotFound()
    return with_id(oid, payload)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Eliminar usuario",
)
async def delete_user(
    oid: ObjectId = Depends(get_object_id),
    store: UserStore = Depends(get_user_store),
) -> Response:
    if not await store.delete_by_id(oid):
        raise NotFound()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=List[UserOut],
    response_model_exclude_none=True,
    summary="Listar usuarios",
    description="Sin paginación ni orden garantizado.",
)
async def list_users(store: UserStore = Depends(get_user_store)) -> List[UserOut]:
    # Se materializa aquí para que un fallo del cursor aún sea un 500 limpio
    return [u async for u in store.find_all()]
