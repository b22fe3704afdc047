"""Health (sin auth), salidas tipadas y estables."""
from fastapi import APIRouter, Request, status
from pymongo.errors import PyMongoError

from app.api.schemas.health import PingOut, HealthOut


router = APIRouter(tags=["Health"])  # no prefix to keep paths stable


@router.get("/ping", response_model=PingOut, summary="Ping básico")
def ping() -> PingOut:
    return PingOut(message="pong")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica y de Mongo")
async def health(request: Request) -> HealthOut:
    # Sin Depends(get_user_store): un store ausente es un estado a reportar, no un 500
    store = getattr(request.app.state, "user_store", None)
    if store is None:
        return HealthOut(ok=True, mongo=False, mongo_error="store not initialized")
    try:
        await store.collection.database.command("ping")
        return HealthOut(ok=True, mongo=True)
    except PyMongoError as e:
        return HealthOut(ok=True, mongo=False, mongo_error=str(e))
