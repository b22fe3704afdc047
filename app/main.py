"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
from fastapi import FastAPI
from app.core.config import settings
from app.infrastructure.db.mongo_async import init_store, close_store
from app.api.router import api_router
from app.core.logging import setup_logging
from app.core.middleware import add_middlewares
from app.core.exceptions import register_exception_handlers
import logging

_log = logging.getLogger("users.startup")

setup_logging(settings.log_level)
app = FastAPI(title=settings.app_name)

add_middlewares(app)
register_exception_handlers(app)


# Startup: un único cliente Mongo compartido por todas las peticiones
@app.on_event("startup")
async def on_startup():
    await init_store(app, settings)
    _log.info("%s lista en puerto %s", settings.app_name, settings.port)


@app.on_event("shutdown")
def on_shutdown():
    close_store(app)


# Monta routers bajo el prefijo configurado
app.include_router(api_router, prefix=settings.api_prefix_normalized)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
