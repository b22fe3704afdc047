"""Cliente MongoDB asíncrono (Motor): ciclo de vida del único cliente de la app.

El cliente se crea una sola vez en el startup y se cierra una sola vez en el
shutdown. Los handlers nunca lo tocan directamente: reciben un `UserStore`
publicado en `app.state`.
"""
from __future__ import annotations

import certifi
import logging
from typing import Any, Dict

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.config import Settings
from app.infrastructure.db.bootstrap import ensure_collections
from app.repositories.user_repo import UserStore

_log = logging.getLogger("users.mongo")


def build_client(settings: Settings) -> AsyncIOMotorClient:
    """Crea el cliente (pool de conexiones). Una URI mal formada lanza aquí."""
    uri = settings.mongo_uri
    kwargs: Dict[str, Any] = dict(serverSelectionTimeoutMS=settings.mongo_timeout_ms)
    if uri.startswith("mongodb+srv://"):
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tlsCAFile"] = certifi.where()
    elif settings.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        if settings.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
        if settings.mongo_tls_allow_invalid_hostnames:
            kwargs["tlsAllowInvalidHostnames"] = True
    return AsyncIOMotorClient(uri, **kwargs)


def resolve_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    """Base nombrada en la URI; si no nombra ninguna, `settings.mongo_db`."""
    return client.get_default_database(default=settings.mongo_db)


async def init_store(app: FastAPI, settings: Settings) -> UserStore:
    """Conecta, prepara la colección y publica el store en `app.state`."""
    client = build_client(settings)
    db = resolve_database(client, settings)
    try:
        await client.admin.command("ping")
        _log.info("Mongo conectado (db=%s)", db.name)
        await ensure_collections(db, settings.mongo_collection)
    except PyMongoError as e:
        # No tumbar la app: las operaciones fallarán con StoreUnavailable
        _log.warning("Mongo no accesible al arrancar: %s", e)

    store = UserStore(db[settings.mongo_collection])
    app.state.mongo_client = client
    app.state.user_store = store
    return store


def close_store(app: FastAPI) -> None:
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()
        app.state.mongo_client = None
        _log.info("Cliente Mongo cerrado")
