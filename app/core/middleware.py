"""
Middlewares de aplicación: contexto por petición (request id + access log) y CORS.
"""
import logging
import time
import uuid
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Asigna `request.state.request_id` y deja una línea de log por petición."""

    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("users.request")

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = rid
        started = time.perf_counter()
        status = 0
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            self.log.info(
                "%s %s -> %s in %dms request_id=%s",
                request.method,
                request.url.path,
                status,
                (time.perf_counter() - started) * 1000,
                rid,
            )


def _cors_options() -> Dict[str, Any]:
    if settings.cors_allow_any:
        # Regex abierta: el navegador rechaza credentials con origen comodín
        return dict(allow_origin_regex=".*", allow_credentials=False)
    return dict(allow_origins=settings.cors_origins, allow_credentials=True)


def add_middlewares(app: FastAPI) -> None:
    app.add_middleware(CORSMiddleware, allow_methods=["*"], allow_headers=["*"], **_cors_options())
    app.add_middleware(RequestContextMiddleware)
