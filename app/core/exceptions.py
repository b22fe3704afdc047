"""
Error taxonomy of the service and global exception handlers for consistent API errors.

Every failure is turned into a JSON response here; nothing escapes the HTTP boundary.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class ApiError(Exception):
    """Base de los errores de dominio; cada subclase fija su status HTTP."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class MalformedInput(ApiError):
    status_code = HTTP_400_BAD_REQUEST
    default_message = "Malformed input"


class InvalidIdentifier(ApiError):
    status_code = HTTP_400_BAD_REQUEST
    default_message = "Invalid identifier"


class NotFound(ApiError):
    status_code = HTTP_404_NOT_FOUND
    default_message = "User not found"


class RouteNotFound(ApiError):
    status_code = HTTP_404_NOT_FOUND
    default_message = "Route not found"


class StoreUnavailable(ApiError):
    """Conectividad perdida o timeout contra Mongo."""

    default_message = "Store unavailable"


class StoreRejected(ApiError):
    """Mongo rechazó la operación (índice único, validador, permisos...)."""

    default_message = "Store rejected the operation"


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, message: str, errors: Optional[List[Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = jsonable_encoder(errors)
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def _api_error_response(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_body(request, exc.message, exc.errors))


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("users.errors")

    @app.exception_handler(ApiError)
    async def _api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            log.error("%s request_id=%s: %s", type(exc).__name__, _req_id(request), exc.message)
        return _api_error_response(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        # Ruta o método sin handler: mismo 404 para ambos casos
        if exc.status_code in (HTTP_404_NOT_FOUND, HTTP_405_METHOD_NOT_ALLOWED):
            return _api_error_response(request, RouteNotFound())
        return JSONResponse(status_code=exc.status_code, content=_body(request, exc.detail or "HTTP error"))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any((e.get("loc") or ("",))[0] == "body" for e in errors):
            return _api_error_response(request, MalformedInput(errors=errors))
        return JSONResponse(
            status_code=422,
            content=_body(request, "Validation error", errors),
        )

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=_body(request, "Internal server error"))
