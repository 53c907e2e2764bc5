"""Global exception handlers for the storage API.

Every failure is rendered as ``{"Success": false, "Message": ...}``:

    - StorageError → its own status code (400 / 404 / 500) and message
    - RequestValidationError → 400 "Error parsing JSON" (MalformedRequest)
    - HTTPException (405, unknown route, ...) → its status, envelope body
    - Exception (catch-all) → 500, never leaks internal details
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .files.errors import MalformedRequest, StorageError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_storage_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_storage_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.warning(
            "%s on %s: %s", exc.code, request.url.path, exc.message,
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            "Malformed request on %s: %s", request.url.path, exc.errors(),
        )
        error = MalformedRequest("Error parsing JSON")
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.info(
            "HTTP %d on %s %s", exc.status_code, request.method, request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"Success": False, "Message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            "Unhandled exception on %s: %s", request.url.path, exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"Success": False, "Message": "Internal server error"},
        )
