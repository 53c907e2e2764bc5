"""FastAPI router for the storage endpoints.

All three endpoints accept POST only and carry their parameters in a JSON
body.  Handlers are plain ``def`` functions, so FastAPI runs each request on
its own worker thread; the storage service blocks on filesystem calls only.

Endpoints:
    POST /SaveFileToStorage: store a base64 payload under a name
    POST /DeleteFileInStorage: remove a stored file
    POST /ExtractFromStorage: return a stored file base64-encoded

Failures are raised as ``StorageError`` and rendered into the
``{"Success": false, "Message": ...}`` envelope by the handlers in
``filestore.error_handlers``.
"""
import logging

from fastapi import APIRouter, Depends, Request

from .schemas import (
    DeleteRequest,
    ExtractRequest,
    ExtractResult,
    OperationResult,
    SaveRequest,
)
from .service import FileStorageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


def get_storage_service(request: Request) -> FileStorageService:
    """Return the storage service built by ``create_app``."""
    return request.app.state.storage


@router.post("/SaveFileToStorage", response_model=OperationResult)
def save_file(
    body: SaveRequest,
    service: FileStorageService = Depends(get_storage_service),
) -> OperationResult:
    """Decode ``FileBody`` and durably store it as ``FileName``.

    An existing file with the same name is replaced atomically.
    """
    logger.info("[files] Save %r (%d base64 chars)", body.FileName, len(body.FileBody))
    return service.save(body)


@router.post("/DeleteFileInStorage", response_model=OperationResult)
def delete_file(
    body: DeleteRequest,
    service: FileStorageService = Depends(get_storage_service),
) -> OperationResult:
    """Delete the stored file ``FileName``; 404 if it does not exist."""
    logger.info("[files] Delete %r", body.FileName)
    return service.delete(body)


@router.post("/ExtractFromStorage", response_model=ExtractResult)
def extract_file(
    body: ExtractRequest,
    service: FileStorageService = Depends(get_storage_service),
) -> ExtractResult:
    """Return the whole content of ``FileName`` base64-encoded."""
    logger.info("[files] Extract %r", body.FileName)
    return service.extract(body)
