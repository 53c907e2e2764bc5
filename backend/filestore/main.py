"""File Storage Server application.

Builds the FastAPI app around an explicit ``AppConfig``.  The storage root is
resolved once, wrapped in a ``FileStorageService`` and kept on ``app.state``;
nothing is read from module-level globals, so several apps with different
storage roots can coexist (tests rely on this).

Modules:
    - files: Save / Delete / Extract endpoints and the storage pipeline
    - error_handlers: uniform ``{"Success", "Message"}`` error envelope
    - config: config file loading
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config import AppConfig
from .error_handlers import register_error_handlers
from .files.router import router as files_router
from .files.service import FileStorageService

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging; ``level`` comes from ``logging.level`` in config."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    if level:
        configured_level = getattr(logging, level.upper(), None)
        if isinstance(configured_level, int):
            logging.getLogger().setLevel(configured_level)
        else:
            logger.warning("Unknown log level %r, keeping INFO", level)

    # Per-request access lines are logged by the files router already.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def create_app(config: AppConfig) -> FastAPI:
    """Create the storage API for ``config``."""
    storage_config = config.storage_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Storage directory: %s", storage_config.storage_root)
        yield
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="File Storage Server",
        description="Save, extract and delete base64-encoded files by name",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.storage = FileStorageService(storage_config)

    app.include_router(files_router)
    register_error_handlers(app)

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint.

        Returns:
            dict: Status object indicating the server is running.
        """
        return {"status": "ok"}

    return app
