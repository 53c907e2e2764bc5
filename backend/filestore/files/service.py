"""File storage service.

Implements the three storage operations on top of a flat directory:

- save: decode base64, write to a temporary file, fsync, atomically replace
  the target, fsync the directory
- delete: remove exactly one file
- extract: read a whole file and return it base64-encoded

Every operation validates the file name before touching the filesystem and
holds a per-name lock for its whole pipeline.  Failures are raised as
``StorageError`` subclasses; rendering them is the web layer's job.
"""
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..config import StorageConfig
from . import codec
from .errors import (
    DecodeError,
    InvalidName,
    NotFound,
    StorageIOError,
    StorageUnavailable,
)
from .locks import KeyedLock
from .schemas import (
    DeleteRequest,
    ExtractRequest,
    ExtractResult,
    OperationResult,
    SaveRequest,
)

logger = logging.getLogger(__name__)

# Permission bits for stored files; mkstemp would otherwise leave them 0600.
FILE_MODE = 0o644

# Fixed so the temporary name stays short whatever the target name length.
TEMP_PREFIX = ".filestore-"

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


@contextmanager
def _io_step(message: str, path: Path) -> Iterator[None]:
    """Turn an ``OSError`` raised inside the block into a ``StorageIOError``."""
    try:
        yield
    except OSError as e:
        logger.error("%s (%s): %s", message, path, e)
        raise StorageIOError(message) from e


class FileStorageService:
    """Save, delete and extract files under a single storage root."""

    def __init__(self, config: StorageConfig, locks: Optional[KeyedLock] = None):
        self._root = config.storage_root
        self._locks = locks or KeyedLock()

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------

    def resolve_path(self, name: str) -> Path:
        """Map a ``FileName`` to its path directly under the storage root.

        Raises:
            InvalidName: If the name is empty, contains a path separator or
                NUL, or would resolve anywhere but a direct child of the root.
        """
        if not name or name in (".", "..") or any(c in name for c in _FORBIDDEN_CHARS):
            logger.warning("Rejected file name %r", name)
            raise InvalidName("Invalid file name")

        target = Path(os.path.normpath(self._root / name))
        if target.parent != self._root or os.path.isabs(name):
            logger.warning("Rejected file name %r (resolves to %s)", name, target)
            raise InvalidName("Invalid file name")
        return target

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def save(self, request: SaveRequest) -> OperationResult:
        """Durably store ``request.FileBody`` under ``request.FileName``.

        The previous content of the file, if any, stays intact until the new
        content has been fully written and flushed.

        Raises:
            DecodeError: ``FileBody`` is not valid base64.
            InvalidName: ``FileName`` escapes the storage root.
            StorageUnavailable: The storage root cannot be created.
            StorageIOError: Any write, flush, close or rename failure.
        """
        try:
            data = codec.decode(request.FileBody)
        except codec.EncodingError as e:
            logger.warning("Base64 decode error for %r: %s", request.FileName, e)
            raise DecodeError("Error decoding base64") from e

        target = self.resolve_path(request.FileName)

        with self._locks.hold(str(target)):
            self._ensure_root()
            self._write_durably(target, data)
            with _io_step("Error getting file info", target):
                size = target.stat().st_size

        logger.info("Saved %s (%d bytes after writing)", target, size)
        return OperationResult()

    def delete(self, request: DeleteRequest) -> OperationResult:
        """Remove the file named ``request.FileName``.

        Raises:
            InvalidName: ``FileName`` escapes the storage root.
            NotFound: No such file.
            StorageIOError: The file exists but cannot be removed.
        """
        target = self.resolve_path(request.FileName)

        with self._locks.hold(str(target)):
            try:
                if not target.exists():
                    logger.info("Delete of missing file %s", target)
                    raise NotFound("File not found")
                target.unlink()
            except FileNotFoundError as e:
                raise NotFound("File not found") from e
            except OSError as e:
                logger.error("Error deleting file %s: %s", target, e)
                raise StorageIOError("Error deleting file") from e

        logger.info("Deleted %s", target)
        return OperationResult()

    def extract(self, request: ExtractRequest) -> ExtractResult:
        """Read the whole file named ``request.FileName``.

        Raises:
            InvalidName: ``FileName`` escapes the storage root.
            NotFound: No such file.
            StorageIOError: The file cannot be opened or read.
        """
        target = self.resolve_path(request.FileName)

        with self._locks.hold(str(target)):
            logger.debug("Attempting to open file: %s", target)
            try:
                fh = open(target, "rb")
            except FileNotFoundError as e:
                logger.info("Extract of missing file %s", target)
                raise NotFound(f"File not found: {request.FileName}") from e
            except OSError as e:
                logger.error("Error opening file %s: %s", target, e)
                raise StorageIOError("Error opening file") from e

            with fh, _io_step("Error reading file content", target):
                data = fh.read()

        logger.info("Extracted %s (%d bytes)", target, len(data))
        return ExtractResult(FileBody=codec.encode(data))

    # ------------------------------------------------------------------
    # Filesystem helpers
    # ------------------------------------------------------------------

    def _ensure_root(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Error creating directory %s: %s", self._root, e)
            raise StorageUnavailable("Error creating storage directory") from e

    def _write_durably(self, target: Path, data: bytes) -> None:
        """Write ``data`` next to ``target`` and atomically move it into place."""
        with _io_step("Error opening file", target):
            fd, tmp_name = tempfile.mkstemp(
                dir=self._root, prefix=TEMP_PREFIX, suffix=".tmp"
            )
        tmp_path = Path(tmp_name)

        try:
            fh = os.fdopen(fd, "wb")
            try:
                with _io_step("Error opening file", target):
                    os.chmod(tmp_path, FILE_MODE)
                with _io_step("Error writing file", target):
                    fh.write(data)
                    fh.flush()
                with _io_step("Error syncing file", target):
                    os.fsync(fh.fileno())
            except StorageIOError:
                _close_after_failure(fh, tmp_path)
                raise

            # Some filesystems only report write errors on close.
            with _io_step("Error closing file", target):
                fh.close()
            with _io_step("Error writing file", target):
                os.replace(tmp_path, target)
        except BaseException:
            _discard(tmp_path)
            raise

        self._sync_directory()

    def _sync_directory(self) -> None:
        """Make the rename itself durable."""
        if os.name == "nt":
            # Directories cannot be opened for fsync on Windows.
            return
        with _io_step("Error syncing file", self._root):
            dir_fd = os.open(self._root, os.O_RDONLY)
            try:
                os.fsync(dir_fd)
            finally:
                os.close(dir_fd)


def _close_after_failure(fh, path: Path) -> None:
    try:
        fh.close()
    except OSError as e:
        logger.warning("Error closing %s after failed write: %s", path, e)


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary file %s: %s", path, e)
