"""Error hierarchy for storage operations.

Every failure of a storage operation is a ``StorageError`` carrying a
machine-readable code, the HTTP status it maps to, and a caller-facing
message.  Messages never contain server filesystem paths; the path and the
underlying ``OSError`` go to the log instead.
"""


class StorageError(Exception):
    """Base exception for all storage failures."""

    code = "STORAGE_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        """Render the uniform error envelope."""
        return {"Success": False, "Message": self.message}


class MalformedRequest(StorageError):
    """Request body is not parseable JSON of the expected shape."""

    code = "MALFORMED_REQUEST"
    http_status = 400


class DecodeError(StorageError):
    """``FileBody`` is not valid base64."""

    code = "DECODE_ERROR"
    http_status = 400


class InvalidName(StorageError):
    """``FileName`` does not denote a file directly under the storage root."""

    code = "INVALID_NAME"
    http_status = 400


class NotFound(StorageError):
    """Target file does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class StorageUnavailable(StorageError):
    """Storage root cannot be created or accessed."""

    code = "STORAGE_UNAVAILABLE"
    http_status = 500


class StorageIOError(StorageError):
    """Open, write, flush, close or read failure."""

    code = "IO_ERROR"
    http_status = 500
