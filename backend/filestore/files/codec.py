"""Text-safe encoding for file payloads.

File bodies travel inside JSON as standard padded base64 (RFC 4648
alphabet).  Decoding is strict: characters outside the alphabet, missing or
misplaced padding and non-ASCII input are rejected instead of being skipped.
"""
import base64
import binascii


class EncodingError(ValueError):
    """Raised when a payload is not valid padded base64."""


def encode(data: bytes) -> str:
    """Encode raw bytes as padded base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode(text: str) -> bytes:
    """Decode padded base64 text back into bytes.

    Args:
        text: Base64 text as received on the wire.

    Returns:
        The decoded bytes.

    Raises:
        EncodingError: If ``text`` contains invalid characters or bad padding.
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(str(e)) from e
