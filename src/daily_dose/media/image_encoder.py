"""Image ingestion - picked files become data URIs stored on the record."""

import base64
import logging
import mimetypes
from pathlib import Path

from daily_dose.errors import ValidationError

logger = logging.getLogger(__name__)


def encode_image_bytes(data: bytes, mime_type: str) -> str:
    """Encode raw image bytes as a data URI. No size limit is applied."""
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError(f"Not an image: {mime_type or 'unknown type'}")
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def encode_image_file(path: Path | str) -> str:
    """Read an image file fully and encode it as a data URI."""
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    data = path.read_bytes()
    logger.debug("Encoding %s (%d bytes) as %s", path.name, len(data), mime_type)
    return encode_image_bytes(data, mime_type or "")
