"""Upload helpers: turn an uploaded image into a data URL and split data URLs for Gemini."""

from __future__ import annotations

import base64
import io
import mimetypes
import re
from typing import BinaryIO, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from plant_suggest.utils.errors import FormatError, ReadError
from plant_suggest.utils.logger import get_file_logger
from plant_suggest.utils.schema_utils import ImagePayload

logger = get_file_logger()

# Extensions offered by the file uploader
SUPPORTED_IMAGE_TYPES = ["png", "jpg", "jpeg", "webp"]
SUPPORTED_MIME_TYPES = {"image/png", "image/jpeg", "image/webp"}

_MIME_TOKEN = re.compile(r":(.*?);")

UploadSource = Union[bytes, bytearray, BinaryIO]


def _read_bytes(file: UploadSource) -> bytes:
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    # Streamlit's UploadedFile is a BytesIO; getvalue() ignores the read position
    if hasattr(file, "getvalue"):
        return file.getvalue()
    return file.read()


def _resolve_mime_type(file: UploadSource, mime_type: Optional[str]) -> Optional[str]:
    if mime_type:
        return mime_type
    declared = getattr(file, "type", None)
    if declared:
        return declared
    name = getattr(file, "name", None)
    if name:
        return mimetypes.guess_type(str(name))[0]
    return None


def encode_to_data_url(file: UploadSource, mime_type: Optional[str] = None) -> str:
    """
    Read an uploaded image and return it as a ``data:<mime>;base64,<payload>`` URL.

    Args:
        file: Raw bytes, a Streamlit UploadedFile or any binary file object
        mime_type: Explicit media type; otherwise taken from the upload or its file name

    Raises:
        ReadError: the file cannot be read, is empty, or is not a PNG/JPEG/WEBP image
    """
    name = getattr(file, "name", "<bytes>")
    try:
        data = _read_bytes(file)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read upload {name}: {e}", exc_info=True)
        raise ReadError(f"Failed to read file: {e}") from e

    if not data:
        raise ReadError("Failed to read file: the upload is empty.")

    resolved = _resolve_mime_type(file, mime_type)
    if resolved not in SUPPORTED_MIME_TYPES:
        raise ReadError(f"Unsupported image type: {resolved or 'unknown'}")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.error(f"Upload {name} is not a readable image: {e}")
        raise ReadError(f"Failed to read file: {name} is not a valid image.") from e

    logger.debug(f"Encoded {name} ({resolved}, {len(data)} bytes) to data URL")
    return f"data:{resolved};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(data_url: str) -> ImagePayload:
    """Split a data URL into its base64 payload and media type (no byte decoding)."""
    parts = data_url.split(",")
    if len(parts) != 2:
        raise FormatError("Invalid data URL format")

    match = _MIME_TOKEN.search(parts[0])
    if not match or not match.group(1):
        raise FormatError("Could not determine MIME type from data URL")

    return ImagePayload(data=parts[1], mime_type=match.group(1))


def image_size(data_url: str) -> Tuple[int, int]:
    """Pixel dimensions of the image held in a data URL."""
    payload = decode_data_url(data_url)
    try:
        raw = base64.b64decode(payload.data)
        with Image.open(io.BytesIO(raw)) as img:
            return img.size
    except (ValueError, UnidentifiedImageError, OSError) as e:
        raise FormatError(f"Data URL does not contain a readable image: {e}") from e


def data_url_to_bytes(data_url: str) -> bytes:
    """Raw image bytes of a data URL, for widgets that want bytes rather than URLs."""
    payload = decode_data_url(data_url)
    try:
        return base64.b64decode(payload.data)
    except ValueError as e:
        raise FormatError(f"Data URL payload is not valid base64: {e}") from e
