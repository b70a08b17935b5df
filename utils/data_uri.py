"""Helpers for inline (data URI) images and for loading image sources."""
import re
import asyncio
import base64
import binascii
import mimetypes
from typing import Tuple

import requests

from common.errors import InvalidEncodingError, ImageLoadError
from common.models import InlineImage
from utils.logger import get_logger

logger = get_logger("utils.data_uri")

_DATA_URI_RE = re.compile(r"^data:([a-zA-Z0-9]+/[a-zA-Z0-9\-.+]+)?[^,]*,(.*)$", re.DOTALL)


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """
    Split a ``data:<mime>;base64,<payload>`` URI into its MIME type and bytes.

    Raises:
        InvalidEncodingError: If the payload is missing or not valid base64,
            or the MIME type cannot be read.
    """
    match = _DATA_URI_RE.match(data_uri or "")
    if not match:
        raise InvalidEncodingError("Invalid data URI")

    mime_type, payload = match.group(1), match.group(2).strip()
    if not payload:
        raise InvalidEncodingError("Data URI has no payload")
    if not mime_type:
        raise InvalidEncodingError("Data URI has no MIME type")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Data URI payload is not valid base64: {e}")

    return mime_type.lower(), data


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def extension_for_mime_type(mime_type: str) -> str:
    """File extension for a stored asset: the MIME subtype without any +suffix."""
    subtype = mime_type.split("/", 1)[1] if "/" in mime_type else ""
    return subtype.split("+", 1)[0] or "png"


def is_data_uri(source: str) -> bool:
    return source.startswith("data:")


def _fetch_url(url: str, timeout: float) -> Tuple[str, bytes]:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    mime_type = response.headers.get("Content-Type", "").split(";", 1)[0].strip()
    if not mime_type.startswith("image/"):
        guessed, _ = mimetypes.guess_type(url)
        mime_type = guessed or "image/png"
    return mime_type, response.content


async def load_image_source(source: str, timeout: float = 30.0) -> InlineImage:
    """
    Resolve a data URI or http(s) URL into inline image data.

    URL fetches run in a worker thread so the event loop keeps serving
    other requests while the bytes arrive.

    Raises:
        ImageLoadError: If the URL cannot be fetched or the source is neither
            a data URI nor an http(s) URL.
        InvalidEncodingError: If a data URI is malformed.
    """
    if is_data_uri(source):
        mime_type, data = parse_data_uri(source)
        return InlineImage.from_bytes(data, mime_type)

    if not source.startswith(("http://", "https://")):
        raise ImageLoadError(f"Unsupported image source: {source[:40]}")

    try:
        mime_type, data = await asyncio.to_thread(_fetch_url, source, timeout)
    except requests.RequestException as e:
        logger.warning(f"Failed to fetch image {source}: {e}")
        raise ImageLoadError(f"Failed to fetch image: {e}")

    logger.debug(f"Fetched image {source} ({mime_type}, {len(data)} bytes)")
    return InlineImage.from_bytes(data, mime_type)
