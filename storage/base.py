"""Publisher interface: turns inline image bytes into a stable public URL."""
import asyncio
from typing import List, Tuple, Type
from uuid import uuid4

from common.errors import UploadError
from utils.data_uri import parse_data_uri, extension_for_mime_type
from utils.logger import get_logger

logger = get_logger("storage")


def _check_segment(value: str, what: str) -> str:
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise UploadError(f"Invalid {what}: {value!r}")
    return value


def build_asset_path(owner_key: str, mime_type: str) -> str:
    """Storage path for a new asset: ``{owner_key}/{uuid4}.{ext}``."""
    _check_segment(owner_key, "owner key")
    return f"{owner_key}/{uuid4()}.{extension_for_mime_type(mime_type)}"


class AssetPublisher:
    """
    Base class for storage backends.

    Subclasses implement the blocking ``_store`` and ``_list`` calls; this class
    runs them off the event loop and applies the shared error policy:
    write failures raise UploadError, listing failures degrade to an empty list.
    """

    # Exceptions from the backend that count as storage failures
    storage_errors: Tuple[Type[BaseException], ...] = (OSError,)

    def __init__(self, list_limit: int = 100):
        self.list_limit = list_limit

    def _store(self, bucket: str, path: str, data: bytes, mime_type: str) -> str:
        raise NotImplementedError

    def _list(self, bucket: str, owner_key: str) -> List[str]:
        raise NotImplementedError

    async def publish(self, data_uri: str, bucket: str, owner_key: str) -> str:
        """
        Persist an inline (data URI) image and return its public URL.

        Raises:
            InvalidEncodingError: If the data URI is malformed.
            UploadError: If the storage write fails.
        """
        mime_type, data = parse_data_uri(data_uri)
        return await self.publish_bytes(data, mime_type, bucket, owner_key)

    async def publish_bytes(self, data: bytes, mime_type: str, bucket: str, owner_key: str) -> str:
        """Persist raw image bytes and return the public URL."""
        _check_segment(bucket, "bucket")
        path = build_asset_path(owner_key, mime_type)
        try:
            public_url = await asyncio.to_thread(self._store, bucket, path, data, mime_type)
        except self.storage_errors as e:
            logger.error(f"Failed to upload {path} to {bucket}: {e}")
            raise UploadError(f"Failed to upload image to {bucket}: {e}")

        logger.info(f"Stored {bucket}/{path} ({mime_type}, {len(data)} bytes)")
        return public_url

    async def list_assets(self, bucket: str, owner_key: str) -> List[str]:
        """Public URLs of an owner's assets in a bucket, newest first. Errors give []."""
        try:
            _check_segment(bucket, "bucket")
            _check_segment(owner_key, "owner key")
            urls = await asyncio.to_thread(self._list, bucket, owner_key)
        except (UploadError,) + self.storage_errors as e:
            logger.error(f"Failed to list images from {bucket}: {e}")
            return []
        return urls[:self.list_limit]
