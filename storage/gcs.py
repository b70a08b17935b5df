"""Google Cloud Storage backend.

Each logical bucket (``generated-files``, ``chat-attachments``) maps to the GCS
bucket ``<bucket_prefix><bucket>``. Objects are public-read; callers receive
``blob.public_url``.
"""
from datetime import datetime, timezone
from typing import List, Optional

from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage

from storage.base import AssetPublisher

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class GCSAssetPublisher(AssetPublisher):
    """Wrapper around Google Cloud Storage uploads and listings."""

    storage_errors = (gcs_exceptions.GoogleAPIError, OSError)

    def __init__(self, bucket_prefix: str = "", list_limit: int = 100, client: Optional[storage.Client] = None):
        super().__init__(list_limit=list_limit)
        self.bucket_prefix = bucket_prefix
        self._client = client or storage.Client()

    def _bucket_name(self, bucket: str) -> str:
        return f"{self.bucket_prefix}{bucket}"

    def _store(self, bucket: str, path: str, data: bytes, mime_type: str) -> str:
        blob = self._client.bucket(self._bucket_name(bucket)).blob(path)
        # if_generation_match=0: fail instead of overwriting an existing object
        blob.upload_from_string(data, content_type=mime_type, if_generation_match=0)
        return blob.public_url

    def _list(self, bucket: str, owner_key: str) -> List[str]:
        blobs = self._client.list_blobs(self._bucket_name(bucket), prefix=f"{owner_key}/")
        newest_first = sorted(blobs, key=lambda b: b.time_created or _EPOCH, reverse=True)
        return [b.public_url for b in newest_first[:self.list_limit]]
