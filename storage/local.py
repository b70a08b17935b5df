"""Filesystem storage backend, served through the /assets static mount."""
import os
from typing import List
from urllib.parse import quote

from storage.base import AssetPublisher


class LocalAssetPublisher(AssetPublisher):
    """Stores assets at ``<root_dir>/<bucket>/<owner_key>/<file>``."""

    def __init__(self, root_dir: str, public_base: str, list_limit: int = 100):
        super().__init__(list_limit=list_limit)
        self.root_dir = root_dir
        self.public_base = public_base.rstrip("/")

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base}/{bucket}/{quote(path, safe='/@')}"

    def _store(self, bucket: str, path: str, data: bytes, mime_type: str) -> str:
        full_path = os.path.join(self.root_dir, bucket, path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        # "x" mode: an existing file is never overwritten
        with open(full_path, "xb") as f:
            f.write(data)
        return self.public_url(bucket, path)

    def _list(self, bucket: str, owner_key: str) -> List[str]:
        owner_dir = os.path.join(self.root_dir, bucket, owner_key)
        if not os.path.isdir(owner_dir):
            return []
        entries = [e for e in os.scandir(owner_dir) if e.is_file()]
        entries.sort(key=lambda e: e.stat().st_mtime, reverse=True)
        return [self.public_url(bucket, f"{owner_key}/{e.name}") for e in entries]
