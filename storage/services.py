"""Storage wiring and library helpers."""
import asyncio

from fastapi import Request

from config import Config
from storage.base import AssetPublisher
from storage.local import LocalAssetPublisher
from storage.models import LibraryResponse
from utils.logger import get_logger

logger = get_logger("storage.services")

ALLOWED_UPLOAD_TYPES = ("image/png", "image/jpeg", "image/webp")


def build_publisher(config=Config) -> AssetPublisher:
    """Create the storage backend selected by STORAGE_BACKEND."""
    if config.STORAGE_BACKEND == "gcs":
        from storage.gcs import GCSAssetPublisher
        logger.info(f"Using Google Cloud Storage (bucket prefix: '{config.GCS_BUCKET_PREFIX}')")
        return GCSAssetPublisher(bucket_prefix=config.GCS_BUCKET_PREFIX, list_limit=config.LIST_LIMIT)

    logger.info(f"Using local storage at {config.STORAGE_DIR}")
    return LocalAssetPublisher(config.STORAGE_DIR, config.STORAGE_PUBLIC_BASE, list_limit=config.LIST_LIMIT)


def get_publisher(request: Request) -> AssetPublisher:
    """FastAPI dependency: the publisher built for this app instance."""
    return request.app.state.publisher


async def list_library(publisher: AssetPublisher, owner_key: str, config=Config) -> LibraryResponse:
    """List an owner's generated and uploaded images side by side."""
    generated, uploaded = await asyncio.gather(
        publisher.list_assets(config.GENERATED_BUCKET, owner_key),
        publisher.list_assets(config.UPLOADS_BUCKET, owner_key),
    )
    return LibraryResponse(generated=generated, uploaded=uploaded)
