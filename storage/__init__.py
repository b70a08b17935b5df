"""Storage module."""
from storage.base import AssetPublisher, build_asset_path
from storage.local import LocalAssetPublisher
from storage.services import build_publisher, get_publisher, list_library

__all__ = [
    "AssetPublisher",
    "build_asset_path",
    "LocalAssetPublisher",
    "build_publisher",
    "get_publisher",
    "list_library"
]
