"""Utils module."""
from utils.logger import setup_logger, get_logger, app_logger
from utils.data_uri import (
    parse_data_uri,
    to_data_uri,
    extension_for_mime_type,
    load_image_source,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "app_logger",
    "parse_data_uri",
    "to_data_uri",
    "extension_for_mime_type",
    "load_image_source",
]
