"""Common module."""
from common.error_messages import ErrorCode, get_error_response
from common.errors import (
    RenderriError,
    GenerationEmptyError,
    GenerationServiceError,
    EmptyMaskError,
    InvalidEncodingError,
    UploadError,
    ImageLoadError,
)
from common.models import InlineImage, ImageUrl, PayloadPart, GenerationOutcome, OutcomeStatus

__all__ = [
    "ErrorCode",
    "get_error_response",
    "RenderriError",
    "GenerationEmptyError",
    "GenerationServiceError",
    "EmptyMaskError",
    "InvalidEncodingError",
    "UploadError",
    "ImageLoadError",
    "InlineImage",
    "ImageUrl",
    "PayloadPart",
    "GenerationOutcome",
    "OutcomeStatus",
]
