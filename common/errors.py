"""Exceptions raised by the generation and storage pipeline."""
from fastapi import HTTPException

from common.error_messages import ErrorCode, get_error_response


class RenderriError(Exception):
    """Base class for pipeline failures. Each subclass maps to one ErrorCode."""

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def to_http_exception(self) -> HTTPException:
        message, status_code = get_error_response(self.error_code)
        return HTTPException(status_code=status_code, detail=message)


class GenerationEmptyError(RenderriError):
    """The model answered but returned no image."""
    error_code = ErrorCode.NO_CONTENT_GENERATED


class GenerationServiceError(RenderriError):
    """The model call itself failed."""
    error_code = ErrorCode.GEMINI_API_ERROR


class EmptyMaskError(RenderriError):
    """A magic edit was submitted without any drawn region."""
    error_code = ErrorCode.EMPTY_MASK


class InvalidEncodingError(RenderriError):
    """Inline image data is missing its base64 payload or MIME type."""
    error_code = ErrorCode.INVALID_IMAGE_DATA


class UploadError(RenderriError):
    """Writing to object storage failed."""
    error_code = ErrorCode.FILE_SAVE_ERROR


class ImageLoadError(RenderriError):
    """An input image could not be fetched or decoded."""
    error_code = ErrorCode.IMAGE_LOAD_ERROR
