"""
Client-facing error messages and HTTP status codes.

Every failure a route reports goes through an ErrorCode so that clients see a
stable message and never a stack trace or provider error text.
"""
from typing import Tuple, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Failure categories reported to clients."""

    # Authentication Errors (401)
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    MISSING_IDENTITY = "MISSING_IDENTITY"

    # Validation Errors (400)
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    INVALID_IMAGE_DATA = "INVALID_IMAGE_DATA"
    IMAGE_LOAD_ERROR = "IMAGE_LOAD_ERROR"
    EMPTY_MASK = "EMPTY_MASK"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # External API Errors (502)
    GEMINI_API_ERROR = "GEMINI_API_ERROR"
    NO_CONTENT_GENERATED = "NO_CONTENT_GENERATED"

    # Storage Errors (500)
    FILE_SAVE_ERROR = "FILE_SAVE_ERROR"

    # Configuration Errors (500)
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Generic Errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# User-friendly error messages mapped to error codes
ERROR_MESSAGES = {
    ErrorCode.INVALID_TOKEN: "Your session is invalid. Please log in again.",
    ErrorCode.TOKEN_EXPIRED: "Your session has expired. Please log in again to continue.",
    ErrorCode.MISSING_IDENTITY: "You need to be logged in to generate images.",

    ErrorCode.MISSING_FIELD: "Required information is missing. Please check your input and try again.",
    ErrorCode.INVALID_PARAMETER: "One or more parameters are invalid. Please review your request and try again.",
    ErrorCode.INVALID_IMAGE_DATA: "The image data provided is invalid or corrupted. Please try with a different image.",
    ErrorCode.IMAGE_LOAD_ERROR: "We couldn't load one of the images. Please try with a different image.",
    ErrorCode.EMPTY_MASK: "Please draw over the area you want to edit before applying a magic edit.",
    ErrorCode.FILE_TOO_LARGE: "The file is too large. Please upload an image under 10MB.",

    ErrorCode.GEMINI_API_ERROR: "We're having trouble connecting to our AI service. Please try again in a few moments.",
    ErrorCode.NO_CONTENT_GENERATED: "No image was generated. Please try rephrasing your prompt.",

    ErrorCode.FILE_SAVE_ERROR: "We couldn't save your image. Please try again.",

    ErrorCode.CONFIGURATION_ERROR: "There's a configuration problem with the service. Please contact support.",

    ErrorCode.UNKNOWN_ERROR: "Something unexpected happened. Please try again.",
}


# HTTP status codes for each error type
ERROR_STATUS_CODES = {
    ErrorCode.INVALID_TOKEN: 401,
    ErrorCode.TOKEN_EXPIRED: 401,
    ErrorCode.MISSING_IDENTITY: 401,

    ErrorCode.MISSING_FIELD: 400,
    ErrorCode.INVALID_PARAMETER: 400,
    ErrorCode.INVALID_IMAGE_DATA: 400,
    ErrorCode.IMAGE_LOAD_ERROR: 400,
    ErrorCode.EMPTY_MASK: 400,
    ErrorCode.FILE_TOO_LARGE: 413,

    ErrorCode.GEMINI_API_ERROR: 502,
    ErrorCode.NO_CONTENT_GENERATED: 502,

    ErrorCode.FILE_SAVE_ERROR: 500,

    ErrorCode.CONFIGURATION_ERROR: 500,

    ErrorCode.UNKNOWN_ERROR: 500,
}


def get_error_response(
    error_code: ErrorCode,
    custom_message: Optional[str] = None
) -> Tuple[str, int]:
    """
    Look up the message and status for an error code.

    Unknown codes fall back to UNKNOWN_ERROR. ``custom_message`` is appended
    to the standard text when given.

    Returns:
        Tuple of (message, status_code)
    """
    message = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])
    status_code = ERROR_STATUS_CODES.get(error_code, 500)

    if custom_message:
        message = f"{message} {custom_message}"

    return message, status_code
