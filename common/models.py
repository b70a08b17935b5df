"""Shared models for the generation pipeline."""
import base64
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field


class InlineImage(BaseModel):
    """Image embedded as base64 data, matching the Gemini inline_data format."""
    mime_type: str = Field(..., description="Image MIME type (e.g., image/png, image/jpeg)")
    data: str = Field(..., description="Base64-encoded image data")

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "InlineImage":
        return cls(mime_type=mime_type, data=base64.b64encode(data).decode("utf-8"))

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class ImageUrl(BaseModel):
    """Image referenced by a public URL; fetched before it is sent to the model."""
    url: str = Field(..., description="Public http(s) URL of the image")


# One element of a generation request, in the order the model receives them
PayloadPart = Union[str, InlineImage, ImageUrl]


class OutcomeStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


class GenerationOutcome(BaseModel):
    """Result of a single model call: ok(image) | empty | error(reason)."""
    status: OutcomeStatus
    image: Optional[InlineImage] = None
    reason: Optional[str] = None
    text: str = Field("", description="Any text the model returned alongside the image")

    @classmethod
    def ok(cls, image: InlineImage, text: str = "") -> "GenerationOutcome":
        return cls(status=OutcomeStatus.OK, image=image, text=text)

    @classmethod
    def empty(cls, text: str = "") -> "GenerationOutcome":
        return cls(status=OutcomeStatus.EMPTY, text=text)

    @classmethod
    def error(cls, reason: str) -> "GenerationOutcome":
        return cls(status=OutcomeStatus.ERROR, reason=reason)
