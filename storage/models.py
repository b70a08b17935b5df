"""Pydantic models for uploads and the image library."""
from typing import List
from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    url: str = Field(..., description="Public URL of the uploaded image, usable as reference_image")


class LibraryResponse(BaseModel):
    generated: List[str] = Field(default_factory=list, description="Generated and edited images, newest first")
    uploaded: List[str] = Field(default_factory=list, description="Uploaded reference images, newest first")
