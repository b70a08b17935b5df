"""Image generation Pydantic models."""
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, model_validator

from config import Config
from image.prompts import QualityModifier


class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1, description="What to generate")
    negative_prompt: Optional[str] = Field(None, description="Things to avoid in the image")
    quality: Optional[QualityModifier] = Field(None, description="standard or hd")
    reference_image: Optional[str] = Field(None, description="Public URL or data URI of a reference photo")
    num_variations: int = Field(1, ge=1, le=Config.MAX_VARIATIONS, description="Number of images to generate")


class GenerateResponse(BaseModel):
    image_urls: List[str] = Field(..., description="Public URLs of the generated images, in request order")


class Stroke(BaseModel):
    """One brush stroke drawn over the image, in image pixel coordinates."""
    points: List[Tuple[float, float]] = Field(..., description="Stroke path as (x, y) points")
    brush_radius: float = Field(20.0, gt=0)


class MagicEditRequest(BaseModel):
    prompt: str = Field(..., min_length=1, description="Edit instruction")
    image_data_uri: str = Field(..., description="Original image as a data URI or URL")
    mask_data_uri: Optional[str] = Field(None, description="Mask image, white = area to edit")
    strokes: Optional[List[Stroke]] = Field(None, description="Brush strokes to render as the mask")
    width: Optional[int] = Field(None, gt=0, le=Config.MAX_MASK_DIMENSION, description="Mask width when sending strokes")
    height: Optional[int] = Field(None, gt=0, le=Config.MAX_MASK_DIMENSION, description="Mask height when sending strokes")

    @model_validator(mode="after")
    def _check_mask_source(self):
        if self.mask_data_uri and self.strokes:
            raise ValueError("send either mask_data_uri or strokes, not both")
        if self.strokes and not (self.width and self.height):
            raise ValueError("width and height are required with strokes")
        return self


class MagicEditResponse(BaseModel):
    image_url: str = Field(..., description="Public URL of the edited image")


class RemoveBackgroundRequest(BaseModel):
    image_data_uri: str = Field(..., description="Image as a data URI or URL")
    composite: bool = Field(False, description="Also return the image clipped to the mask")


class RemoveBackgroundResponse(BaseModel):
    mask_data_uri: str = Field(..., description="Subject mask: white subject, black background")
    cutout_data_uri: Optional[str] = Field(None, description="PNG with a transparent background")


class ApplyMaskRequest(BaseModel):
    image_data_uri: str = Field(..., description="Original image as a data URI or URL")
    mask_data_uri: str = Field(..., description="Mask image, white = keep")


class ApplyMaskResponse(BaseModel):
    image_data_uri: str = Field(..., description="PNG data URI, transparent outside the mask")
