"""Image generation module."""
from image.prompts import (
    HD_SUFFIX,
    QualityModifier,
    compose_prompt,
    build_generation_payload
)
from image.client import GeminiImageClient
from image.masks import apply_mask_to_image, render_stroke_mask, mask_has_strokes
from image.models import GenerateRequest, MagicEditRequest, RemoveBackgroundRequest, ApplyMaskRequest
from image.services import ImageService, build_image_service

__all__ = [
    "HD_SUFFIX",
    "QualityModifier",
    "compose_prompt",
    "build_generation_payload",
    "GeminiImageClient",
    "apply_mask_to_image",
    "render_stroke_mask",
    "mask_has_strokes",
    "GenerateRequest",
    "MagicEditRequest",
    "RemoveBackgroundRequest",
    "ApplyMaskRequest",
    "ImageService",
    "build_image_service"
]
