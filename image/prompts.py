"""Prompt composition and payload assembly for generation requests."""
from enum import Enum
from typing import List, Optional

from common.models import ImageUrl, InlineImage, PayloadPart
from utils.data_uri import is_data_uri, parse_data_uri

HD_SUFFIX = ", 4k, HD, high resolution"

BACKGROUND_REMOVAL_INSTRUCTION = (
    "Create a segmentation mask of the primary subject in this image. "
    "The subject should be solid white and the background solid black. "
    "Do not include any other text or elements, only the mask itself."
)


class QualityModifier(str, Enum):
    STANDARD = "standard"
    HD = "hd"


def compose_prompt(
    prompt: str,
    negative_prompt: Optional[str] = None,
    quality: Optional[QualityModifier] = None
) -> str:
    """
    Build the final text prompt.

    The HD suffix comes first, then the ``avoid`` clause:
    ``"a red balloon, 4k, HD, high resolution, avoid blurry"``.
    """
    if not prompt or not prompt.strip():
        raise ValueError("prompt must not be empty")

    composed = prompt
    if quality == QualityModifier.HD:
        composed += HD_SUFFIX
    if negative_prompt and negative_prompt.strip():
        composed += f", avoid {negative_prompt}"
    return composed


def reference_to_part(reference_image: str) -> PayloadPart:
    """Data URIs become inline images; anything else is treated as a URL."""
    if is_data_uri(reference_image):
        mime_type, data = parse_data_uri(reference_image)
        return InlineImage.from_bytes(data, mime_type)
    return ImageUrl(url=reference_image)


def build_generation_payload(composed_prompt: str, reference_image: Optional[str] = None) -> List[PayloadPart]:
    """Payload for a generation call; the reference image, if any, precedes the text."""
    payload: List[PayloadPart] = [composed_prompt]
    if reference_image:
        payload.insert(0, reference_to_part(reference_image))
    return payload
