"""Mask handling with Pillow: stroke rendering, emptiness checks, alpha clipping.

Masks are white for foreground (keep / edit) and black for background.
A mask's effective alpha is its luminance multiplied by its own alpha channel,
so a transparent stroke layer counts as background.
"""
import io
import asyncio
from typing import Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw, UnidentifiedImageError

from common.errors import ImageLoadError, InvalidEncodingError
from utils.data_uri import load_image_source, to_data_uri

Point = Tuple[float, float]
StrokePath = Tuple[Sequence[Point], float]


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes, raising ImageLoadError if Pillow cannot read them."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageLoadError(f"Could not decode image: {e}")
    return img


async def load_image(uri: str, timeout: float = 30.0) -> Image.Image:
    """Load a data URI or URL into a Pillow image."""
    try:
        inline = await load_image_source(uri, timeout=timeout)
    except InvalidEncodingError as e:
        raise ImageLoadError(str(e))
    return decode_image(inline.to_bytes())


def encode_png(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def encode_png_data_uri(img: Image.Image) -> str:
    return to_data_uri(encode_png(img), "image/png")


def mask_alpha(mask: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Effective alpha (mode L) of a mask, scaled to ``size``."""
    rgba = mask.convert("RGBA")
    if rgba.size != size:
        rgba = rgba.resize(size, Image.BILINEAR)
    return ImageChops.multiply(rgba.convert("L"), rgba.getchannel("A"))


def mask_has_strokes(mask: Image.Image) -> bool:
    """True when any pixel of the mask is non-background."""
    return mask_alpha(mask, mask.size).getbbox() is not None


def composite_with_mask(original: Image.Image, mask: Image.Image) -> Image.Image:
    """
    Keep the original only where the mask is foreground.

    Output alpha is min(original alpha, mask alpha); pixels whose output alpha
    is zero become fully transparent (0, 0, 0, 0).
    """
    rgba = original.convert("RGBA")
    clip = mask_alpha(mask, rgba.size)

    r, g, b, a = rgba.split()
    alpha = ImageChops.darker(a, clip)
    clipped = Image.merge("RGBA", (r, g, b, alpha))

    visible = alpha.point(lambda v: 255 if v else 0)
    transparent = Image.new("RGBA", rgba.size, (0, 0, 0, 0))
    return Image.composite(clipped, transparent, visible)


async def apply_mask_to_image(original_uri: str, mask_uri: str, timeout: float = 30.0) -> str:
    """
    Make everything outside the mask transparent.

    Args:
        original_uri: Data URI or URL of the original image
        mask_uri: Data URI or URL of the mask (white foreground, black background)

    Returns:
        PNG data URI of the clipped image

    Raises:
        ImageLoadError: If either image cannot be loaded or decoded
    """
    original, mask = await asyncio.gather(
        load_image(original_uri, timeout=timeout),
        load_image(mask_uri, timeout=timeout),
    )
    result = await asyncio.to_thread(composite_with_mask, original, mask)
    return await asyncio.to_thread(encode_png_data_uri, result)


def render_stroke_mask(width: int, height: int, strokes: Sequence[StrokePath]) -> Image.Image:
    """Draw brush strokes white on a black canvas of the given size."""
    mask = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(mask)
    for points, radius in strokes:
        if not points:
            continue
        pts = [(float(x), float(y)) for x, y in points]
        if len(pts) > 1:
            draw.line(pts, fill=255, width=max(1, int(round(radius * 2))), joint="curve")
        # Round caps and single-point dabs
        for x, y in pts:
            draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=255)
    return mask
