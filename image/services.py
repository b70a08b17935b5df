"""Image generation services - fan-out, magic edit, background removal."""
import asyncio
from typing import List, Optional, Sequence, Tuple

from fastapi import HTTPException, Request

from auth.models import RequesterIdentity
from common.error_messages import ErrorCode, get_error_response
from common.errors import EmptyMaskError
from common.models import ImageUrl, InlineImage, PayloadPart
from config import Config
from image.client import GeminiImageClient
from image.masks import (
    apply_mask_to_image,
    decode_image,
    encode_png,
    mask_has_strokes,
    render_stroke_mask,
)
from image.models import GenerateRequest, Stroke
from image.prompts import (
    BACKGROUND_REMOVAL_INSTRUCTION,
    build_generation_payload,
    compose_prompt,
    reference_to_part,
)
from storage.base import AssetPublisher
from utils.data_uri import load_image_source
from utils.logger import get_logger

logger = get_logger("image.services")


class ImageService:
    """
    Runs the generation pipelines against an injected model client and publisher.

    One instance is built per application; it holds no per-request state, so
    concurrent requests and fan-out tasks share it freely.
    """

    def __init__(
        self,
        generator: GeminiImageClient,
        publisher: AssetPublisher,
        generated_bucket: str = Config.GENERATED_BUCKET,
        fetch_timeout: float = Config.FETCH_TIMEOUT_SECONDS
    ):
        self.generator = generator
        self.publisher = publisher
        self.generated_bucket = generated_bucket
        self.fetch_timeout = fetch_timeout

    async def _resolve_urls(self, payload: List[PayloadPart]) -> List[PayloadPart]:
        """Fetch URL parts once so every variation reuses the same bytes."""
        resolved = []
        for part in payload:
            if isinstance(part, ImageUrl):
                part = await load_image_source(part.url, timeout=self.fetch_timeout)
            resolved.append(part)
        return resolved

    async def _generate_and_publish(self, payload: List[PayloadPart], owner_key: str, index: int) -> str:
        image = await self.generator.generate_image(payload, empty_message="No image was generated in a variation.")
        url = await self.publisher.publish(image.to_data_uri(), self.generated_bucket, owner_key)
        logger.info(f"Variation {index + 1} published: {url}")
        return url

    async def generate_images(self, request: GenerateRequest, identity: RequesterIdentity) -> List[str]:
        """
        Generate ``num_variations`` images concurrently and publish each one.

        URLs come back in issue order. If any variation fails the whole call
        fails and no URLs are returned.
        """
        composed = compose_prompt(request.prompt, request.negative_prompt, request.quality)
        payload = build_generation_payload(composed, request.reference_image)
        payload = await self._resolve_urls(payload)

        logger.info(
            f"Generating {request.num_variations} variation(s) for user {identity.id}: {composed[:80]}..."
        )
        tasks = [
            self._generate_and_publish(payload, identity.owner_key, i)
            for i in range(request.num_variations)
        ]
        return list(await asyncio.gather(*tasks))

    async def _load_mask(
        self,
        mask_uri: Optional[str],
        strokes: Optional[Sequence[Stroke]],
        width: Optional[int],
        height: Optional[int]
    ) -> InlineImage:
        if strokes:
            paths = [(s.points, s.brush_radius) for s in strokes]
            mask = await asyncio.to_thread(render_stroke_mask, width, height, paths)
            if not await asyncio.to_thread(mask_has_strokes, mask):
                raise EmptyMaskError("Stroke mask is empty")
            return InlineImage.from_bytes(await asyncio.to_thread(encode_png, mask), "image/png")

        if not mask_uri:
            raise EmptyMaskError("No mask was provided")

        inline = await load_image_source(mask_uri, timeout=self.fetch_timeout)
        decoded = await asyncio.to_thread(decode_image, inline.to_bytes())
        if not await asyncio.to_thread(mask_has_strokes, decoded):
            raise EmptyMaskError("Mask has no drawn region")
        return inline

    async def magic_edit(
        self,
        prompt: str,
        image_uri: str,
        identity: RequesterIdentity,
        mask_uri: Optional[str] = None,
        strokes: Optional[Sequence[Stroke]] = None,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> str:
        """
        Regenerate the masked region of an image and publish the result.

        Raises:
            EmptyMaskError: The mask has no foreground; the model is not called.
        """
        mask = await self._load_mask(mask_uri, strokes, width, height)
        payload = [prompt, reference_to_part(image_uri), mask]

        logger.info(f"Magic edit for user {identity.id}: {prompt[:80]}")
        edited = await self.generator.generate_image(payload, empty_message="No image was generated from the magic edit.")
        return await self.publisher.publish(edited.to_data_uri(), self.generated_bucket, identity.owner_key)

    async def remove_background(self, image_uri: str) -> str:
        """Ask the model for a subject mask (white subject, black background) as a data URI."""
        payload = [BACKGROUND_REMOVAL_INSTRUCTION, reference_to_part(image_uri)]
        mask = await self.generator.generate_image(payload, empty_message="No mask was generated for background removal.")
        return mask.to_data_uri()

    async def remove_background_with_cutout(self, image_uri: str) -> Tuple[str, str]:
        """Mask plus the image clipped to it. A URL input is fetched once for both steps."""
        inline = await load_image_source(image_uri, timeout=self.fetch_timeout)
        image_uri = inline.to_data_uri()
        mask_uri = await self.remove_background(image_uri)
        return mask_uri, await self.apply_mask(image_uri, mask_uri)

    async def apply_mask(self, image_uri: str, mask_uri: str) -> str:
        """Clip an image to a mask; see image.masks.apply_mask_to_image."""
        return await apply_mask_to_image(image_uri, mask_uri, timeout=self.fetch_timeout)


def build_image_service(publisher: AssetPublisher, config=Config) -> ImageService:
    """Create the service with a Gemini client configured from ``config``."""
    generator = GeminiImageClient(
        api_key=config.get_gemini_api_key(),
        model=config.GEMINI_MODEL,
        fetch_timeout=config.FETCH_TIMEOUT_SECONDS
    )
    return ImageService(
        generator,
        publisher,
        generated_bucket=config.GENERATED_BUCKET,
        fetch_timeout=config.FETCH_TIMEOUT_SECONDS
    )


def get_image_service(request: Request) -> ImageService:
    """FastAPI dependency: the image service built for this app instance."""
    service = getattr(request.app.state, "image_service", None)
    if service is None:
        message, status_code = get_error_response(ErrorCode.CONFIGURATION_ERROR)
        raise HTTPException(status_code=status_code, detail=message)
    return service
