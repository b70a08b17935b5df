"""Gemini image generation client."""
from typing import Any, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from common.errors import GenerationEmptyError, GenerationServiceError
from common.models import GenerationOutcome, ImageUrl, InlineImage, OutcomeStatus, PayloadPart
from utils.data_uri import load_image_source
from utils.logger import get_logger

logger = get_logger("image.client")

RESPONSE_MODALITIES = ["TEXT", "IMAGE"]


def parse_generation_response(response: Any) -> GenerationOutcome:
    """
    Pick the first inline image out of a generate_content response.

    Text parts are collected alongside; a response with no image data is
    an ``empty`` outcome.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates or not getattr(candidates[0], "content", None):
        return GenerationOutcome.empty()

    text_parts = []
    image = None
    for part in getattr(candidates[0].content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            if image is None:
                image = InlineImage.from_bytes(inline.data, inline.mime_type or "image/png")
            continue
        text = getattr(part, "text", None)
        if text:
            text_parts.append(text)

    text = "\n".join(text_parts).strip()
    if image is None:
        return GenerationOutcome.empty(text=text)
    return GenerationOutcome.ok(image, text=text)


class GeminiImageClient:
    """Sends ordered text/image payloads to a Gemini image model."""

    def __init__(self, api_key: str, model: str, client: Optional[genai.Client] = None, fetch_timeout: float = 30.0):
        self.model = model
        self.fetch_timeout = fetch_timeout
        self._client = client or genai.Client(api_key=api_key)

    async def _to_parts(self, payload: List[PayloadPart]) -> List[types.Part]:
        parts = []
        for item in payload:
            if isinstance(item, str):
                parts.append(types.Part.from_text(text=item))
                continue
            if isinstance(item, ImageUrl):
                item = await load_image_source(item.url, timeout=self.fetch_timeout)
            parts.append(types.Part(
                inline_data=types.Blob(mime_type=item.mime_type, data=item.to_bytes())
            ))
        return parts

    async def generate(self, payload: List[PayloadPart]) -> GenerationOutcome:
        """Call the model once. SDK failures become an ``error`` outcome."""
        parts = await self._to_parts(payload)
        contents = [types.Content(role="user", parts=parts)]
        config = types.GenerateContentConfig(response_modalities=RESPONSE_MODALITIES)

        logger.info(f"Calling {self.model} with {len(parts)} part(s)")
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model, contents=contents, config=config
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error(f"Gemini request failed: {e!r}")
            return GenerationOutcome.error(str(e))

        return parse_generation_response(response)

    async def generate_image(self, payload: List[PayloadPart], empty_message: str = "No image was generated.") -> InlineImage:
        """
        Call the model and return the produced image.

        Raises:
            GenerationEmptyError: The model returned no image. Not retried.
            GenerationServiceError: The call failed.
        """
        outcome = await self.generate(payload)
        if outcome.status == OutcomeStatus.OK:
            logger.info(f"Model returned {outcome.image.mime_type} image")
            return outcome.image
        if outcome.status == OutcomeStatus.EMPTY:
            logger.warning(f"{empty_message} Model text: {outcome.text[:200]!r}")
            raise GenerationEmptyError(empty_message)
        if outcome.status == OutcomeStatus.ERROR:
            raise GenerationServiceError(outcome.reason)
        raise AssertionError(f"unhandled outcome status {outcome.status}")
