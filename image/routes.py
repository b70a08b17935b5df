"""Image generation and editing routes."""
from fastapi import APIRouter, HTTPException, Depends

from auth.models import RequesterIdentity
from auth.services import get_current_identity
from common.error_messages import ErrorCode, get_error_response
from common.errors import RenderriError
from image.models import (
    GenerateRequest,
    GenerateResponse,
    MagicEditRequest,
    MagicEditResponse,
    RemoveBackgroundRequest,
    RemoveBackgroundResponse,
    ApplyMaskRequest,
    ApplyMaskResponse,
)
from image.services import ImageService, get_image_service
from utils.logger import get_logger

logger = get_logger("image")
router = APIRouter(prefix="/api", tags=["image"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    req: GenerateRequest,
    identity: RequesterIdentity = Depends(get_current_identity),
    service: ImageService = Depends(get_image_service)
):
    """
    Generate images from a prompt using Gemini.

    Accepts:
      { prompt, negative_prompt?, quality?: "standard"|"hd",
        reference_image?: url | data URI, num_variations?: 1..4 }

    All variations run concurrently; if any one fails the request fails.
    """
    if not req.prompt.strip():
        message, status_code = get_error_response(ErrorCode.MISSING_FIELD)
        raise HTTPException(status_code=status_code, detail=message)

    try:
        urls = await service.generate_images(req, identity)
    except RenderriError as e:
        logger.error(f"Image generation failed for user {identity.id}: {e}")
        raise e.to_http_exception()

    logger.info(f"Generated {len(urls)} image(s) for user {identity.id}")
    return GenerateResponse(image_urls=urls)


@router.post("/magic-edit", response_model=MagicEditResponse)
async def magic_edit(
    req: MagicEditRequest,
    identity: RequesterIdentity = Depends(get_current_identity),
    service: ImageService = Depends(get_image_service)
):
    """Inpaint the masked region of an image according to the prompt."""
    if not req.prompt.strip():
        message, status_code = get_error_response(ErrorCode.MISSING_FIELD)
        raise HTTPException(status_code=status_code, detail=message)

    try:
        url = await service.magic_edit(
            req.prompt,
            req.image_data_uri,
            identity,
            mask_uri=req.mask_data_uri,
            strokes=req.strokes,
            width=req.width,
            height=req.height
        )
    except RenderriError as e:
        logger.error(f"Magic edit failed for user {identity.id}: {e}")
        raise e.to_http_exception()

    return MagicEditResponse(image_url=url)


@router.post("/remove-background", response_model=RemoveBackgroundResponse)
async def remove_background(
    req: RemoveBackgroundRequest,
    identity: RequesterIdentity = Depends(get_current_identity),
    service: ImageService = Depends(get_image_service)
):
    """Produce a subject mask, and optionally the image cut out along it."""
    try:
        if req.composite:
            mask_uri, cutout = await service.remove_background_with_cutout(req.image_data_uri)
        else:
            mask_uri, cutout = await service.remove_background(req.image_data_uri), None
    except RenderriError as e:
        logger.error(f"Background removal failed for user {identity.id}: {e}")
        raise e.to_http_exception()

    return RemoveBackgroundResponse(mask_data_uri=mask_uri, cutout_data_uri=cutout)


@router.post("/apply-mask", response_model=ApplyMaskResponse)
async def apply_mask(
    req: ApplyMaskRequest,
    identity: RequesterIdentity = Depends(get_current_identity),
    service: ImageService = Depends(get_image_service)
):
    """Make everything outside the mask transparent."""
    try:
        result = await service.apply_mask(req.image_data_uri, req.mask_data_uri)
    except RenderriError as e:
        logger.warning(f"Apply mask failed for user {identity.id}: {e}")
        raise e.to_http_exception()

    return ApplyMaskResponse(image_data_uri=result)
