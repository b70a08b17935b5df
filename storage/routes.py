"""Upload and library routes."""
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File

from auth.models import RequesterIdentity
from auth.services import get_current_identity
from common.error_messages import ErrorCode, get_error_response
from common.errors import RenderriError
from config import Config
from storage.base import AssetPublisher
from storage.models import UploadResponse, LibraryResponse
from storage.services import ALLOWED_UPLOAD_TYPES, get_publisher, list_library
from utils.logger import get_logger

logger = get_logger("storage.routes")
router = APIRouter(prefix="/api", tags=["storage"])


@router.post("/uploads", response_model=UploadResponse)
async def upload_image(
    file: UploadFile = File(...),
    identity: RequesterIdentity = Depends(get_current_identity),
    publisher: AssetPublisher = Depends(get_publisher)
):
    """
    Upload a reference image.

    The returned URL can be sent back as ``reference_image`` on /api/generate.
    """
    if file.content_type not in ALLOWED_UPLOAD_TYPES:
        message, status_code = get_error_response(ErrorCode.INVALID_IMAGE_DATA)
        raise HTTPException(status_code=status_code, detail=message)

    image_data = await file.read()
    if not image_data:
        message, status_code = get_error_response(ErrorCode.MISSING_FIELD)
        raise HTTPException(status_code=status_code, detail=message)
    if len(image_data) > Config.MAX_UPLOAD_BYTES:
        message, status_code = get_error_response(ErrorCode.FILE_TOO_LARGE)
        raise HTTPException(status_code=status_code, detail=message)

    try:
        url = await publisher.publish_bytes(image_data, file.content_type, Config.UPLOADS_BUCKET, identity.owner_key)
    except RenderriError as e:
        logger.error(f"Upload failed for user {identity.id}: {e}")
        raise e.to_http_exception()

    logger.info(f"User {identity.id} uploaded reference image {url}")
    return UploadResponse(url=url)


@router.get("/library", response_model=LibraryResponse)
async def library(
    identity: RequesterIdentity = Depends(get_current_identity),
    publisher: AssetPublisher = Depends(get_publisher)
):
    """List the current user's generated and uploaded images."""
    return await list_library(publisher, identity.owner_key)
