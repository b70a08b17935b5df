"""
FastAPI application for Renderri image generation with Gemini AI.

Features:
- Text-to-image generation with optional reference image and variations
- Magic edit (mask-based inpainting)
- Background removal and mask compositing
- Reference uploads and a per-user image library
"""
import os
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse

from config import Config
from auth.routes import router as auth_router
from image.routes import router as image_router
from image.services import ImageService, build_image_service
from storage.base import AssetPublisher
from storage.local import LocalAssetPublisher
from storage.routes import router as storage_router
from storage.services import build_publisher
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

logger = get_logger("main")


def create_app(
    image_service: Optional[ImageService] = None,
    publisher: Optional[AssetPublisher] = None
) -> FastAPI:
    """
    Build the application.

    The publisher and image service are created from Config unless passed in;
    both live on ``app.state`` and reach routes through dependencies.
    """
    app = FastAPI(
        title="Renderri Image API",
        description="Image generation, magic edit and background removal backed by Gemini, with per-user storage.",
        version="1.0.0"
    )

    # CORS middleware - MUST be added FIRST so it runs on all responses
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if publisher is None:
        publisher = build_publisher(Config)
    if image_service is None:
        try:
            image_service = build_image_service(publisher, Config)
        except ValueError as e:
            logger.error(f"Image service unavailable: {e}")
    app.state.publisher = publisher
    app.state.image_service = image_service

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions globally."""
        if isinstance(exc, HTTPException):
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        message, status_code = get_error_response(ErrorCode.UNKNOWN_ERROR)
        return JSONResponse(status_code=status_code, content={"detail": message})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests with timing. Bodies carry inline images and are not logged."""
        start_time = time.time()
        full_url = str(request.url)
        client = request.client.host if request.client else "unknown"
        logger.info(f"→ {request.method} {full_url} - Client: {client}")
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(f"← {request.method} {full_url} - Error: {str(e)} - Time: {process_time:.2f}ms")
            raise

        process_time = (time.time() - start_time) * 1000
        logger.info(f"← {request.method} {full_url} - Status: {response.status_code} - Time: {process_time:.2f}ms")
        return response

    # Local storage is served straight from disk
    if isinstance(publisher, LocalAssetPublisher):
        os.makedirs(publisher.root_dir, exist_ok=True)
        app.mount(publisher.public_base, StaticFiles(directory=publisher.root_dir), name="storage")
        logger.info(f"Static files mounted at {publisher.public_base}")

    app.include_router(auth_router)
    app.include_router(image_router)
    app.include_router(storage_router)

    @app.get("/healthz")
    def health():
        """Health check endpoint."""
        return {"status": "ok", "image_service": app.state.image_service is not None}

    return app


try:
    Config.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    logger.error("Please set required environment variables in .env file")

app = create_app()


@app.on_event("startup")
async def startup_event():
    logger.info("=" * 80)
    logger.info("Renderri API starting up")
    logger.info(f"Model: {Config.GEMINI_MODEL} - Storage: {Config.STORAGE_BACKEND}")
    logger.info(f"Host: {Config.HOST}:{Config.PORT}")
    logger.info("=" * 80)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Renderri API shutting down")


# Run server directly
if __name__ == "__main__":
    logger.info(f"Starting server on {Config.HOST}:{Config.PORT}")
    uvicorn.run(
        "app:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=True,
        log_level="info"
    )
