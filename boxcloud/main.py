"""
FastAPI application bootstrap with: \n
- Lifespan-managed startup: logging, schema creation/migration, optional license import, upload directory \n
- CORS configured for the frontend \n
- Security headers, rate limiting and request size admission ahead of every route \n
- JSON error handlers \n
- API routers under `/api`, health checks and a service banner \n

Environment contract (from `settings`): \n
- FRONTEND_URL: allowed CORS origin. \n
- RATE_LIMIT_WINDOW_MS / RATE_LIMIT_MAX_REQUESTS: fixed-window limit per client address. \n
- MAX_FILE_SIZE / MAX_FILES_PER_UPLOAD: bound the accepted request size. \n
- LICENSE_CODES_FILE: JSON file of license codes imported at startup (optional). \n
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boxcloud.api.errors import register_exception_handlers
from boxcloud.api.middleware import (
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
    SimpleRateLimitMiddleware,
)
from boxcloud.api.routers import auth, boxes, files, public
from boxcloud.database.config.config import settings
from boxcloud.database.core.funcs import import_license_codes
from boxcloud.database.core.schema import init_database
from boxcloud.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Multipart framing and text fields on top of the largest accepted batch.
REQUEST_OVERHEAD_BYTES = 1024 * 1024


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup (before yielding):
        * Configure logging.
        * Create missing tables and migrate legacy ones (`init_database`).
        * Import license codes from LICENSE_CODES_FILE when configured.
        * Make sure the upload directory exists.
    - On shutdown nothing needs releasing; sessions are per call.
    """
    setup_logging()
    init_database()
    if settings.LICENSE_CODES_FILE:
        import_license_codes(settings.LICENSE_CODES_FILE)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    logger.info(f"Server starting on port {settings.PORT} ({settings.ENVIRONMENT})")
    try:
        yield
    finally:
        logger.info("Server shutting down")


def health() -> dict:
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }


def create_app() -> FastAPI:
    """Build the application; tests call this to get a fresh instance."""
    app = FastAPI(title="PDF Box Cloud", lifespan=lifespan)

    # Starlette runs the last added middleware first:
    # security headers → rate limit → size limit → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_bytes=settings.MAX_FILE_SIZE * settings.MAX_FILES_PER_UPLOAD + REQUEST_OVERHEAD_BYTES,
    )
    app.add_middleware(
        SimpleRateLimitMiddleware,
        limit=settings.RATE_LIMIT_MAX_REQUESTS,
        window=max(1, settings.RATE_LIMIT_WINDOW_MS // 1000),
    )
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    api = APIRouter(prefix="/api")
    api.include_router(auth.router)
    api.include_router(boxes.router)
    api.include_router(public.router)
    api.include_router(files.router)
    api.add_api_route("/health", health, methods=["GET"], tags=["health"])
    app.include_router(api)

    app.add_api_route("/health", health, methods=["GET"], tags=["health"])

    @app.get("/")
    def banner():
        """Service banner with the endpoint map."""
        return {
            "message": "PDF Box Cloud API",
            "status": "running",
            "endpoints": {
                "health": "/api/health",
                "auth": "/api/auth",
                "boxes": "/api/boxes",
                "public": "/api/public",
                "files": "/api/files",
            },
        }

    return app


app = create_app()
"""Application instance served by uvicorn (`boxcloud.main:app`)."""
