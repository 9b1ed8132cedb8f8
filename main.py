"""Headline video service - Main application entry point."""

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from app.api import headlines_router, health_router, video_router
from app.api.dependencies import redis_client
from app.config import get_settings
from app.logging import setup_logging
from app.rss.cache import fetch_and_cache_headlines
from app.runs.runner import VideoRunner
from app.video.encoder import FFmpegEncoder

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Prevent clickjacking attacks
        response.headers["X-Frame-Options"] = "DENY"

        # Content Security Policy - restrict resource loading
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: https:; "
            "media-src 'self' blob:; "
            "font-src 'self'; "
            "connect-src 'self'; "
            "frame-ancestors 'none'"
        )

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the encoder and runner once; release them on shutdown."""
    setup_logging()
    settings = get_settings()

    redis = redis_client()
    encoder = FFmpegEncoder(settings.scratch_dir, settings.ffmpeg_binary)
    app.state.runner = VideoRunner(
        encoder,
        partial(fetch_and_cache_headlines, redis),
        settings=settings,
    )
    logger.info("Headline video service started")

    yield

    await app.state.runner.close()
    await redis.aclose()
    logger.info("Headline video service stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Headline Video",
        description="Turn today's top headlines into a short downloadable video",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure rate limiting
    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Add security headers middleware
    app.add_middleware(SecurityHeadersMiddleware)

    # Configure CORS - restrict to specific methods and headers for security
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],  # Methods used by the API
        allow_headers=["Content-Type", "Accept"],  # Only necessary headers
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(headlines_router)
    app.include_router(video_router)

    return app


app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
