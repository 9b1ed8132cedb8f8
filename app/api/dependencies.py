"""FastAPI dependencies for API routers."""

from collections.abc import AsyncGenerator

from fastapi import HTTPException, Request
from redis.asyncio import Redis

from app.config import get_settings
from app.runs.runner import VideoRunner

_redis_client: Redis | None = None


def redis_client() -> Redis:
    """Get or create the shared async Redis client."""
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=False,
        )

    return _redis_client


async def get_redis() -> AsyncGenerator[Redis, None]:
    """Dependency for FastAPI routes to get an async Redis connection.

    Yields:
        Async Redis client instance
    """
    yield redis_client()


def get_runner(request: Request) -> VideoRunner:
    """Dependency returning the video runner created in the app lifespan."""
    runner = getattr(request.app.state, "runner", None)
    if runner is None:
        raise HTTPException(status_code=503, detail="Video runner is not available")
    return runner
