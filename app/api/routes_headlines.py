"""Headline endpoints for the headline video API."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.api.dependencies import get_redis
from app.errors import HeadlinesFetchError
from app.rss.cache import fetch_and_cache_headlines

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/headlines", tags=["headlines"])
limiter = Limiter(key_func=get_remote_address)


@router.get("")
@limiter.limit("60/minute")
async def get_headlines(
    request: Request,
    redis: Redis = Depends(get_redis),
):
    """
    Today's normalized headlines.

    Returns:
        200 with ``{"headlines": [...]}`` (possibly empty), 502 with
        ``{"error": ...}`` if the upstream feed failed, or 500 with
        ``{"error": ...}`` for anything unexpected
    """
    try:
        headlines = await fetch_and_cache_headlines(redis)
    except HeadlinesFetchError as e:
        return JSONResponse(status_code=502, content={"error": str(e)})
    except Exception:
        logger.error("headlines route error", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Unexpected error while fetching headlines"},
        )

    return {"headlines": [h.model_dump(by_alias=True) for h in headlines]}
