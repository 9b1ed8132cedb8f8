"""News feed fetching, normalization and caching with Redis."""

import html
import json
import logging
import re
import xml.etree.ElementTree as ET

import httpx
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config import get_settings
from app.errors import HeadlinesFetchError

from .models import Headline

logger = logging.getLogger(__name__)

CACHE_KEY = "hv:headlines"
UNKNOWN_TITLE = "अज्ञात शीर्षक"

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def sanitize_text(value: str | None) -> str:
    """Decode leftover entities, strip the markup they expose and collapse whitespace."""
    if not value:
        return ""
    text = _TAG_RE.sub(" ", html.unescape(value))
    return _WS_RE.sub(" ", text).strip()


def _child_text(item: ET.Element, tag: str) -> str:
    elem = item.find(tag)
    if elem is None or elem.text is None:
        return ""
    return elem.text.strip()


def normalize_channel(channel: ET.Element | None, limit: int = 6) -> list[Headline]:
    """Map the ``item`` children of an RSS ``channel`` to headlines.

    A channel with a single item yields one headline and a channel without
    items (or no channel at all) yields an empty list. Missing fields degrade
    to defaults instead of failing the parse.

    Args:
        channel: The ``<channel>`` element, or None if the document had none
        limit: Maximum number of headlines to keep, in feed order

    Returns:
        List of Headline objects in feed order
    """
    if channel is None:
        return []

    headlines = []
    for item in channel.findall("item")[:limit]:
        headlines.append(
            Headline(
                title=sanitize_text(_child_text(item, "title")) or UNKNOWN_TITLE,
                link=_child_text(item, "link"),
                published_at=_child_text(item, "pubDate"),
                description=sanitize_text(_child_text(item, "description")),
            )
        )
    return headlines


def parse_feed(xml_text: str, limit: int = 6) -> list[Headline]:
    """Parse an RSS document into headlines.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well-formed XML
    """
    root = ET.fromstring(xml_text)
    channel = root if root.tag == "channel" else root.find("channel")
    return normalize_channel(channel, limit=limit)


async def _read_cache(redis: Redis) -> list[Headline] | None:
    try:
        cached_data = await redis.get(CACHE_KEY)
    except RedisError as e:
        logger.warning(f"Headline cache read failed: {e}")
        return None
    if not cached_data:
        return None
    try:
        return [Headline.model_validate(item) for item in json.loads(cached_data)]
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring unreadable headline cache: {e}")
        return None


async def _write_cache(redis: Redis, headlines: list[Headline], ttl: int) -> None:
    serialized = [h.model_dump(by_alias=True) for h in headlines]
    try:
        await redis.setex(CACHE_KEY, ttl, json.dumps(serialized, ensure_ascii=False))
    except RedisError as e:
        logger.warning(f"Headline cache write failed: {e}")


async def fetch_and_cache_headlines(redis: Redis) -> list[Headline]:
    """
    Fetch today's headlines, honouring a short freshness window.

    First checks Redis cache. On a cache miss, fetches the configured RSS
    feed with a browser User-Agent, parses and normalizes it, and caches
    non-empty results for ``feed_ttl_seconds``. No retries are attempted.

    Args:
        redis: Async Redis client

    Returns:
        Up to ``max_headlines`` Headline objects in feed order (possibly empty)

    Raises:
        HeadlinesFetchError: On a non-success HTTP status or transport failure
    """
    settings = get_settings()

    # Check cache first
    if (cached := await _read_cache(redis)) is not None:
        return cached

    headers = {"User-Agent": settings.feed_user_agent}
    try:
        async with httpx.AsyncClient(timeout=settings.feed_timeout_seconds) as client:
            response = await client.get(settings.feed_url, headers=headers)
            response.raise_for_status()
            response_text = response.text
    except httpx.HTTPStatusError as e:
        logger.error(f"Headline feed returned {e.response.status_code}")
        raise HeadlinesFetchError(status_code=e.response.status_code) from e
    except httpx.HTTPError as e:
        logger.error(f"Headline feed request failed: {e}")
        raise HeadlinesFetchError() from e

    try:
        headlines = parse_feed(response_text, limit=settings.max_headlines)
    except ET.ParseError as e:
        # Invalid XML - return empty list
        logger.warning(f"Headline feed is not valid XML: {e}")
        return []

    if headlines:
        await _write_cache(redis, headlines, settings.feed_ttl_seconds)

    return headlines
