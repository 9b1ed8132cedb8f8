"""RSS feed module for the headline video service."""

from .cache import fetch_and_cache_headlines, normalize_channel, parse_feed
from .models import Headline

__all__ = ["Headline", "fetch_and_cache_headlines", "normalize_channel", "parse_feed"]
