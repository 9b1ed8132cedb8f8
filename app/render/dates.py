"""Localized date/time captions for rendered frames."""

import email.utils
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from babel.core import UnknownLocaleError
from babel.dates import format_date, format_time, get_datetime_format

TIME_UNAVAILABLE = "समय उपलब्ध नहीं"


def parse_published_at(value: str) -> datetime | None:
    """Parse an RSS ``pubDate`` (RFC 822) or ISO 8601 timestamp.

    Naive results are assumed to be UTC. Returns None if the value is empty
    or not a recognizable date.
    """
    value = (value or "").strip()
    if not value:
        return None

    try:
        parsed = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            # Convert Z to +00:00 for proper parsing
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_published_at(
    value: str,
    locale: str = "hi_IN",
    tz_name: str = "Asia/Kolkata",
) -> str:
    """Format a raw feed timestamp as a full date plus short time.

    Never raises: empty or unparseable input yields the fixed
    "time unavailable" placeholder.
    """
    published = parse_published_at(value)
    if published is None:
        return TIME_UNAVAILABLE

    try:
        tz = ZoneInfo(tz_name)
        date_part = format_date(published.astimezone(tz), format="full", locale=locale)
        time_part = format_time(published, format="short", tzinfo=tz, locale=locale)
        pattern = get_datetime_format("full", locale=locale)
    except (UnknownLocaleError, ValueError, LookupError, OverflowError):
        return TIME_UNAVAILABLE

    # CLDR patterns quote literal text, e.g. "{1} 'को' {0}"
    return pattern.replace("'", "").format(time_part, date_part)
