"""Logging configuration for the headline video service."""

import json
import logging
import sys

from app.config import get_settings

# Per-request chatter from the feed client and the PIL plugin loader
QUIET_LOGGERS = ("httpx", "httpcore", "PIL")


class JsonFormatter(logging.Formatter):
    """JSON formatter for production logging.

    Devanagari headlines and messages are written as-is rather than as
    ``\\u`` escapes.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        base = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


def setup_logging() -> None:
    """Configure logging based on environment."""
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)

    if settings.env == "prod":
        handler.setFormatter(JsonFormatter())
    else:
        # Pretty format for development
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
