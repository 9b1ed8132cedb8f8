"""Domain errors raised along the fetch → render → encode pipeline."""

# Localized user-facing messages (hi-IN)
NO_HEADLINES_MESSAGE = "आज के लिए कोई सुर्ख़ियाँ उपलब्ध नहीं हैं।"
FALLBACK_MESSAGE = "कुछ गलत हुआ, कृपया पुनः प्रयास करें।"


class HeadlineVideoError(Exception):
    """Base class for pipeline failures."""


class HeadlinesFetchError(HeadlineVideoError):
    """The upstream feed returned a non-success status or could not be reached."""

    def __init__(self, message: str = "Failed to fetch headlines", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NoHeadlinesError(HeadlineVideoError):
    """The feed parsed to zero headlines."""

    def __init__(self, message: str = NO_HEADLINES_MESSAGE):
        super().__init__(message)


class RenderError(HeadlineVideoError):
    """A frame could not be drawn or encoded as PNG."""


class EncodeError(HeadlineVideoError):
    """Any failure at the video encoder boundary (load, write, execute, read-back)."""
