"""Frame rendering module for the headline video service."""

from .dates import TIME_UNAVAILABLE, format_published_at
from .frames import Frame, frame_name, render_frame, render_frames
from .wrap import ELLIPSIS, wrap_text

__all__ = [
    "ELLIPSIS",
    "TIME_UNAVAILABLE",
    "Frame",
    "format_published_at",
    "frame_name",
    "render_frame",
    "render_frames",
    "wrap_text",
]
