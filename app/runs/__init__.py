"""Video generation runs for the headline video service."""

from .runner import VideoArtifact, VideoRunner
from .state import Done, Failed, Fetching, Idle, Rendering, RunState

__all__ = [
    "Done",
    "Failed",
    "Fetching",
    "Idle",
    "Rendering",
    "RunState",
    "VideoArtifact",
    "VideoRunner",
]
