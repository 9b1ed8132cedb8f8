"""API routers for the headline video service."""

from app.api.routes_headlines import router as headlines_router
from app.api.routes_health import router as health_router
from app.api.routes_video import router as video_router

__all__ = [
    "health_router",
    "headlines_router",
    "video_router",
]
