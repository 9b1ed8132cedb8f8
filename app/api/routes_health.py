"""Health check endpoints for the headline video API."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def health_check():
    """
    Health check endpoint.

    Returns:
        A simple status object indicating the service is healthy
    """
    return {"ok": True}


@router.get("/readyz")
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Returns:
        ``{"ok": true}`` once the video runner has been set up, 503 otherwise
    """
    if getattr(request.app.state, "runner", None) is None:
        return JSONResponse(status_code=503, content={"ok": False})
    return {"ok": True}
