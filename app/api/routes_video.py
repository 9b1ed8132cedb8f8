"""Video generation endpoints for the headline video API."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.api.dependencies import get_runner
from app.runs.runner import VideoRunner

router = APIRouter(prefix="/api/video", tags=["video"])
limiter = Limiter(key_func=get_remote_address)


@router.post("", status_code=202)
@limiter.limit("10/minute")
async def start_video(
    request: Request,
    runner: VideoRunner = Depends(get_runner),
):
    """
    Start generating today's headline video.

    Only one run can be in progress; a second request while one is running
    is rejected with 409 rather than queued.

    Returns:
        The initial run state (``fetching``)
    """
    state = runner.start()
    if state is None:
        return JSONResponse(
            status_code=409,
            content={"error": "A video is already being generated"},
        )
    return state.model_dump(mode="json", by_alias=True)


@router.get("")
async def get_video_status(runner: VideoRunner = Depends(get_runner)):
    """Current run state: status, label, progress and per-phase data."""
    return runner.state.model_dump(mode="json", by_alias=True)


@router.get("/{token}")
async def get_video(
    token: str,
    download: bool = Query(default=False, description="Serve as an attachment"),
    runner: VideoRunner = Depends(get_runner),
):
    """
    Stream the latest generated video.

    The token is unique per run and stops resolving once a new run starts.
    """
    artifact = runner.artifact(token)
    if artifact is None:
        raise HTTPException(status_code=404, detail="Video not found")

    headers = {"Cache-Control": "no-store"}
    if download:
        headers["Content-Disposition"] = f'attachment; filename="{artifact.filename}"'

    return Response(content=artifact.data, media_type=artifact.media_type, headers=headers)
