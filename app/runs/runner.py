"""Single-run orchestration of fetch → render → encode → present."""

import asyncio
import logging
import secrets
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from app.config import Settings, get_settings
from app.errors import FALLBACK_MESSAGE, NoHeadlinesError
from app.render.frames import render_frames
from app.rss.models import Headline
from app.video.encode import clear_scratch, run_encoder, stage_frames
from app.video.encoder import VideoEncoder

from .state import Done, Failed, Fetching, Idle, Rendering, RunState

logger = logging.getLogger(__name__)

HeadlineSource = Callable[[], Awaitable[list[Headline]]]

# Progress checkpoints
PROGRESS_STARTED = 5
PROGRESS_HEADLINES = 15
PROGRESS_RENDERED = 40
PROGRESS_STAGED = 55
PROGRESS_ENCODED = 85


@dataclass(frozen=True)
class VideoArtifact:
    """The encoded video of the latest successful run."""

    token: str
    data: bytes
    filename: str
    media_type: str = "video/mp4"


class VideoRunner:
    """Runs at most one video generation at a time.

    The encoder handle and the headline source are injected so the runner
    can be driven by fakes in tests. A new run releases the previous video
    artifact before anything else happens.
    """

    def __init__(
        self,
        encoder: VideoEncoder,
        headline_source: HeadlineSource,
        settings: Settings | None = None,
        url_base: str = "/api/video",
    ):
        self._encoder = encoder
        self._headline_source = headline_source
        self._settings = settings or get_settings()
        self._url_base = url_base.rstrip("/")
        self._state: RunState = Idle()
        self._task: asyncio.Task | None = None
        self._artifact: VideoArtifact | None = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def in_progress(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> RunState | None:
        """Start a run in the background.

        Returns:
            The initial ``fetching`` state, or None if a run is already in
            progress (the request is rejected, not queued)
        """
        if self.in_progress:
            return None

        self._release_artifact()
        self._state = Fetching(progress=PROGRESS_STARTED)
        self._task = asyncio.create_task(self._run())
        return self._state

    async def wait(self) -> RunState:
        """Wait for the current run (if any) and return the resulting state."""
        if self._task is not None:
            await self._task
        return self._state

    def artifact(self, token: str) -> VideoArtifact | None:
        """Look up the current video by its per-run token."""
        if self._artifact is not None and secrets.compare_digest(
            self._artifact.token, token
        ):
            return self._artifact
        return None

    async def close(self) -> None:
        """Cancel any run in progress and release the current video."""
        if self.in_progress:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._release_artifact()

    def _release_artifact(self) -> None:
        if self._artifact is not None:
            logger.info("Released previous video")
        self._artifact = None

    def _advance(self, progress: int) -> None:
        """Raise the progress of the rendering phase; never lowers it."""
        if isinstance(self._state, Rendering) and progress > self._state.progress:
            self._state = self._state.model_copy(update={"progress": min(progress, 100)})

    async def _run(self) -> None:
        try:
            headlines = await self._headline_source()
            if not headlines:
                raise NoHeadlinesError()

            logger.info(f"Rendering video for {len(headlines)} headlines")
            self._state = Rendering(progress=PROGRESS_HEADLINES, headlines=headlines)

            await self._encoder.load()
            await clear_scratch(self._encoder)

            frames = await render_frames(headlines, self._settings)
            self._advance(PROGRESS_RENDERED)

            await stage_frames(self._encoder, frames)
            self._advance(PROGRESS_STAGED)

            data = await run_encoder(self._encoder, len(frames), on_progress=self._advance)
            self._advance(PROGRESS_ENCODED)

            token = secrets.token_urlsafe(16)
            self._artifact = VideoArtifact(
                token=token, data=data, filename=self._settings.download_filename
            )
            self._state = Done(
                headlines=headlines,
                video_url=f"{self._url_base}/{token}",
                download_url=f"{self._url_base}/{token}?download=1",
            )
            logger.info("Video run completed")
        except asyncio.CancelledError:
            self._state = Idle()
            raise
        except Exception as e:
            logger.error(f"Video run failed: {e}", exc_info=True)
            self._state = Failed(
                progress=self._state.progress, message=str(e) or FALLBACK_MESSAGE
            )
