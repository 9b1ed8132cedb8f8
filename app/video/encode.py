"""Encode orchestration: stage frames, run the encoder, read back the MP4."""

import logging
from collections.abc import Callable, Sequence

from app.errors import EncodeError, HeadlineVideoError
from app.render.frames import Frame

from .encoder import VideoEncoder

logger = logging.getLogger(__name__)

FRAME_PREFIX = "frame"
FRAME_PATTERN = "frame%03d.png"
OUTPUT_FILENAME = "output.mp4"
SECONDS_PER_FRAME = 3

ENCODE_ARGS = (
    "-framerate",
    f"1/{SECONDS_PER_FRAME}",
    "-start_number",
    "0",
    "-i",
    FRAME_PATTERN,
    "-c:v",
    "libx264",
    "-r",
    "30",
    "-pix_fmt",
    "yuv420p",
    "-movflags",
    "+faststart",
    OUTPUT_FILENAME,
)


def progress_percent(ratio: float) -> int:
    """Convert a 0..1 completion ratio to a rounded percentage capped at 100."""
    return max(0, min(100, round(ratio * 100)))


def _is_run_artifact(name: str) -> bool:
    return name.startswith(FRAME_PREFIX) or name == OUTPUT_FILENAME


async def clear_scratch(encoder: VideoEncoder) -> None:
    """Best-effort removal of frames and output left by a previous run.

    Listing and deletion failures are ignored; they only affect hygiene of
    the scratch area.
    """
    try:
        names = await encoder.list_dir()
    except (HeadlineVideoError, OSError) as e:
        logger.debug(f"Skipping scratch cleanup: {e}")
        return

    for name in names:
        if not _is_run_artifact(name):
            continue
        try:
            await encoder.delete_file(name)
        except (HeadlineVideoError, OSError) as e:
            logger.debug(f"Ignoring failed delete of {name}: {e}")


async def stage_frames(encoder: VideoEncoder, frames: Sequence[Frame]) -> None:
    """Write frames into the scratch area sequentially, in index order."""
    for frame in sorted(frames, key=lambda f: f.index):
        await encoder.write_file(frame.name, frame.data)


async def run_encoder(
    encoder: VideoEncoder,
    frame_count: int,
    on_progress: Callable[[int], None] | None = None,
) -> bytes:
    """
    Encode the staged frames into an H.264 MP4 and return its bytes.

    Args:
        encoder: A loaded encoder runtime with ``frame_count`` frames staged
        frame_count: Number of staged frames, used as the progress duration hint
        on_progress: Receives encoder progress as a 0-100 percentage

    Returns:
        The encoded video

    Raises:
        EncodeError: If encoding or read-back fails
    """
    async for ratio in encoder.execute(
        ENCODE_ARGS, duration_hint=frame_count * SECONDS_PER_FRAME
    ):
        if on_progress:
            on_progress(progress_percent(ratio))
    data = await encoder.read_file(OUTPUT_FILENAME)

    if not data:
        raise EncodeError("Encoder produced an empty video")

    logger.info(f"Encoded {frame_count} frames into {len(data)} bytes")
    return data
