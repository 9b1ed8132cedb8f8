"""Tests for frame staging, scratch cleanup and the encode profile."""

import pytest

from app.errors import EncodeError
from app.render.frames import Frame
from app.video.encode import (
    ENCODE_ARGS,
    OUTPUT_FILENAME,
    clear_scratch,
    progress_percent,
    run_encoder,
    stage_frames,
)


def test_encode_profile_is_fixed():
    """One frame per 3s from frame000.png, H.264 at 30 fps, 4:2:0, fast start."""
    assert ENCODE_ARGS == (
        "-framerate", "1/3",
        "-start_number", "0",
        "-i", "frame%03d.png",
        "-c:v", "libx264",
        "-r", "30",
        "-pix_fmt", "yuv420p",
        "-movflags", "+faststart",
        "output.mp4",
    )


@pytest.mark.parametrize(
    "ratio,expected",
    [(0.0, 0), (0.333, 33), (0.5, 50), (0.996, 100), (1.0, 100), (1.2, 100), (-0.1, 0)],
)
def test_progress_percent_is_rounded_and_clamped(ratio, expected):
    assert progress_percent(ratio) == expected


@pytest.mark.asyncio
async def test_clear_scratch_removes_only_run_artifacts(fake_encoder):
    await fake_encoder.load()
    fake_encoder.files = {
        "frame000.png": b"0",
        "frame005.png": b"5",
        OUTPUT_FILENAME: b"old",
        "keep.txt": b"k",
    }

    await clear_scratch(fake_encoder)

    assert fake_encoder.files == {"keep.txt": b"k"}


@pytest.mark.asyncio
async def test_clear_scratch_tolerates_listing_failure(make_encoder):
    """Before the runtime is loaded listing fails and cleanup is skipped."""
    encoder = make_encoder()
    encoder.files = {"frame000.png": b"0"}

    await clear_scratch(encoder)

    assert encoder.files == {"frame000.png": b"0"}


@pytest.mark.asyncio
async def test_clear_scratch_tolerates_delete_failures(make_encoder):
    encoder = make_encoder(undeletable=["frame000.png"])
    await encoder.load()
    encoder.files = {"frame000.png": b"0", "frame001.png": b"1"}

    await clear_scratch(encoder)

    assert encoder.files == {"frame000.png": b"0"}


@pytest.mark.asyncio
async def test_stage_frames_writes_in_index_order(fake_encoder):
    written = []

    async def record(name, data):
        written.append(name)

    fake_encoder.write_file = record
    frames = [
        Frame(index=1, name="frame001.png", data=b"1"),
        Frame(index=0, name="frame000.png", data=b"0"),
    ]

    await stage_frames(fake_encoder, frames)

    assert written == ["frame000.png", "frame001.png"]


@pytest.mark.asyncio
async def test_run_encoder_reports_percent_and_returns_output(make_encoder):
    encoder = make_encoder(output=b"mp4-bytes", progress=[0.333, 0.5, 1.2])
    await encoder.load()
    seen = []

    data = await run_encoder(encoder, 2, on_progress=seen.append)

    assert data == b"mp4-bytes"
    assert seen == [33, 50, 100]
    assert encoder.exec_calls == [list(ENCODE_ARGS)]
    assert encoder.duration_hints == [6]


@pytest.mark.asyncio
async def test_run_encoder_empty_output_raises(make_encoder):
    encoder = make_encoder(output=b"")
    await encoder.load()

    with pytest.raises(EncodeError):
        await run_encoder(encoder, 1)


@pytest.mark.asyncio
async def test_run_encoder_propagates_encoder_failure(make_encoder):
    encoder = make_encoder(exec_error="Conversion failed!")
    await encoder.load()

    with pytest.raises(EncodeError, match="Conversion failed!"):
        await run_encoder(encoder, 1)
