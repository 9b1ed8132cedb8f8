"""Shared fixtures: an in-memory encoder standing in for ffmpeg."""

from collections.abc import Sequence

import pytest

from app.errors import EncodeError
from app.rss.models import Headline
from app.video.encoder import VideoEncoder


class FakeEncoder(VideoEncoder):
    """In-memory VideoEncoder that records how it was driven."""

    def __init__(
        self,
        output: bytes = b"\x00\x00\x00\x18ftypmp42fake-video",
        progress: Sequence[float] = (0.25, 0.5, 1.0),
        exec_error: str | None = None,
        fail_list: bool = False,
        undeletable: Sequence[str] = (),
    ):
        self.files: dict[str, bytes] = {}
        self.output = output
        self.progress = list(progress)
        self.exec_error = exec_error
        self.fail_list = fail_list
        self.undeletable = set(undeletable)
        self.load_calls = 0
        self.exec_calls: list[list[str]] = []
        self.duration_hints: list[float | None] = []
        self.staged_before_exec: list[list[str]] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        self.load_calls += 1
        self._loaded = True

    async def list_dir(self) -> list[str]:
        if self.fail_list or not self._loaded:
            raise EncodeError("listing unavailable")
        return sorted(self.files)

    async def write_file(self, name: str, data: bytes) -> None:
        self.files[name] = data

    async def read_file(self, name: str) -> bytes:
        if name not in self.files:
            raise EncodeError(f"{name} not found")
        return self.files[name]

    async def delete_file(self, name: str) -> None:
        if name in self.undeletable:
            raise EncodeError(f"cannot delete {name}")
        self.files.pop(name, None)

    async def execute(self, args: Sequence[str], duration_hint: float | None = None):
        self.exec_calls.append(list(args))
        self.duration_hints.append(duration_hint)
        self.staged_before_exec.append(sorted(self.files))
        if self.exec_error:
            raise EncodeError(self.exec_error)
        for ratio in self.progress:
            yield ratio
        self.files[args[-1]] = self.output


@pytest.fixture
def fake_encoder():
    """A fresh in-memory encoder."""
    return FakeEncoder()


@pytest.fixture
def sample_headlines():
    """Two headlines titled A and B with empty descriptions."""
    return [
        Headline(title="A", link="https://example.com/a", published_at="2026-10-18T10:30:00Z"),
        Headline(title="B", link="", published_at=""),
    ]


@pytest.fixture
def make_encoder():
    """Factory for encoders configured per test."""
    return FakeEncoder
