"""Video encoder boundary: an ffmpeg runtime with a scratch filesystem."""

import asyncio
import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from pathlib import Path

from app.errors import EncodeError

logger = logging.getLogger(__name__)


class VideoEncoder(ABC):
    """Abstract encoder runtime with a named-file scratch area."""

    @property
    @abstractmethod
    def loaded(self) -> bool:
        """Whether ``load()`` has completed."""
        pass

    @abstractmethod
    async def load(self) -> None:
        """
        Initialize the runtime. Safe to call repeatedly.

        Raises:
            EncodeError: If the runtime cannot be initialized
        """
        pass

    @abstractmethod
    async def list_dir(self) -> list[str]:
        """
        List file names in the scratch area.

        Raises:
            EncodeError: If the runtime is not loaded
        """
        pass

    @abstractmethod
    async def write_file(self, name: str, data: bytes) -> None:
        """Write (or overwrite) a named file in the scratch area."""
        pass

    @abstractmethod
    async def read_file(self, name: str) -> bytes:
        """
        Read a named file from the scratch area.

        Raises:
            EncodeError: If the file does not exist
        """
        pass

    @abstractmethod
    async def delete_file(self, name: str) -> None:
        """Delete a named file from the scratch area."""
        pass

    @abstractmethod
    def execute(
        self, args: Sequence[str], duration_hint: float | None = None
    ) -> AsyncIterator[float]:
        """
        Run the encoder with ``args`` relative to the scratch area.

        Iterating the result drives the run and yields fractional progress
        in 0..1. Iteration ends when the encoder has finished.

        Args:
            args: Encoder argument vector (input pattern, codec flags, output name)
            duration_hint: Expected output duration in seconds, used for progress

        Raises:
            EncodeError: If the encoder exits unsuccessfully
        """
        pass


def parse_progress_line(line: str, duration_hint: float | None) -> float | None:
    """Translate one ``-progress`` key=value line into a completion ratio."""
    key, _, value = line.strip().partition("=")
    if key == "progress" and value == "end":
        return 1.0
    if key in ("out_time_us", "out_time_ms") and duration_hint:
        try:
            # Both keys are reported in microseconds
            elapsed = int(value) / 1_000_000
        except ValueError:
            return None
        return max(0.0, min(1.0, elapsed / duration_hint))
    return None


class FFmpegEncoder(VideoEncoder):
    """Encoder backed by the ffmpeg binary and a local scratch directory."""

    def __init__(self, scratch_dir: str | Path, binary: str = "ffmpeg"):
        self.base_path = Path(scratch_dir)
        self.binary = binary
        self._executable: str | None = None

    @property
    def loaded(self) -> bool:
        return self._executable is not None

    async def load(self) -> None:
        if self._executable:
            return

        executable = shutil.which(self.binary)
        if not executable:
            raise EncodeError(f"{self.binary} not found on PATH")

        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EncodeError(f"Cannot create scratch directory: {e}") from e

        self._executable = executable
        logger.info(f"Video encoder ready: {executable} (scratch: {self.base_path})")

    def _path(self, name: str) -> Path:
        file_path = self.base_path / name

        # Ensure we're not touching files outside the scratch directory
        if not file_path.resolve().is_relative_to(self.base_path.resolve()):
            raise EncodeError(f"Invalid filename: {name}")

        return file_path

    def _require_loaded(self) -> None:
        if not self.loaded:
            raise EncodeError("Video encoder is not loaded")

    async def list_dir(self) -> list[str]:
        self._require_loaded()
        return sorted(p.name for p in self.base_path.iterdir() if p.is_file())

    async def write_file(self, name: str, data: bytes) -> None:
        self._require_loaded()
        try:
            self._path(name).write_bytes(data)
        except OSError as e:
            raise EncodeError(f"Cannot write {name}: {e}") from e

    async def read_file(self, name: str) -> bytes:
        self._require_loaded()
        try:
            return self._path(name).read_bytes()
        except OSError as e:
            raise EncodeError(f"Cannot read {name}: {e}") from e

    async def delete_file(self, name: str) -> None:
        self._require_loaded()
        try:
            self._path(name).unlink()
        except OSError as e:
            raise EncodeError(f"Cannot delete {name}: {e}") from e

    async def execute(
        self, args: Sequence[str], duration_hint: float | None = None
    ) -> AsyncIterator[float]:
        self._require_loaded()
        cmd = [
            self._executable,
            "-y",
            "-hide_banner",
            "-nostats",
            "-progress",
            "pipe:1",
            *args,
        ]
        logger.info(f"Running encoder: {' '.join(cmd)}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(self.base_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise EncodeError(f"Cannot start {self.binary}: {e}") from e

        # Drain stderr concurrently so a chatty encoder cannot block on a full pipe
        stderr_task = asyncio.create_task(proc.stderr.read())
        try:
            async for raw_line in proc.stdout:
                ratio = parse_progress_line(raw_line.decode(errors="replace"), duration_hint)
                if ratio is not None:
                    yield ratio
            returncode = await proc.wait()
            stderr = await stderr_task
        finally:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            if not stderr_task.done():
                stderr_task.cancel()

        if returncode != 0:
            tail = stderr.decode(errors="replace").strip().splitlines()[-5:]
            logger.error(f"Encoder exited with {returncode}: {' | '.join(tail)}")
            raise EncodeError(
                tail[-1] if tail else f"{self.binary} exited with status {returncode}"
            )
