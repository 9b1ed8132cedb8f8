"""Video encoding module for the headline video service."""

from .encode import ENCODE_ARGS, OUTPUT_FILENAME, clear_scratch, run_encoder, stage_frames
from .encoder import FFmpegEncoder, VideoEncoder

__all__ = [
    "ENCODE_ARGS",
    "OUTPUT_FILENAME",
    "FFmpegEncoder",
    "VideoEncoder",
    "clear_scratch",
    "run_encoder",
    "stage_frames",
]
