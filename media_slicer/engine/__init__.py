"""Media engines."""

from .base import MediaEngine
from .ffmpeg import FFmpegEngine
from .session import EngineSession

__all__ = [
    "MediaEngine",
    "FFmpegEngine",
    "EngineSession",
]
