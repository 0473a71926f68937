"""Data models."""

from .media import SourceFile, SegmentSpec, EngineEntry, OutputEntry
from .run import ProcessingRun, RunError, RunPhase
from .system import EngineStatus

__all__ = [
    "SourceFile",
    "SegmentSpec",
    "EngineEntry",
    "OutputEntry",
    "ProcessingRun",
    "RunError",
    "RunPhase",
    "EngineStatus",
]
