"""Error taxonomy for the segmentation pipeline."""

from collections.abc import Mapping
from typing import Any

UNKNOWN_ERROR = "Unknown error occurred"


class MediaSlicerError(Exception):
    """Base exception for all media slicer errors."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ValidationError(MediaSlicerError):
    """Raised when a precondition fails before any engine interaction."""

    def __init__(self, message: str, field: str = None, details: str = None):
        super().__init__(message, details)
        self.field = field


class RunInProgress(ValidationError):
    """Raised when a run is requested while another one is active."""

    def __init__(self, message: str = "A run is already in progress."):
        super().__init__(message, field="run")


class EngineUnavailable(MediaSlicerError):
    """Raised when the media engine could not be initialized."""


class EngineExecutionError(MediaSlicerError):
    """Raised by an engine command; ``raw`` keeps whatever the engine produced."""

    def __init__(self, raw: Any, argv: list[str] = None):
        super().__init__("Engine command failed", describe_error(raw))
        self.raw = raw
        self.argv = list(argv or [])


class SegmentationFailed(MediaSlicerError):
    """Raised when the segmentation command fails."""


class NoSegmentsProduced(MediaSlicerError):
    """Raised when the engine finished but no segment files were found."""


class ArchiveError(MediaSlicerError):
    """Raised on archive builder misuse."""


class CleanupError(MediaSlicerError):
    """A failed working-file deletion. Logged, never propagated."""

    def __init__(self, message: str, name: str = None, details: str = None):
        super().__init__(message, details)
        self.name = name


def describe_error(value: Any) -> str:
    """Turn any error-ish value into a display string.

    Engines are not guaranteed to raise well-formed exceptions, so this never
    assumes a structure and never raises itself.
    """
    if value is None:
        return UNKNOWN_ERROR
    if isinstance(value, EngineExecutionError):
        return describe_error(value.raw)
    if isinstance(value, MediaSlicerError):
        return str(value)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value.strip() or UNKNOWN_ERROR

    message = None
    if isinstance(value, Mapping):
        message = value.get("message")
    elif not isinstance(value, BaseException):
        message = getattr(value, "message", None)
    if message:
        return describe_error(message)

    try:
        text = str(value)
    except Exception:
        text = ""
    if not text and isinstance(value, BaseException):
        text = type(value).__name__
    return text.strip() or UNKNOWN_ERROR
