"""Processing run state."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
import uuid


class RunPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    WRITING = "writing"
    SEGMENTING = "segmenting"
    COLLECTING = "collecting"
    ARCHIVING = "archiving"
    FINALIZING = "finalizing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self not in (RunPhase.IDLE, RunPhase.SUCCEEDED, RunPhase.FAILED)

    @property
    def is_terminal(self) -> bool:
        return self in (RunPhase.SUCCEEDED, RunPhase.FAILED)


class RunError(BaseModel):
    kind: str  # exception class name, e.g. "NoSegmentsProduced"
    message: str


class ProcessingRun(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    phase: RunPhase = RunPhase.IDLE
    progress: float = 0.0
    status: str = ""
    error: Optional[RunError] = None
    source_name: str = ""
    segment_length_seconds: int = 0
    segment_count: Optional[int] = None
    archive_name: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    completed_at: Optional[datetime] = None
