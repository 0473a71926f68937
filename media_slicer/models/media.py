"""Source and segment models."""

import asyncio
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..config import MAX_SEGMENT_SECONDS, MIN_SEGMENT_SECONDS


class SourceFile(BaseModel):
    """A user-selected media file, staged on disk until the run is done."""

    model_config = ConfigDict(frozen=True)

    name: str
    size: int = 0
    mime_type: str = ""
    path: Optional[Path] = None

    async def read_bytes(self) -> bytes:
        """Load the whole file as one contiguous buffer."""
        if self.path is None:
            raise FileNotFoundError(f"No staged content for {self.name}")
        return await asyncio.to_thread(self.path.read_bytes)

    def discard(self) -> None:
        if self.path is not None:
            self.path.unlink(missing_ok=True)


class SegmentSpec(BaseModel):
    segment_length_seconds: int = Field(ge=MIN_SEGMENT_SECONDS, le=MAX_SEGMENT_SECONDS)
    output_extension: str


class EngineEntry(BaseModel):
    name: str


class OutputEntry(BaseModel):
    name: str  # as produced by the engine
    ordinal: int
    archive_name: str
    data: bytes = b""
