"""Engine status models."""

from typing import Optional
from pydantic import BaseModel, Field


class EngineStatus(BaseModel):
    name: str = ""
    loaded: bool = False
    loading: bool = False
    error: Optional[str] = None
    files: list[str] = Field(default_factory=list)
