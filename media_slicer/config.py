"""Application settings."""

import tempfile
from pathlib import Path
from pydantic_settings import BaseSettings

MIN_SEGMENT_SECONDS = 1
MAX_SEGMENT_SECONDS = 3600


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 8790
    debug: bool = False
    frontend_dir: Path = Path(__file__).resolve().parent.parent / "frontend"
    ffmpeg_binary: str = "ffmpeg"
    work_dir: Path = Path(tempfile.gettempdir()) / "media-slicer" / "engine"
    upload_dir: Path = Path(tempfile.gettempdir()) / "media-slicer" / "uploads"
    max_upload_mb: int = 500
    default_segment_length: int = 30
    reset_delay_seconds: float = 3.0
    max_downloads: int = 5

    model_config = {"env_prefix": "SLICER_"}

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings()
