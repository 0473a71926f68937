from __future__ import annotations

from pathlib import Path

import pytest

from media_slicer.config import Settings
from media_slicer.models.media import SourceFile


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        work_dir=tmp_path / "engine",
        upload_dir=tmp_path / "uploads",
        frontend_dir=tmp_path / "no-frontend",
        reset_delay_seconds=0.01,
    )


@pytest.fixture
def make_source(tmp_path: Path):
    def _make(name: str = "clip.mp4", data: bytes = b"media-bytes", mime_type: str = "video/mp4") -> SourceFile:
        path = tmp_path / f"staged-{len(list(tmp_path.iterdir()))}"
        path.write_bytes(data)
        return SourceFile(name=name, size=len(data), mime_type=mime_type, path=path)

    return _make
