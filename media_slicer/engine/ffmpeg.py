"""ffmpeg-backed media engine."""

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from ..errors import EngineExecutionError, EngineUnavailable
from ..models.media import EngineEntry
from ..utils.commands import run_cmd
from .base import MediaEngine

logger = logging.getLogger(__name__)

# Last lines of ffmpeg's stderr kept in an EngineExecutionError
STDERR_TAIL_LINES = 20


class FFmpegEngine(MediaEngine):
    """Runs the ffmpeg binary inside a private working directory.

    The working directory plays the part of the engine's virtual
    filesystem: entry names are flat, and nothing outside it is reachable.
    """

    name = "ffmpeg"

    def __init__(self, binary: str = "ffmpeg", work_root: Optional[Path] = None):
        self.binary = binary
        self.work_root = Path(work_root) if work_root else None
        self.workdir: Optional[Path] = None
        self.version: str = ""

    async def load(self) -> None:
        path = shutil.which(self.binary)
        if not path:
            raise EngineUnavailable("ffmpeg not found", details=f"'{self.binary}' is not on PATH")

        try:
            rc, out, err = await run_cmd(path, "-hide_banner", "-version", timeout=30.0)
        except OSError as e:
            raise EngineUnavailable("ffmpeg could not be started", details=str(e)) from e
        if rc != 0:
            raise EngineUnavailable("ffmpeg failed to start", details=err or out or f"exit code {rc}")

        self.binary = path
        self.version = out.splitlines()[0] if out else ""
        if self.work_root:
            self.work_root.mkdir(parents=True, exist_ok=True)
        self.workdir = Path(tempfile.mkdtemp(prefix="session-", dir=self.work_root))
        logger.info(f"Loaded {self.version or path} (workdir {self.workdir})")

    def _resolve(self, name: str) -> Path:
        if self.workdir is None:
            raise EngineUnavailable("ffmpeg engine is not loaded")
        if not name or name != Path(name).name or name.startswith(".") or "\\" in name:
            raise ValueError(f"Invalid engine file name: {name!r}")
        return self.workdir / name

    async def write_file(self, name: str, data: bytes) -> None:
        await asyncio.to_thread(self._resolve(name).write_bytes, data)

    async def exec(self, argv: list[str]) -> None:
        if self.workdir is None:
            raise EngineUnavailable("ffmpeg engine is not loaded")
        cmd = [self.binary, "-hide_banner", "-nostdin", "-y", *argv]
        logger.debug(f"exec: {' '.join(cmd)}")
        try:
            rc, _, err = await run_cmd(*cmd, cwd=self.workdir, timeout=None)
        except OSError as e:
            raise EngineExecutionError(e, argv) from e
        if rc != 0:
            tail = "\n".join(err.splitlines()[-STDERR_TAIL_LINES:])
            raise EngineExecutionError(tail or f"ffmpeg exited with code {rc}", argv)

    async def list_dir(self, path: str = "/") -> list[EngineEntry]:
        if self.workdir is None:
            raise EngineUnavailable("ffmpeg engine is not loaded")
        if path not in ("/", "", "."):
            raise ValueError(f"Only the root directory can be listed, got {path!r}")
        return [EngineEntry(name=p.name) for p in self.workdir.iterdir() if p.is_file()]

    async def read_file(self, name: str) -> bytes:
        return await asyncio.to_thread(self._resolve(name).read_bytes)

    async def delete_file(self, name: str) -> None:
        self._resolve(name).unlink()

    async def close(self) -> None:
        if self.workdir is not None:
            shutil.rmtree(self.workdir, ignore_errors=True)
            self.workdir = None
