"""Process-lifetime handle to the media engine."""

import asyncio
import logging
from typing import Optional

from ..errors import EngineUnavailable, MediaSlicerError, describe_error
from ..models.system import EngineStatus
from .base import MediaEngine

logger = logging.getLogger(__name__)


class EngineSession:
    """Owns one engine and its one-time initialization.

    ``acquire()`` is idempotent: the first call starts initialization and
    every caller, concurrent or later, awaits that same task. A failed
    initialization stays failed until ``reset()`` is called explicitly.
    """

    def __init__(self, engine: MediaEngine):
        self.engine = engine
        self._init_task: Optional[asyncio.Task] = None

    @property
    def loaded(self) -> bool:
        task = self._init_task
        return (
            task is not None
            and task.done()
            and not task.cancelled()
            and task.exception() is None
        )

    @property
    def loading(self) -> bool:
        return self._init_task is not None and not self._init_task.done()

    @property
    def error(self) -> Optional[str]:
        task = self._init_task
        if task is None or not task.done() or task.cancelled():
            return None
        exc = task.exception()
        return describe_error(exc) if exc else None

    async def acquire(self) -> MediaEngine:
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        await asyncio.shield(self._init_task)
        return self.engine

    async def _initialize(self) -> None:
        logger.info(f"Initializing {self.engine.name or 'media'} engine...")
        try:
            await self.engine.load()
        except EngineUnavailable:
            logger.error("Engine initialization failed", exc_info=True)
            raise
        except Exception as e:
            logger.error("Engine initialization failed", exc_info=True)
            raise EngineUnavailable("Media engine failed to initialize", describe_error(e)) from e
        logger.info("Engine ready")

    def reset(self) -> bool:
        """Forget a failed initialization so the next acquire() starts over."""
        task = self._init_task
        if task is not None and task.done() and not self.loaded:
            self._init_task = None
            return True
        return False

    async def status(self) -> EngineStatus:
        files: list[str] = []
        if self.loaded:
            try:
                files = sorted(e.name for e in await self.engine.list_dir("/"))
            except (MediaSlicerError, OSError) as e:
                logger.warning(f"Could not list engine files: {e}")
        return EngineStatus(
            name=self.engine.name,
            loaded=self.loaded,
            loading=self.loading,
            error=self.error,
            files=files,
        )

    async def close(self) -> None:
        if self.loaded:
            await self.engine.close()
