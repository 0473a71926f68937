"""Hand finished archives to the user."""

import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Download(BaseModel):
    run_id: str
    filename: str
    data: bytes
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))


class Delivery(ABC):
    @abstractmethod
    async def deliver(self, run_id: str, blob: bytes, filename: str) -> None:
        """Make ``blob`` available to the user under ``filename``."""
        ...


class DownloadStore(Delivery):
    """Keeps the latest archives in memory for the download endpoint."""

    def __init__(self, max_items: int = 5):
        self.max_items = max(1, max_items)
        self._items: OrderedDict[str, Download] = OrderedDict()

    async def deliver(self, run_id: str, blob: bytes, filename: str) -> None:
        self._items[run_id] = Download(run_id=run_id, filename=filename, data=blob)
        self._items.move_to_end(run_id)
        while len(self._items) > self.max_items:
            dropped, _ = self._items.popitem(last=False)
            logger.debug(f"Dropped download {dropped}")
        logger.info(f"Download ready: {filename} ({len(blob)} bytes)")

    def get(self, run_id: str) -> Optional[Download]:
        return self._items.get(run_id)
