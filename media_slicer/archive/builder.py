"""In-memory ZIP archive builder."""

import asyncio
import io
import zipfile

from ..errors import ArchiveError


class ArchiveBuilder:
    """Collects named buffers and produces one ZIP blob.

    An instance serves exactly one run: ``finalize()`` can be called once,
    and nothing can be added afterwards.
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression
        self._entries: dict[str, bytes] = {}
        self._finalized = False

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    def add(self, name: str, data: bytes) -> None:
        if self._finalized:
            raise ArchiveError("Archive already finalized", details=name)
        if name in self._entries:
            raise ArchiveError("Duplicate archive entry", details=name)
        self._entries[name] = bytes(data)

    async def finalize(self) -> bytes:
        if self._finalized:
            raise ArchiveError("Archive already finalized")
        self._finalized = True
        entries, self._entries = self._entries, {}
        return await asyncio.to_thread(self._build, entries)

    def _build(self, entries: dict[str, bytes]) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=self.compression) as zf:
            for name, data in entries.items():
                zf.writestr(name, data)
        return buf.getvalue()
