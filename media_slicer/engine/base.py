"""Abstract media engine interface."""

from abc import ABC, abstractmethod

from ..models.media import EngineEntry


class MediaEngine(ABC):
    """A media-processing engine with its own private working filesystem.

    Any conforming engine works: a native process, a remote service, or an
    in-memory double.
    """

    name: str = ""

    @abstractmethod
    async def load(self) -> None:
        """One-time initialization. Raise EngineUnavailable on failure."""
        ...

    @abstractmethod
    async def write_file(self, name: str, data: bytes) -> None:
        ...

    @abstractmethod
    async def exec(self, argv: list[str]) -> None:
        """Run one command; raise EngineExecutionError if it fails."""
        ...

    @abstractmethod
    async def list_dir(self, path: str = "/") -> list[EngineEntry]:
        ...

    @abstractmethod
    async def read_file(self, name: str) -> bytes:
        ...

    @abstractmethod
    async def delete_file(self, name: str) -> None:
        ...

    async def close(self) -> None:
        """Release engine resources at shutdown."""
        return None
