"""Archive packaging."""

from .builder import ArchiveBuilder

__all__ = ["ArchiveBuilder"]
