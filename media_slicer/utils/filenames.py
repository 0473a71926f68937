"""Filename sanitizing for the engine's working directory."""

import re

FALLBACK_BASE_NAME = "media"

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_STEM = re.compile(r"[^A-Za-z0-9._-]")
_UNSAFE_EXT = re.compile(r"[^A-Za-z0-9_-]")


def sanitize(raw_name: str) -> str:
    """Return a name safe to use as a working-directory entry.

    Whitespace runs become ``_``, everything outside ``[A-Za-z0-9._-]`` is
    dropped, and the final extension is kept with its case. Never empty,
    never starts with a dot, never just dashes, idempotent.
    """
    name = (raw_name or "").strip()
    stem, dot, ext = name.rpartition(".")
    if dot:
        ext = _UNSAFE_EXT.sub("", _WHITESPACE.sub("_", ext))
        if not ext:
            # "clip.!!" has no usable extension, try the part before the dot
            return sanitize(stem)
    else:
        stem, ext = name, ""

    stem = _UNSAFE_STEM.sub("", _WHITESPACE.sub("_", stem)).strip(".")
    # a bare "-" means stdin to ffmpeg
    if not stem.strip("-"):
        stem = FALLBACK_BASE_NAME
    return f"{stem}.{ext}" if ext else stem


def base_name_of(sanitized: str) -> str:
    """Name without its final extension, e.g. ``clip.mp4`` -> ``clip``."""
    stem, dot, _ = sanitized.rpartition(".")
    return stem if dot and stem else sanitized
