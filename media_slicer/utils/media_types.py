"""Media format classification."""

from typing import Optional

from ..errors import ValidationError

VIDEO_EXTENSIONS = (
    "mp4", "m4v", "mov", "mkv", "webm", "avi", "wmv", "flv",
    "mpg", "mpeg", "ts", "m2ts", "3gp", "ogv",
)
AUDIO_EXTENSIONS = (
    "mp3", "wav", "flac", "aac", "m4a", "ogg", "oga", "opus", "wma", "aiff", "aif",
)
SUPPORTED_EXTENSIONS = frozenset(VIDEO_EXTENSIONS + AUDIO_EXTENSIONS)

MEDIA_MIME_PREFIXES = ("audio/", "video/")


def extension_of(name: str) -> str:
    """Text after the final dot, or "" when there is none."""
    _, dot, ext = (name or "").rpartition(".")
    return ext if dot else ""


def is_supported_media(name: str, mime_type: Optional[str] = None) -> bool:
    """Accept on a media MIME type OR an allow-listed extension.

    Browsers and HTTP clients report an empty or generic MIME type for
    several containers, so the extension check stands on its own.
    """
    mime = (mime_type or "").lower()
    if mime.startswith(MEDIA_MIME_PREFIXES):
        return True
    return extension_of(name).lower() in SUPPORTED_EXTENSIONS


def validate_selection(
    name: str,
    mime_type: Optional[str],
    size: int,
    max_bytes: int,
) -> None:
    """Raise ValidationError if the file cannot be accepted for processing."""
    if not is_supported_media(name, mime_type):
        raise ValidationError(
            "Unsupported file format. Please select a media file (mp4, mp3, mov, wav, etc.)",
            field="file",
        )
    if size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise ValidationError(
            f"File size too large. Maximum size is {limit_mb}MB for processing.",
            field="size",
        )
