"""Segmentation command and output naming rules."""

import re

from ..models.media import EngineEntry, SegmentSpec
from ..utils.media_types import SUPPORTED_EXTENSIONS

OUTPUT_PREFIX = "out_"
# Two digits: name order equals numeric order only up to 99 segments.
COUNTER_WIDTH = 2
MAX_SORTABLE_SEGMENTS = 10 ** COUNTER_WIDTH - 1
_OUTPUT_NAME = re.compile(rf"{OUTPUT_PREFIX}\d{{{COUNTER_WIDTH},}}\.([^.]+)")

# Prefix for inputs whose own name would look like a segment
INPUT_PREFIX = "in_"

DEFAULT_OUTPUT_EXTENSION = "mp4"
DEFAULT_SEGMENT_FORMAT = "mp4"

# Audio-only containers that ffmpeg can write directly per segment
RAW_AUDIO_FORMATS = {
    "mp3": "mp3",
    "wav": "wav",
    "flac": "flac",
    "ogg": "ogg",
    "opus": "opus",
    "aac": "adts",
}


def resolve_output_extension(ext: str) -> str:
    if ext and ext.lower() in SUPPORTED_EXTENSIONS:
        return ext
    return DEFAULT_OUTPUT_EXTENSION


def segment_format_for(ext: str) -> str:
    return RAW_AUDIO_FORMATS.get(ext.lower(), DEFAULT_SEGMENT_FORMAT)


def output_pattern(ext: str) -> str:
    return f"{OUTPUT_PREFIX}%0{COUNTER_WIDTH}d.{ext}"


def build_segment_command(input_name: str, spec: SegmentSpec) -> list[str]:
    """Argv for one codec-copy segmentation pass.

    Timestamps restart at zero in every segment so each file plays on its own.
    """
    return [
        "-i", input_name,
        "-f", "segment",
        "-segment_time", str(spec.segment_length_seconds),
        "-c", "copy",
        "-reset_timestamps", "1",
        "-segment_format", segment_format_for(spec.output_extension),
        output_pattern(spec.output_extension),
    ]


def is_output_name(name: str, ext: str = None) -> bool:
    """True for names the segment pattern produces, e.g. ``out_07.mp4``."""
    match = _OUTPUT_NAME.fullmatch(name)
    if match is None:
        return False
    return ext is None or match.group(1) == ext


def engine_input_name(sanitized: str) -> str:
    """Working-directory name for the input; never collides with a segment."""
    if is_output_name(sanitized):
        return f"{INPUT_PREFIX}{sanitized}"
    return sanitized


def select_outputs(entries: list[EngineEntry], ext: str, input_name: str = None) -> list[str]:
    """Segment names for ``ext``, sorted by name."""
    return sorted(
        e.name for e in entries
        if e.name != input_name and is_output_name(e.name, ext)
    )


def archive_entry_name(base_name: str, ordinal: int, ext: str) -> str:
    return f"{base_name}_segment_{ordinal:02d}.{ext}"


def archive_name(base_name: str) -> str:
    return f"{base_name}_segments.zip"
