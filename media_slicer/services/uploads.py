"""Stage uploaded media on disk until a run consumes it."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from ..errors import ValidationError
from ..models.media import SourceFile
from ..utils.filenames import sanitize
from ..utils.media_types import validate_selection

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


async def stage_upload(upload: UploadFile, upload_dir: Path, max_bytes: int) -> SourceFile:
    """Copy an upload to ``upload_dir`` and describe it as a SourceFile.

    Format and declared size are checked before anything is written; the
    size is checked again while streaming since clients may omit it.
    """
    name = upload.filename or ""
    mime_type = upload.content_type or ""
    validate_selection(name, mime_type, upload.size or 0, max_bytes)

    upload_dir.mkdir(parents=True, exist_ok=True)
    dest = upload_dir / f"{uuid.uuid4().hex[:12]}-{sanitize(name)}"
    size = 0
    try:
        with open(dest, "wb") as f:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    validate_selection(name, mime_type, size, max_bytes)
                f.write(chunk)
    except (ValidationError, OSError):
        dest.unlink(missing_ok=True)
        raise

    logger.info(f"Staged {name!r} ({size} bytes) at {dest}")
    return SourceFile(name=name, size=size, mime_type=mime_type, path=dest)
