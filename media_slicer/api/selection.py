"""File selection API endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..config import Settings
from ..errors import RunInProgress, ValidationError
from ..services.orchestrator import SegmentationOrchestrator
from ..services.uploads import stage_upload
from .deps import get_orchestrator, get_settings

router = APIRouter(prefix="/selection", tags=["selection"])


def validation_status(err: ValidationError) -> int:
    if isinstance(err, RunInProgress):
        return 409
    if err.field == "size":
        return 413
    return 400


@router.post("")
async def select_file(
    file: UploadFile = File(...),
    orchestrator: SegmentationOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
):
    if orchestrator.busy:
        raise HTTPException(status_code=409, detail="A run is already in progress.")
    try:
        source = await stage_upload(file, settings.upload_dir, settings.max_upload_bytes)
    except ValidationError as e:
        raise HTTPException(status_code=validation_status(e), detail=str(e))

    try:
        orchestrator.select_file(source)
    except ValidationError as e:
        source.discard()
        raise HTTPException(status_code=validation_status(e), detail=str(e))

    return {
        "name": source.name,
        "size": source.size,
        "mime_type": source.mime_type,
        "status": "File selected. Ready to process.",
    }


@router.get("")
async def get_selection(orchestrator: SegmentationOrchestrator = Depends(get_orchestrator)):
    source = orchestrator.selection
    if source is None:
        raise HTTPException(status_code=404, detail="No file selected")
    return {"name": source.name, "size": source.size, "mime_type": source.mime_type}


@router.delete("")
async def clear_selection(orchestrator: SegmentationOrchestrator = Depends(get_orchestrator)):
    try:
        orchestrator.clear_selection()
    except RunInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"cleared": True}
