"""Run API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..errors import ValidationError
from ..services.orchestrator import SegmentationOrchestrator
from .deps import get_orchestrator
from .selection import validation_status

router = APIRouter(prefix="/runs", tags=["runs"])


class RunRequest(BaseModel):
    # range is checked by the orchestrator so all precondition errors look alike
    segment_length: int = 30


@router.post("", status_code=202)
async def start_run(
    request: RunRequest,
    orchestrator: SegmentationOrchestrator = Depends(get_orchestrator),
):
    try:
        run = orchestrator.start_run(orchestrator.selection, request.segment_length)
    except ValidationError as e:
        raise HTTPException(status_code=validation_status(e), detail=str(e))
    return run


@router.get("/current")
async def get_current_run(orchestrator: SegmentationOrchestrator = Depends(get_orchestrator)):
    return orchestrator.run
