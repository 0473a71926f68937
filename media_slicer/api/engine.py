"""Media engine API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from ..engine.session import EngineSession
from ..errors import EngineUnavailable
from .deps import get_session

router = APIRouter(prefix="/engine", tags=["engine"])


@router.get("")
async def get_engine_status(session: EngineSession = Depends(get_session)):
    return await session.status()


@router.post("/load")
async def load_engine(session: EngineSession = Depends(get_session)):
    """Wait for the engine to be ready; retries a previously failed load."""
    session.reset()
    try:
        await session.acquire()
    except EngineUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return await session.status()
