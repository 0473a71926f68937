"""Request-scoped access to the objects owned by the app."""

from fastapi import Request

from ..config import Settings
from ..engine.session import EngineSession
from ..services.delivery import DownloadStore
from ..services.orchestrator import SegmentationOrchestrator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session(request: Request) -> EngineSession:
    return request.app.state.session


def get_orchestrator(request: Request) -> SegmentationOrchestrator:
    return request.app.state.orchestrator


def get_downloads(request: Request) -> DownloadStore:
    return request.app.state.downloads
