"""FastAPI application factory."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .api.router import api_router
from .api.ws import ConnectionManager
from .config import Settings, settings as default_settings
from .engine.base import MediaEngine
from .engine.ffmpeg import FFmpegEngine
from .engine.session import EngineSession
from .errors import EngineUnavailable
from .models.run import ProcessingRun
from .services.delivery import DownloadStore
from .services.orchestrator import SegmentationOrchestrator

# Configure logging for our modules
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")

logger = logging.getLogger(__name__)


async def _warm_up(session: EngineSession) -> None:
    try:
        await session.acquire()
    except EngineUnavailable as e:
        logger.error(f"Media engine unavailable: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Start loading the engine right away; runs are refused until it is ready
    warm_up = asyncio.create_task(_warm_up(app.state.session))
    try:
        yield
    finally:
        warm_up.cancel()
        await app.state.orchestrator.shutdown()
        await app.state.session.close()


def create_app(settings: Optional[Settings] = None, engine: Optional[MediaEngine] = None) -> FastAPI:
    settings = settings or default_settings
    if settings.debug:
        logging.getLogger("media_slicer").setLevel(logging.DEBUG)

    app = FastAPI(
        title="media-slicer",
        version="0.1.0",
        description="Split audio and video files into fixed-length segments",
        lifespan=lifespan,
    )

    session = EngineSession(engine or FFmpegEngine(settings.ffmpeg_binary, settings.work_dir))
    downloads = DownloadStore(max_items=settings.max_downloads)
    orchestrator = SegmentationOrchestrator(session, downloads, settings)
    connections = ConnectionManager()

    async def broadcast_run(run: ProcessingRun) -> None:
        await connections.broadcast({"type": "run_progress", "run": run.model_dump(mode="json")})

    orchestrator.add_listener(broadcast_run)

    app.state.settings = settings
    app.state.session = session
    app.state.downloads = downloads
    app.state.orchestrator = orchestrator
    app.state.connections = connections

    app.include_router(api_router, prefix="/api")

    if settings.frontend_dir.exists():
        app.mount(
            "/",
            StaticFiles(directory=str(settings.frontend_dir), html=True),
            name="frontend",
        )

    return app
