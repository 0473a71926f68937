"""Aggregate all API sub-routers."""

from fastapi import APIRouter

from . import engine, selection, runs, downloads, ws

api_router = APIRouter()

api_router.include_router(engine.router)
api_router.include_router(selection.router)
api_router.include_router(runs.router)
api_router.include_router(downloads.router)
api_router.include_router(ws.router)
