"""WebSocket endpoint for live run progress."""

import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter(tags=["websocket"])

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.active: list[WebSocket] = []

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.active.append(ws)

    def disconnect(self, ws: WebSocket):
        if ws in self.active:
            self.active.remove(ws)

    async def broadcast(self, message: dict):
        for ws in list(self.active):
            try:
                await ws.send_json(message)
            except Exception:
                logger.debug("Dropping websocket after failed send", exc_info=True)
                self.disconnect(ws)


def _snapshot_message(ws: WebSocket) -> dict:
    run = ws.app.state.orchestrator.run
    return {"type": "run_progress", "run": run.model_dump(mode="json")}


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    manager: ConnectionManager = ws.app.state.connections
    await manager.connect(ws)

    try:
        await ws.send_json(_snapshot_message(ws))
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue

            if isinstance(msg, dict) and msg.get("action") == "snapshot":
                await ws.send_json(_snapshot_message(ws))

    except WebSocketDisconnect:
        manager.disconnect(ws)
    except Exception:
        logger.debug("Websocket closed with an error", exc_info=True)
        manager.disconnect(ws)
