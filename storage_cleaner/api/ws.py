"""WebSocket endpoint for live scan progress."""

import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..models.scan import ScanJob
from ..services.scan_manager import scan_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


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
            except (WebSocketDisconnect, RuntimeError):
                self.disconnect(ws)


manager = ConnectionManager()


async def broadcast_job(job: ScanJob) -> None:
    await manager.broadcast({
        "type": "scan_progress",
        "job_id": job.id,
        "status": job.status.value,
        "progress": job.progress.model_dump(mode="json") if job.progress else None,
        "error": job.error.model_dump() if job.error else None,
    })


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)

    try:
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue

            action = msg.get("action")
            if action == "subscribe_scan":
                scan_manager.add_progress_listener(broadcast_job)
            elif action == "cancel_scan":
                scan_manager.cancel_scan()

    except WebSocketDisconnect:
        manager.disconnect(ws)
