"""WebSocket endpoint for live pin and category updates."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from mappins.realtime import Broadcaster

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


async def _handle_message(
    websocket: WebSocket, broadcaster: Broadcaster, message: Any
) -> None:
    if not isinstance(message, dict):
        logger.debug("Ignoring non-object realtime message")
        return

    event = message.get("event") or message.get("type")
    if event == "join_room":
        room = broadcaster.join(websocket)
        await websocket.send_json({"event": "room_joined", "data": {"room": room}})
    elif event == "leave_room":
        broadcaster.leave(websocket)
        await websocket.send_json(
            {"event": "room_left", "data": {"room": broadcaster.default_room}}
        )
    else:
        logger.debug("Ignoring realtime message %r", event)


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket) -> None:
    broadcaster: Broadcaster | None = getattr(websocket.app.state, "broadcaster", None)
    if broadcaster is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    broadcaster.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed realtime message: %.80s", raw)
                continue
            await _handle_message(websocket, broadcaster, message)
    except WebSocketDisconnect:
        logger.debug("Realtime client went away")
    finally:
        broadcaster.disconnect(websocket)
