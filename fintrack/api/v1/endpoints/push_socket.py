import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from fintrack.api import deps
from fintrack.core.services import AppServices

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/socket")
async def push_socket(websocket: WebSocket, services: AppServices = Depends(deps.get_services)):
    """Live push channel.

    Clients send ``{"event": "join-room", "data": <roomId>}`` or
    ``{"event": "register", "data": <userId>}``; each join is acknowledged with
    ``{"event": "joined", "data": <roomId>}``. Afterwards the socket receives
    every event published to its rooms, e.g. ``newNotification``.
    """
    rooms = services.push_router
    await rooms.connect(websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                await websocket.send_json({"event": "error", "data": "Invalid message."})
                continue
            if not isinstance(message, dict):
                message = {}
            event = message.get("event")
            data = message.get("data")
            if event == "join-room" and isinstance(data, str) and data:
                room_id = rooms.join(websocket, data)
            elif event == "register" and data:
                room_id = rooms.register(websocket, str(data))
            else:
                await websocket.send_json({"event": "error", "data": "Unknown event."})
                continue
            await websocket.send_json({"event": "joined", "data": room_id})
    except WebSocketDisconnect:
        logger.debug("Push socket disconnected")
    finally:
        rooms.disconnect(websocket)
