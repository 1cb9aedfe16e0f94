import logging
from typing import Any, Dict, Set

from fastapi import WebSocket

from fintrack.core.security import room_id_for

logger = logging.getLogger(__name__)


class PushChannelRouter:
    """Tracks which sockets sit in which rooms and fans events out to them.

    Delivery is best effort: an event published to a room with no sockets is
    dropped, and nothing is queued for clients that connect later.
    """

    def __init__(self):
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._memberships: Dict[WebSocket, Set[str]] = {}

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self._memberships.setdefault(websocket, set())

    def join(self, websocket: WebSocket, room_id: str) -> str:
        self._rooms.setdefault(room_id, set()).add(websocket)
        self._memberships.setdefault(websocket, set()).add(room_id)
        return room_id

    def register(self, websocket: WebSocket, user_id: str) -> str:
        """Join by user id; lands in the hashed room so the socket gets the user's notifications."""
        return self.join(websocket, room_id_for(user_id))

    def disconnect(self, websocket: WebSocket):
        for room_id in self._memberships.pop(websocket, set()):
            members = self._rooms.get(room_id)
            if members is None:
                continue
            members.discard(websocket)
            if not members:
                del self._rooms[room_id]

    def members(self, room_id: str) -> int:
        return len(self._rooms.get(room_id, ()))

    async def publish(self, room_id: str, event: str, payload: Any) -> int:
        """Send ``{"event", "data"}`` to every socket in the room. Returns how many received it."""
        members = list(self._rooms.get(room_id, ()))
        if not members:
            logger.debug(f"No sockets in room {room_id[:12]}, dropping {event}")
            return 0
        message = {"event": event, "data": payload}
        delivered = 0
        for websocket in members:
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping socket from room {room_id[:12]} after failed send: {e}")
                self.disconnect(websocket)
        return delivered
