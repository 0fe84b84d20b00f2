"""
In-process notification fan-out over WebSockets.

Each connection joins its own user room (notifications:<user_id>) and may join more rooms
(forum:<id>, topic:<id>, enrollment:<id>, ...). Delivery is fire-and-forget: a failed send
drops that connection and is logged, never raised to the caller.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set
from uuid import UUID

import structlog
from fastapi import WebSocket
from pydantic import BaseModel

from app.core.enums import NotificationType

log = structlog.get_logger()


class Notification(BaseModel):
    type: NotificationType = NotificationType.info
    title: str
    body: str
    link: Optional[str] = None


def user_room(user_id: Any) -> str:
    return f"notifications:{user_id}"


def build_message(notification: Notification) -> Dict[str, Any]:
    message = notification.model_dump(mode="json", exclude_none=True)
    message["id"] = f"notif_{int(time.time() * 1000)}"
    message["timestamp"] = datetime.now(timezone.utc).isoformat()
    return message


class NotificationHub:
    """Tracks live sockets and their rooms. One instance per process, on app.state."""

    def __init__(self) -> None:
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._memberships: Dict[WebSocket, Set[str]] = {}

    @property
    def connection_count(self) -> int:
        return len(self._memberships)

    def room_members(self, room: str) -> Set[WebSocket]:
        return set(self._rooms.get(room, ()))

    async def connect(self, websocket: WebSocket, user_id: UUID) -> None:
        await websocket.accept()
        self._memberships[websocket] = set()
        self.join(websocket, user_room(user_id))
        log.info("notifications.connected", user_id=str(user_id), total=self.connection_count)

    def disconnect(self, websocket: WebSocket) -> None:
        for room in self._memberships.pop(websocket, set()):
            members = self._rooms.get(room)
            if members is None:
                continue
            members.discard(websocket)
            if not members:
                del self._rooms[room]

    def join(self, websocket: WebSocket, room: str) -> None:
        self._rooms.setdefault(room, set()).add(websocket)
        self._memberships.setdefault(websocket, set()).add(room)

    def leave(self, websocket: WebSocket, room: str) -> None:
        members = self._rooms.get(room)
        if members is not None:
            members.discard(websocket)
            if not members:
                del self._rooms[room]
        self._memberships.get(websocket, set()).discard(room)

    async def send_to_user(self, user_id: Any, notification: Notification) -> int:
        return await self.send_to_room(user_room(user_id), notification)

    async def send_to_users(self, user_ids: Iterable[Any], notification: Notification) -> int:
        delivered = 0
        for user_id in user_ids:
            delivered += await self.send_to_user(user_id, notification)
        return delivered

    async def send_to_room(self, room: str, notification: Notification) -> int:
        return await self._deliver(self.room_members(room), build_message(notification))

    async def broadcast(self, notification: Notification) -> int:
        return await self._deliver(list(self._memberships), build_message(notification))

    async def _deliver(self, sockets: Iterable[WebSocket], message: Dict[str, Any]) -> int:
        delivered = 0
        dead: List[WebSocket] = []
        for websocket in sockets:
            try:
                await websocket.send_json({"event": "notification", "data": message})
                delivered += 1
            except Exception:
                log.warning("notifications.delivery_failed", exc_info=True)
                dead.append(websocket)
        for websocket in dead:
            self.disconnect(websocket)
        return delivered
