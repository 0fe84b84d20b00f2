"""WebSocket endpoint for live notifications."""

import structlog
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import authenticate_token
from app.db.session import get_db
from app.realtime.rooms import can_join_room

log = structlog.get_logger()

router = APIRouter(tags=["notifications"])


@router.websocket("/ws/notifications")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(...),
    db: AsyncSession = Depends(get_db),
) -> None:
    """
    Clients receive {"event": "notification", "data": {...}} frames and may send
    {"action": "join" | "leave", "room": "<room>"} to follow forums, topics or enrollments.
    Each request is answered with a "joined", "left" or "error" frame.
    """
    user = await authenticate_token(db, token)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    hub = websocket.app.state.notifications
    await hub.connect(websocket, user.id)
    try:
        while True:
            frame = await websocket.receive_json()
            room = frame.get("room") if isinstance(frame, dict) else None
            action = frame.get("action") if isinstance(frame, dict) else None
            if not isinstance(room, str) or action not in ("join", "leave"):
                await websocket.send_json({"event": "error", "data": {"detail": "Invalid request"}})
                continue
            if action == "leave":
                hub.leave(websocket, room)
                await websocket.send_json({"event": "left", "data": {"room": room}})
                continue
            if not await can_join_room(db, user, room):
                log.warning("notifications.join_refused", user_id=str(user.id), room=room)
                await websocket.send_json(
                    {"event": "error", "data": {"room": room, "detail": "Not allowed to join room"}}
                )
                continue
            hub.join(websocket, room)
            await websocket.send_json({"event": "joined", "data": {"room": room}})
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)
