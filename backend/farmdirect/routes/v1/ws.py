# backend/farmdirect/routes/v1/ws.py
"""
Relay WebSocket endpoint.

Connection lifecycle:
    upgrade with session cookie -> accepted, anonymous
    {"type": "join"}            -> identified as the session user, acked with "joined"
    disconnect                  -> removed from the registry

A join that names a different user than the session gets an
``identity_mismatch`` error frame and the socket is closed with 1008.
``{"type": "ping"}`` is answered with ``{"type": "pong"}``; anything else is
ignored.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import sessionmaker

from ...auth_session import session_token_from_connection
from ...database import get_db_session, get_session_factory
from ...monitoring.prometheus_metrics import prometheus_metrics
from ...services.messaging import (
    EventType,
    build_error_event,
    build_joined_event,
    build_pong_event,
    relay,
)
from ...services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter()


def _resolve_user_id(session_factory: sessionmaker, token: Optional[str]) -> Optional[str]:
    # The DB is only needed for the handshake; the socket holds no session
    with get_db_session(session_factory) as db:
        user = SessionService(db).resolve_user(token)
        return user.id if user is not None else None


def _parse_frame(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        frame = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return frame if isinstance(frame, dict) else None


@router.websocket("/ws/messages")
async def messages_ws(
    websocket: WebSocket,
    session_factory: sessionmaker = Depends(get_session_factory),
) -> None:
    token = session_token_from_connection(websocket)
    user_id = await asyncio.to_thread(_resolve_user_id, session_factory, token)
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Not authenticated")
        return

    await websocket.accept()
    relay.register(websocket)
    prometheus_metrics.websocket_opened()
    logger.debug("Relay socket opened", extra={"user_id": user_id})

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            frame = _parse_frame(message.get("text"))
            if frame is None:
                continue

            frame_type = frame.get("type")
            if frame_type == EventType.JOIN.value:
                claimed = frame.get("userId")
                if claimed is not None and str(claimed) != user_id:
                    logger.warning(
                        "Relay join with mismatched identity",
                        extra={"user_id": user_id, "claimed_user_id": str(claimed)},
                    )
                    await websocket.send_json(build_error_event("identity_mismatch"))
                    await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
                    break
                relay.identify(websocket, user_id)
                await websocket.send_json(build_joined_event(user_id))
            elif frame_type == EventType.PING.value:
                await websocket.send_json(build_pong_event())
    except WebSocketDisconnect:
        pass
    finally:
        relay.unregister(websocket)
        prometheus_metrics.websocket_closed()
        logger.debug("Relay socket closed", extra={"user_id": user_id})
