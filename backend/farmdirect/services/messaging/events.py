# backend/farmdirect/services/messaging/events.py
"""
Relay event type definitions and builders.

Server frames are flat JSON objects keyed by ``type``. A new-message
notification looks like:
{
    "type": "new_message",
    "message": {...},      # Message JSON, same shape as the HTTP API
    "senderId": str,
    "recipientId": str
}
"""

from enum import Enum
from typing import Any, Dict, Optional


class EventType(str, Enum):
    """Frame types exchanged over the relay socket."""

    # client -> server
    JOIN = "join"
    PING = "ping"
    # server -> client
    JOINED = "joined"
    PONG = "pong"
    NEW_MESSAGE = "new_message"
    ERROR = "error"


def build_new_message_event(
    message: Dict[str, Any], sender_id: str, recipient_id: str
) -> Dict[str, Any]:
    """Build a new_message notification from serialized message JSON."""
    return {
        "type": EventType.NEW_MESSAGE.value,
        "message": message,
        "senderId": sender_id,
        "recipientId": recipient_id,
    }


def build_joined_event(user_id: str) -> Dict[str, Any]:
    return {"type": EventType.JOINED.value, "userId": user_id}


def build_pong_event() -> Dict[str, Any]:
    return {"type": EventType.PONG.value}


def build_error_event(code: str, detail: Optional[str] = None) -> Dict[str, Any]:
    event: Dict[str, Any] = {"type": EventType.ERROR.value, "code": code}
    if detail:
        event["detail"] = detail
    return event
