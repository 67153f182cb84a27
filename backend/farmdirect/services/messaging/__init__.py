# backend/farmdirect/services/messaging/__init__.py
"""
Real-time messaging package.

- ``relay``: the process-wide ConnectionRegistry used by the WebSocket
  endpoint and by the send route to push notifications
- ``events``: builders for the frames exchanged over the socket
"""

from .events import (
    EventType,
    build_error_event,
    build_joined_event,
    build_new_message_event,
    build_pong_event,
)
from .relay import SCOPE_ALL, SCOPE_PARTICIPANTS, ConnectionRegistry, relay

__all__ = [
    "ConnectionRegistry",
    "relay",
    "SCOPE_ALL",
    "SCOPE_PARTICIPANTS",
    "EventType",
    "build_new_message_event",
    "build_joined_event",
    "build_pong_event",
    "build_error_event",
]
