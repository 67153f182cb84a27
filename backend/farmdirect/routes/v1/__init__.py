# backend/farmdirect/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1, plus the relay socket.
"""

from . import auth, messages, users, ws

__all__ = [
    "auth",
    "messages",
    "users",
    "ws",
]
