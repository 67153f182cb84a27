"""
Centralized dependency injection for FastAPI routes.

Usage:
    from farmdirect.api.dependencies import get_current_user, get_message_service
"""

from .auth import get_current_user, get_session_token
from .services import (
    get_auth_service,
    get_conversation_service,
    get_message_service,
    get_session_service,
    get_user_service,
)

__all__ = [
    "get_current_user",
    "get_session_token",
    "get_auth_service",
    "get_conversation_service",
    "get_message_service",
    "get_session_service",
    "get_user_service",
]
