"""
Session cookie helpers shared by HTTP routes and the relay socket.

The cookie holds the raw session token; SessionService maps it to a user.
"""

import logging
from typing import Optional

from fastapi import Response
from starlette.requests import HTTPConnection

from .core.config import settings

logger = logging.getLogger(__name__)


def session_token_from_connection(conn: HTTPConnection) -> Optional[str]:
    """Read the session token from a Request or WebSocket cookie header."""
    token = conn.cookies.get(settings.session_cookie_name)
    return token or None


def set_session_cookie(response: Response, token: str) -> None:
    """Issue or refresh the session cookie for the full TTL."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
