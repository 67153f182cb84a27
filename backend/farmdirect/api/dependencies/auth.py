# backend/farmdirect/api/dependencies/auth.py
"""
Authentication dependencies.

Every protected route resolves the caller from the session cookie. A
successful resolution slides the session, so the cookie is re-issued with a
fresh Max-Age on the same response.
"""

import logging
from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from ...auth_session import session_token_from_connection, set_session_cookie
from ...core.exceptions import UnauthorizedException
from ...database import get_db
from ...models.user import User
from ...services.session_service import SessionService

logger = logging.getLogger(__name__)


def get_session_token(request: Request) -> Optional[str]:
    return session_token_from_connection(request)


def get_current_user(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the signed-in user or reject the request.

    Raises:
        UnauthorizedException: No cookie, or an unknown or expired session
    """
    user = SessionService(db).resolve_user(token)
    if user is None:
        raise UnauthorizedException("Not authenticated", code="NOT_AUTHENTICATED")
    set_session_cookie(response, token or "")
    return user

