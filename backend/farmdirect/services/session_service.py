# backend/farmdirect/services/session_service.py
"""
Session Service: the server-side session store.

A session maps an opaque cookie token to a user id. Sessions slide: every
successful resolution pushes the expiry out by the configured TTL, so an
active user stays signed in while an idle one is logged out after the TTL.
"""

from dataclasses import dataclass
from datetime import timedelta
import hashlib
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..models.session import UserSession
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.session_repository import SessionRepository
from ..repositories.user_repository import UserRepository
from ..utils.time_utils import ensure_utc, utcnow
from .base import BaseService


def hash_session_token(token: str) -> str:
    """Return the storage key for a raw cookie token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class IssuedSession:
    """A freshly created session and the raw token to put in the cookie."""

    token: str
    session: UserSession


class SessionService(BaseService):
    """Create, resolve and destroy authenticated sessions."""

    def __init__(
        self,
        db: Session,
        session_repository: Optional[SessionRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.session_repository = (
            session_repository or RepositoryFactory.create_session_repository(db)
        )
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.ttl = timedelta(days=settings.session_ttl_days)

    @BaseService.measure_operation("create_session")
    def create_session(self, user_id: str) -> IssuedSession:
        """Open a new session for *user_id* and return its raw token."""
        token = secrets.token_urlsafe(32)
        now = utcnow()
        with self.transaction():
            session = self.session_repository.create(
                id=hash_session_token(token),
                user_id=user_id,
                created_at=now,
                last_seen_at=now,
                expires_at=now + self.ttl,
            )
        self.logger.info("Session created", extra={"user_id": user_id})
        return IssuedSession(token=token, session=session)

    @BaseService.measure_operation("resolve_session")
    def resolve_user(self, token: Optional[str]) -> Optional[User]:
        """
        Return the active user behind *token*, sliding its expiry.

        Expired sessions are deleted when encountered. Returns None for a
        missing, unknown or expired token, or for an inactive account.
        """
        if not token:
            return None

        session = self.session_repository.get_by_id(hash_session_token(token))
        if session is None:
            return None

        now = utcnow()
        if ensure_utc(session.expires_at) <= now:
            with self.transaction():
                self.session_repository.delete(session.id)
            self.logger.debug("Expired session removed", extra={"user_id": session.user_id})
            return None

        user = self.user_repository.get_active_by_id(session.user_id)
        if user is None:
            return None

        with self.transaction():
            self.session_repository.touch(session, now=now, expires_at=now + self.ttl)
        return user

    @BaseService.measure_operation("destroy_session")
    def destroy_session(self, token: Optional[str]) -> bool:
        """Delete the session behind *token*. Returns False if there was none."""
        if not token:
            return False
        with self.transaction():
            deleted = self.session_repository.delete(hash_session_token(token))
        return deleted

    def purge_expired(self) -> int:
        """Delete every expired session; returns the number removed."""
        with self.transaction():
            removed = self.session_repository.delete_expired(utcnow())
        if removed:
            self.logger.info(f"Purged {removed} expired sessions")
        return removed
