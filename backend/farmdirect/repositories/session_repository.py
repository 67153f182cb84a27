# backend/farmdirect/repositories/session_repository.py
"""Session store data access."""

from datetime import datetime
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.session import UserSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SessionRepository(BaseRepository[UserSession]):
    def __init__(self, db: Session):
        super().__init__(db, UserSession)

    def touch(self, session: UserSession, now: datetime, expires_at: datetime) -> UserSession:
        """Slide the expiry window of an active session."""
        try:
            session.last_seen_at = now
            session.expires_at = expires_at
            self.db.flush()
            return session
        except SQLAlchemyError as e:
            self.logger.error(f"Error refreshing session: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to refresh session: {str(e)}") from e

    def delete_expired(self, now: datetime) -> int:
        """Remove every session whose expiry has passed."""
        try:
            count = (
                self.db.query(UserSession)
                .filter(UserSession.expires_at <= now)
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return int(count or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error purging expired sessions: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to purge sessions: {str(e)}") from e
