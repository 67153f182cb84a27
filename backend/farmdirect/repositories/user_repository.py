# backend/farmdirect/repositories/user_repository.py
"""User directory data access."""

import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by login email."""
        try:
            return (
                self.db.query(User)
                .filter(func.lower(User.email) == (email or "").strip().lower())
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}") from e

    def get_active_by_id(self, user_id: str) -> Optional[User]:
        user = self.get_by_id(user_id)
        if user is not None and user.is_active:
            return user
        return None

    def get_map_by_ids(self, user_ids: Iterable[str]) -> Dict[str, User]:
        """Return ``{id: user}`` for the ids that exist."""
        return {user.id: user for user in self.get_by_ids(user_ids)}
