# backend/farmdirect/repositories/factory.py
"""
Repository Factory for the FarmDirect backend.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from sqlalchemy.orm import Session

from ..models.farm_space import FarmSpace
from .base_repository import BaseRepository
from .message_repository import MessageRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation so services can accept injected
    repositories in tests and fall back to these defaults otherwise.
    """

    @staticmethod
    def create_message_repository(db: Session) -> MessageRepository:
        """Create repository for message operations."""
        return MessageRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> UserRepository:
        """Create repository for the user directory."""
        return UserRepository(db)

    @staticmethod
    def create_session_repository(db: Session) -> SessionRepository:
        """Create repository for the session store."""
        return SessionRepository(db)

    @staticmethod
    def create_farm_space_repository(db: Session) -> BaseRepository[FarmSpace]:
        """Farm spaces are read-only here, so the generic repository suffices."""
        return BaseRepository(db, FarmSpace)
