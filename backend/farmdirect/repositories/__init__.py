# backend/farmdirect/repositories/__init__.py
"""
Repository layer for the FarmDirect backend.

Repositories own data access; services own transactions and business rules.
"""

from .base_repository import BaseRepository
from .factory import RepositoryFactory
from .message_repository import MessageRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "MessageRepository",
    "RepositoryFactory",
    "SessionRepository",
    "UserRepository",
]
