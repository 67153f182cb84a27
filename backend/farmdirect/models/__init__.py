# backend/farmdirect/models/__init__.py
"""
SQLAlchemy models for the FarmDirect messaging backend.

Importing this package registers every table with ``Base.metadata``.
"""

from .farm_space import FarmSpace
from .message import Message
from .session import UserSession
from .user import User

__all__ = [
    "FarmSpace",
    "Message",
    "User",
    "UserSession",
]
