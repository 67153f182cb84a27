# backend/farmdirect/models/session.py
"""
Server-side session store.

The cookie carries an opaque random token; only its SHA-256 digest is kept
here, so a leaked table cannot be replayed as cookies.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from ..database import Base


class UserSession(Base):
    """An authenticated session with a sliding expiry."""

    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    last_seen_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User")
