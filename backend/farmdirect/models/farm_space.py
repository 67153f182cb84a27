# backend/farmdirect/models/farm_space.py
"""Farm space listing, referenced by messages as their optional context."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


class FarmSpace(Base):
    __tablename__ = "farm_spaces"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    owner_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    owner = relationship("User")
