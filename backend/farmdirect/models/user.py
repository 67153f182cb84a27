# backend/farmdirect/models/user.py
"""
User model for the FarmDirect marketplace.

Buyers and growers share one table. The messaging core only reads from it:
it resolves display identity for conversation counterparts and checks that a
recipient exists before a message is stored.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base


class User(Base):
    """
    Marketplace account.

    Attributes:
        id: ULID primary key
        email: Unique, lower-cased login email
        hashed_password: Bcrypt hash (null for accounts created by OAuth)
        name: Display name shown to counterparts
        image: Optional avatar URL
        zip_code: Optional ZIP used by listing filters
        about: Optional free-text profile blurb
        is_active: Inactive accounts cannot authenticate
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    image = Column(String(1024), nullable=True)
    zip_code = Column(String(10), nullable=True)
    about = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    @property
    def display_name(self) -> str:
        return self.name or f"User {self.id}"

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
