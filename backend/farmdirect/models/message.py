# backend/farmdirect/models/message.py
"""
Message model for the marketplace chat system.

Represents a direct message from one user to another, optionally about a
farm space listing. Messages are never deleted; the only mutation after
creation is the recipient's read flag going from False to True.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Message(Base):
    """
    Direct message between two users.

    Attributes:
        id: ULID primary key assigned at creation
        sender_id: Author of the message
        recipient_id: Addressee; the only user allowed to mark it read
        subject: Free-text subject line
        body: Free-text message content
        is_read: Whether the recipient has read it
        context_id: Optional farm space the message is about
        created_at: Immutable creation timestamp
    """

    __tablename__ = "messages"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    sender_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    recipient_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    subject = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    context_id = Column(
        String(26), ForeignKey("farm_spaces.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    sender = relationship("User", foreign_keys=[sender_id])
    recipient = relationship("User", foreign_keys=[recipient_id])

    __table_args__ = (
        Index("ix_messages_sender_recipient", "sender_id", "recipient_id"),
        Index("ix_messages_recipient_unread", "recipient_id", "is_read"),
    )

    def counterpart_of(self, user_id: str) -> str:
        """Return the other participant from *user_id*'s point of view."""
        return self.recipient_id if self.sender_id == user_id else self.sender_id

    def __repr__(self) -> str:
        return f"<Message {self.id} {self.sender_id}->{self.recipient_id} read={self.is_read}>"
