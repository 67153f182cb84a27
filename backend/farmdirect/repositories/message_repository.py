# backend/farmdirect/repositories/message_repository.py
"""
Message Repository for the chat system.

Owns persistence of Message rows. Validation of who may send or read what is
the HTTP/service layer's job; this module only answers data questions.
"""

from datetime import datetime, timezone
import logging
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, RepositoryException
from ..models.message import Message
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):
    """
    Repository for message data access.

    Handles all database operations for direct messages: creation, the two
    read queries used by the conversation views, read-flag updates and
    unread counting.
    """

    def __init__(self, db: Session):
        """Initialize with Message model."""
        super().__init__(db, Message)
        self.logger = logging.getLogger(__name__)

    def create_message(
        self,
        sender_id: str,
        recipient_id: str,
        subject: str,
        body: str,
        context_id: Optional[str] = None,
    ) -> Message:
        """
        Create a new unread message.

        Args:
            sender_id: Authenticated author
            recipient_id: Addressee
            subject: Subject line
            body: Message content
            context_id: Optional farm space the message is about

        Returns:
            The created message, flushed so its id is populated
        """
        return self.create(
            sender_id=sender_id,
            recipient_id=recipient_id,
            subject=subject,
            body=body,
            context_id=context_id,
            is_read=False,
            created_at=datetime.now(timezone.utc),
        )

    def list_for_user(self, user_id: str) -> List[Message]:
        """
        Get every message the user sent or received, newest first.

        Args:
            user_id: ID of the user

        Returns:
            List of messages involving the user
        """
        try:
            return (
                self.db.query(Message)
                .filter(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
                .order_by(Message.created_at.desc(), Message.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching messages for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to fetch messages: {str(e)}") from e

    def list_conversation(
        self,
        user_id: str,
        counterpart_id: str,
        context_id: Optional[str] = None,
    ) -> List[Message]:
        """
        Get the thread between two users in chronological order.

        Args:
            user_id: One participant
            counterpart_id: The other participant
            context_id: Optional farm space to scope the thread to

        Returns:
            Messages exchanged in either direction, oldest first
        """
        try:
            query = self.db.query(Message).filter(
                or_(
                    and_(Message.sender_id == user_id, Message.recipient_id == counterpart_id),
                    and_(Message.sender_id == counterpart_id, Message.recipient_id == user_id),
                )
            )
            if context_id is not None:
                query = query.filter(Message.context_id == context_id)
            return query.order_by(Message.created_at.asc(), Message.id.asc()).all()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error fetching conversation {user_id}<->{counterpart_id}: {str(e)}"
            )
            raise RepositoryException(f"Failed to fetch conversation: {str(e)}") from e

    def mark_read(self, message_id: str) -> Message:
        """
        Mark a single message as read.

        Idempotent: an already-read message is returned unchanged.

        Raises:
            NotFoundException: If no message has this id
        """
        message = self.get_by_id(message_id)
        if message is None:
            raise NotFoundException(
                f"Message {message_id} not found",
                code="MESSAGE_NOT_FOUND",
                details={"message_id": message_id},
            )
        if not message.is_read:
            try:
                message.is_read = True
                self.db.flush()
            except SQLAlchemyError as e:
                self.logger.error(f"Error marking message {message_id} read: {str(e)}")
                self.db.rollback()
                raise RepositoryException(f"Failed to mark message read: {str(e)}") from e
        return message

    def mark_thread_read(
        self,
        recipient_id: str,
        sender_id: str,
        context_id: Optional[str] = None,
    ) -> int:
        """
        Mark every unread message from *sender_id* to *recipient_id* as read.

        Returns:
            Number of messages flipped to read
        """
        try:
            query = self.db.query(Message).filter(
                Message.recipient_id == recipient_id,
                Message.sender_id == sender_id,
                Message.is_read.is_(False),
            )
            if context_id is not None:
                query = query.filter(Message.context_id == context_id)
            count = query.update({Message.is_read: True}, synchronize_session="fetch")
            self.db.flush()
            return int(count or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking thread read for {recipient_id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to mark messages read: {str(e)}") from e

    def unread_count(self, user_id: str) -> int:
        """Count messages addressed to the user that are still unread."""
        try:
            return (
                self.db.query(Message)
                .filter(Message.recipient_id == user_id, Message.is_read.is_(False))
                .count()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting unread messages for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to count unread messages: {str(e)}") from e
