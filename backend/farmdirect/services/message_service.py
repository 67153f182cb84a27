# backend/farmdirect/services/message_service.py
"""
Message Service for chat functionality.

Handles business logic for the messaging system including:
- Message creation and validation
- Ownership checks on read receipts
- Thread retrieval with its read side effect
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.farm_space import FarmSpace
from ..models.message import Message
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.base_repository import BaseRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.message_repository import MessageRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class MessageService(BaseService):
    """
    Service for managing direct messages between users.

    Handles message creation, retrieval and read state with access control
    and validation. Real-time notification is the caller's job.
    """

    def __init__(
        self,
        db: Session,
        message_repository: Optional[MessageRepository] = None,
        user_repository: Optional[UserRepository] = None,
        farm_space_repository: Optional[BaseRepository[FarmSpace]] = None,
    ):
        """Initialize message service."""
        super().__init__(db)
        self.repository = message_repository or RepositoryFactory.create_message_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.farm_space_repository = (
            farm_space_repository or RepositoryFactory.create_farm_space_repository(db)
        )
        self.logger = logging.getLogger(__name__)

    @BaseService.measure_operation("list_messages")
    def list_messages(self, user_id: str) -> List[Message]:
        """Every message the user sent or received, newest first."""
        return self.repository.list_for_user(user_id)

    @BaseService.measure_operation("send_message")
    def send_message(
        self,
        sender_id: str,
        recipient_id: str,
        body: str,
        subject: Optional[str] = None,
        context_id: Optional[str] = None,
    ) -> Message:
        """
        Store a new message from *sender_id* to *recipient_id*.

        Args:
            sender_id: Authenticated author
            recipient_id: Addressee
            body: Message content
            subject: Subject line; the configured default when blank
            context_id: Optional farm space the message is about

        Returns:
            The committed message

        Raises:
            ValidationException: Blank or oversized body, blank recipient,
                or a message addressed to the sender
            NotFoundException: Unknown recipient or context
        """
        recipient_id = (recipient_id or "").strip()
        body = (body or "").strip()
        if not recipient_id:
            raise ValidationException("recipientId is required", code="RECIPIENT_REQUIRED")
        if not body:
            raise ValidationException("Message body cannot be empty", code="EMPTY_MESSAGE")
        if len(body) > settings.max_message_length:
            raise ValidationException(
                f"Message body exceeds {settings.max_message_length} characters",
                code="MESSAGE_TOO_LONG",
                details={"max_length": settings.max_message_length},
            )
        if recipient_id == sender_id:
            raise ValidationException("Cannot send a message to yourself", code="SELF_MESSAGE")

        if self.user_repository.get_active_by_id(recipient_id) is None:
            raise NotFoundException(
                "Recipient not found",
                code="RECIPIENT_NOT_FOUND",
                details={"recipient_id": recipient_id},
            )
        if context_id and self.farm_space_repository.get_by_id(context_id) is None:
            raise NotFoundException(
                "Farm space not found",
                code="CONTEXT_NOT_FOUND",
                details={"context_id": context_id},
            )

        with self.transaction():
            message = self.repository.create_message(
                sender_id=sender_id,
                recipient_id=recipient_id,
                subject=(subject or "").strip() or settings.default_message_subject,
                body=body,
                context_id=context_id or None,
            )
        prometheus_metrics.inc_messages_sent()
        self.logger.info(
            f"Message {message.id} sent",
            extra={"sender_id": sender_id, "recipient_id": recipient_id},
        )
        return message

    @BaseService.measure_operation("get_thread")
    def get_thread(
        self,
        user_id: str,
        counterpart_id: str,
        context_id: Optional[str] = None,
    ) -> List[Message]:
        """
        Get the thread with *counterpart_id* and mark the caller's inbound
        messages in it as read.
        """
        with self.transaction():
            marked = self.repository.mark_thread_read(
                recipient_id=user_id, sender_id=counterpart_id, context_id=context_id
            )
        if marked:
            self.logger.debug(f"Marked {marked} messages read for {user_id}")
        return self.repository.list_conversation(user_id, counterpart_id, context_id)

    @BaseService.measure_operation("mark_message_read")
    def mark_read(self, message_id: str, user_id: str) -> Message:
        """
        Mark one message read on behalf of its recipient.

        Raises:
            NotFoundException: Unknown message id
            ForbiddenException: The caller is not the recipient
        """
        message = self.repository.get_by_id(message_id)
        if message is None:
            raise NotFoundException(
                f"Message {message_id} not found",
                code="MESSAGE_NOT_FOUND",
                details={"message_id": message_id},
            )
        if message.recipient_id != user_id:
            raise ForbiddenException(
                "Only the recipient can mark a message as read", code="NOT_RECIPIENT"
            )

        with self.transaction():
            message = self.repository.mark_read(message_id)
        return message

    @BaseService.measure_operation("unread_count")
    def unread_count(self, user_id: str) -> int:
        return self.repository.unread_count(user_id)
