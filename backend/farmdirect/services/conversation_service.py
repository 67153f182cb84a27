# backend/farmdirect/services/conversation_service.py
"""
Conversation Service: per-counterpart inbox summaries.

A conversation is not stored anywhere. It is recomputed on every request by
folding the user's messages into one summary per counterpart:

- ``last_message`` is the member with the greatest ``(created_at, id)``;
  equal timestamps are resolved by the highest message id.
- ``unread_count`` counts members addressed to the user that are unread.
"""

from dataclasses import dataclass
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..models.message import Message
from ..repositories.factory import RepositoryFactory
from ..repositories.message_repository import MessageRepository
from ..repositories.user_repository import UserRepository
from ..utils.time_utils import ensure_utc
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class ConversationSummary:
    """Inbox row for one counterpart."""

    counterpart_id: str
    last_message: Message
    unread_count: int
    counterpart_name: str = ""
    counterpart_image: Optional[str] = None


def _recency_key(message: Message) -> tuple:
    return (ensure_utc(message.created_at), message.id)


def aggregate_conversations(user_id: str, messages: Iterable[Message]) -> List[ConversationSummary]:
    """
    Group *messages* involving *user_id* into per-counterpart summaries.

    Messages that do not involve the user are ignored. The result is sorted
    newest conversation first.
    """
    summaries: Dict[str, ConversationSummary] = {}
    for message in messages:
        if user_id not in (message.sender_id, message.recipient_id):
            continue
        counterpart_id = message.counterpart_of(user_id)
        unread = 1 if message.recipient_id == user_id and not message.is_read else 0

        summary = summaries.get(counterpart_id)
        if summary is None:
            summaries[counterpart_id] = ConversationSummary(
                counterpart_id=counterpart_id,
                last_message=message,
                unread_count=unread,
            )
            continue

        summary.unread_count += unread
        if _recency_key(message) > _recency_key(summary.last_message):
            summary.last_message = message

    return sorted(
        summaries.values(),
        key=lambda s: _recency_key(s.last_message),
        reverse=True,
    )


class ConversationService(BaseService):
    """
    Service for the conversation list view.

    Joins the pure aggregation with the user directory so each summary
    carries the counterpart's display identity.
    """

    def __init__(
        self,
        db: Session,
        message_repository: Optional[MessageRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        """
        Initialize conversation service.

        Args:
            db: Database session
            message_repository: Optional repository for messages
            user_repository: Optional repository for the user directory
        """
        super().__init__(db)
        self.message_repository = message_repository or RepositoryFactory.create_message_repository(
            db
        )
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("list_conversations")
    def list_conversations(self, user_id: str) -> List[ConversationSummary]:
        """
        Build the inbox for *user_id*.

        Counterparts missing from the directory get a placeholder name.
        """
        summaries = aggregate_conversations(
            user_id, self.message_repository.list_for_user(user_id)
        )
        users = self.user_repository.get_map_by_ids(s.counterpart_id for s in summaries)
        for summary in summaries:
            counterpart = users.get(summary.counterpart_id)
            if counterpart is not None:
                summary.counterpart_name = counterpart.display_name
                summary.counterpart_image = counterpart.image
            else:
                summary.counterpart_name = f"User {summary.counterpart_id}"
        return summaries
