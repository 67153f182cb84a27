# backend/farmdirect/schemas/message.py
"""
Request and response schemas for the message endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field, field_serializer

from ..utils.time_utils import ensure_utc
from .base import RequestModel, StrictModel


class SendMessageRequest(RequestModel):
    """Body of POST /api/v1/messages. ``message`` is accepted for ``body``."""

    recipient_id: str = Field(..., description="User the message is addressed to")
    body: str = Field(
        ...,
        validation_alias=AliasChoices("body", "message"),
        description="Message content",
    )
    subject: Optional[str] = Field(default=None, max_length=255)
    context_id: Optional[str] = Field(
        default=None, description="Optional farm space the message is about"
    )


class MessageResponse(StrictModel):
    """A single message as returned to clients."""

    id: str
    sender_id: str
    recipient_id: str
    subject: str
    body: str
    is_read: bool
    context_id: Optional[str] = None
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return ensure_utc(value).isoformat()


class MessageEnvelope(StrictModel):
    message: MessageResponse


class MessageListResponse(StrictModel):
    messages: List[MessageResponse]


class ConversationResponse(StrictModel):
    """One inbox row: a counterpart and the latest exchange with them."""

    counterpart_id: str
    counterpart_name: str
    counterpart_image: Optional[str] = None
    last_message: MessageResponse
    unread_count: int


class ConversationListResponse(StrictModel):
    conversations: List[ConversationResponse]


class UnreadCountResponse(StrictModel):
    """Unread message count for the current user."""

    count: int
