# backend/farmdirect/routes/v1/messages.py
"""
Messages routes - API v1

Versioned message endpoints under /api/v1/messages.
All business logic delegated to MessageService and ConversationService.

Endpoints (static routes before dynamic routes):
    GET /                                   -> Every message the caller sent or received
    GET /conversations                      -> Per-counterpart inbox summaries
    GET /unread-count                       -> Unread count for the caller
    GET /conversation/{counterpart_id}      -> Thread with one user (marks inbound read)
    POST /                                  -> Send a message and notify the relay
    PUT /{message_id}/read                  -> Mark one message read (recipient only)
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_user
from ...api.dependencies.services import get_conversation_service, get_message_service
from ...models.user import User
from ...schemas.message import (
    ConversationListResponse,
    ConversationResponse,
    MessageEnvelope,
    MessageListResponse,
    MessageResponse,
    SendMessageRequest,
    UnreadCountResponse,
)
from ...services.conversation_service import ConversationService
from ...services.message_service import MessageService
from ...services.messaging import relay

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["messages-v1"])

AUTH_RESPONSES = {401: {"description": "Not authenticated"}}


@router.get("", response_model=MessageListResponse, responses=AUTH_RESPONSES)
def list_messages(
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
) -> MessageListResponse:
    messages = service.list_messages(current_user.id)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])


@router.get("/conversations", response_model=ConversationListResponse, responses=AUTH_RESPONSES)
def list_conversations(
    current_user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationListResponse:
    """Inbox view, newest conversation first."""
    summaries = service.list_conversations(current_user.id)
    return ConversationListResponse(
        conversations=[
            ConversationResponse(
                counterpart_id=s.counterpart_id,
                counterpart_name=s.counterpart_name,
                counterpart_image=s.counterpart_image,
                last_message=MessageResponse.model_validate(s.last_message),
                unread_count=s.unread_count,
            )
            for s in summaries
        ]
    )


@router.get("/unread-count", response_model=UnreadCountResponse, responses=AUTH_RESPONSES)
def get_unread_count(
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
) -> UnreadCountResponse:
    return UnreadCountResponse(count=service.unread_count(current_user.id))


@router.get(
    "/conversation/{counterpart_id}",
    response_model=MessageListResponse,
    responses=AUTH_RESPONSES,
)
def get_conversation(
    counterpart_id: str,
    context_id: Optional[str] = Query(default=None, alias="contextId"),
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
) -> MessageListResponse:
    """
    Chronological thread with one counterpart.

    Messages addressed to the caller in this thread are marked read.
    """
    messages = service.get_thread(current_user.id, counterpart_id, context_id)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])


@router.post(
    "",
    response_model=MessageEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid message"},
        401: {"description": "Not authenticated"},
        404: {"description": "Recipient or context not found"},
    },
)
async def send_message(
    request: SendMessageRequest,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
) -> MessageEnvelope:
    """
    Store a message, then push a notification through the relay.

    The response does not wait on delivery; relay failures never fail the
    request.
    """
    message = await asyncio.to_thread(
        service.send_message,
        current_user.id,
        request.recipient_id,
        request.body,
        request.subject,
        request.context_id,
    )
    payload = MessageResponse.model_validate(message)

    # Fire-and-forget: the relay task logs its own outcome
    relay.schedule_new_message(
        payload.model_dump(mode="json", by_alias=True),
        sender_id=message.sender_id,
        recipient_id=message.recipient_id,
    )
    logger.debug("[RELAY] New message scheduled", extra={"message_id": message.id})

    return MessageEnvelope(message=payload)


@router.put(
    "/{message_id}/read",
    response_model=MessageEnvelope,
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Caller is not the recipient"},
        404: {"description": "Message not found"},
    },
)
def mark_message_read(
    message_id: str,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
) -> MessageEnvelope:
    message = service.mark_read(message_id, current_user.id)
    return MessageEnvelope(message=MessageResponse.model_validate(message))
