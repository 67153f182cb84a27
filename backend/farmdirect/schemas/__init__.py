from .auth import LoginRequest, LogoutResponse, SessionUserResponse, SignupRequest
from .message import (
    ConversationListResponse,
    ConversationResponse,
    MessageEnvelope,
    MessageListResponse,
    MessageResponse,
    SendMessageRequest,
    UnreadCountResponse,
)
from .user import CurrentUserResponse, PublicUserEnvelope, PublicUserResponse

__all__ = [
    "ConversationListResponse",
    "ConversationResponse",
    "CurrentUserResponse",
    "LoginRequest",
    "LogoutResponse",
    "MessageEnvelope",
    "MessageListResponse",
    "MessageResponse",
    "PublicUserEnvelope",
    "PublicUserResponse",
    "SendMessageRequest",
    "SessionUserResponse",
    "SignupRequest",
    "UnreadCountResponse",
]
