# backend/farmdirect/api/dependencies/services.py
"""Service dependencies for FastAPI routes."""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.auth_service import AuthService
from ...services.conversation_service import ConversationService
from ...services.message_service import MessageService
from ...services.session_service import SessionService
from ...services.user_service import UserService


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    return MessageService(db)


def get_conversation_service(db: Session = Depends(get_db)) -> ConversationService:
    return ConversationService(db)


def get_session_service(db: Session = Depends(get_db)) -> SessionService:
    return SessionService(db)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)
