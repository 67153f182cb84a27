# backend/farmdirect/services/auth_service.py
"""
Authentication Service for local email/password accounts.

Handles sign-up and credential checks. Session creation is left to
SessionService so the routes decide when a cookie is issued.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..auth import DUMMY_HASH_FOR_TIMING_ATTACK, get_password_hash, verify_password
from ..core.exceptions import ConflictException, UnauthorizedException
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Register and authenticate marketplace users."""

    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("register_user")
    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        zip_code: Optional[str] = None,
    ) -> User:
        """
        Create a new local account.

        Raises:
            ConflictException: If the email is already registered
        """
        normalized_email = email.strip().lower()
        if self.user_repository.get_by_email(normalized_email):
            raise ConflictException("User already exists", code="USER_EXISTS")

        with self.transaction():
            user = self.user_repository.create(
                name=name.strip(),
                email=normalized_email,
                hashed_password=get_password_hash(password),
                zip_code=zip_code,
            )
        self.logger.info("User registered", extra={"user_id": user.id})
        return user

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials and return the matching active user.

        Raises:
            UnauthorizedException: For an unknown email, a wrong password,
                an account without a local password, or an inactive account
        """
        user = self.user_repository.get_by_email(email)
        if user is None or not user.hashed_password:
            verify_password(password, DUMMY_HASH_FOR_TIMING_ATTACK)
            raise UnauthorizedException("Invalid email or password", code="INVALID_CREDENTIALS")
        if not verify_password(password, user.hashed_password):
            raise UnauthorizedException("Invalid email or password", code="INVALID_CREDENTIALS")
        if not user.is_active:
            raise UnauthorizedException("Account is inactive", code="ACCOUNT_INACTIVE")
        return user
