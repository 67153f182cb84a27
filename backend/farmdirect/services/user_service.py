# backend/farmdirect/services/user_service.py
"""User directory lookups exposed to the API."""

from typing import Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService


class UserService(BaseService):
    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("get_public_profile")
    def get_public_profile(self, user_id: str) -> User:
        """
        Raises:
            NotFoundException: Unknown or inactive user
        """
        user = self.user_repository.get_active_by_id(user_id)
        if user is None:
            raise NotFoundException(
                "User not found", code="USER_NOT_FOUND", details={"user_id": user_id}
            )
        return user
