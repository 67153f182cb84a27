# backend/farmdirect/routes/v1/users.py
"""
Users routes - API v1

Read-only public profiles from the user directory.
"""

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_user_service
from ...schemas.user import PublicUserEnvelope, PublicUserResponse
from ...services.user_service import UserService

router = APIRouter(tags=["users-v1"])


@router.get(
    "/{user_id}",
    response_model=PublicUserEnvelope,
    responses={404: {"description": "User not found"}},
)
def get_user_profile(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> PublicUserEnvelope:
    user = service.get_public_profile(user_id)
    return PublicUserEnvelope(user=PublicUserResponse.model_validate(user))
