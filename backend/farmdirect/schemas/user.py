# backend/farmdirect/schemas/user.py
"""User-facing profile schemas."""

from typing import Optional

from .base import StrictModel


class PublicUserResponse(StrictModel):
    """What any signed-in user may see about another user."""

    id: str
    name: Optional[str] = None
    image: Optional[str] = None
    zip_code: Optional[str] = None
    about: Optional[str] = None


class CurrentUserResponse(PublicUserResponse):
    """The caller's own account, including the login email."""

    email: str


class PublicUserEnvelope(StrictModel):
    user: PublicUserResponse
