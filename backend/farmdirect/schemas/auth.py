# backend/farmdirect/schemas/auth.py
"""Schemas for sign-up, log-in and session endpoints."""

from typing import Optional

from pydantic import Field, field_validator

from .base import RequestModel, StrictModel
from .user import CurrentUserResponse


class SignupRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    zip_code: Optional[str] = Field(default=None, max_length=10)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value.lower()


class LoginRequest(RequestModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionUserResponse(StrictModel):
    """Envelope for endpoints that return the signed-in user."""

    user: CurrentUserResponse


class LogoutResponse(StrictModel):
    message: str = "Logged out"
