# backend/farmdirect/routes/v1/auth.py
"""
Auth routes - API v1

Local email/password accounts backed by the server-side session store.

Endpoints:
    POST /signup   -> Create an account and sign in
    POST /login    -> Sign in
    POST /logout   -> Destroy the current session (idempotent)
    GET  /session  -> The signed-in user
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies.auth import get_current_user, get_session_token
from ...api.dependencies.services import get_auth_service, get_session_service
from ...auth_session import clear_session_cookie, set_session_cookie
from ...models.user import User
from ...schemas.auth import LoginRequest, LogoutResponse, SessionUserResponse, SignupRequest
from ...schemas.user import CurrentUserResponse
from ...services.auth_service import AuthService
from ...services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth-v1"])


def _session_user(user: User) -> SessionUserResponse:
    return SessionUserResponse(user=CurrentUserResponse.model_validate(user))


@router.post(
    "/signup",
    response_model=SessionUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
def signup(
    payload: SignupRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    session_service: SessionService = Depends(get_session_service),
) -> SessionUserResponse:
    user = auth_service.register_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        zip_code=payload.zip_code,
    )
    issued = session_service.create_session(user.id)
    set_session_cookie(response, issued.token)
    return _session_user(user)


@router.post(
    "/login",
    response_model=SessionUserResponse,
    responses={401: {"description": "Invalid credentials"}},
)
def login(
    payload: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    session_service: SessionService = Depends(get_session_service),
) -> SessionUserResponse:
    user = auth_service.authenticate_user(payload.email, payload.password)
    issued = session_service.create_session(user.id)
    set_session_cookie(response, issued.token)
    logger.info("User logged in", extra={"user_id": user.id})
    return _session_user(user)


@router.post("/logout", response_model=LogoutResponse)
def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    session_service: SessionService = Depends(get_session_service),
) -> LogoutResponse:
    session_service.destroy_session(token)
    clear_session_cookie(response)
    return LogoutResponse()


@router.get(
    "/session",
    response_model=SessionUserResponse,
    responses={401: {"description": "Not authenticated"}},
)
def get_session(current_user: User = Depends(get_current_user)) -> SessionUserResponse:
    return _session_user(current_user)
