# app/routers/auth.py
"""
Authentication router for registration, login, logout and the current user.

This module provides endpoints for:
- User registration (signs the new user in)
- Login with email and password
- Logout
- Reading the identity bound to the current session

Sessions are carried by a signed cookie holding an opaque token; the
identity itself lives in the server-side session store.

Security notes:
- Passwords are hashed with bcrypt before storage
- Login errors do not reveal whether the email exists
- Each login issues a new token and discards the previous one
"""

from fastapi import APIRouter, Response, status

from app.core.config import get_settings
from app.core.security import sign_session_token
from app.deps import CurrentUser, DBSession, SessionStoreDep, SessionToken
from app.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserEnvelope,
)
from app.services import auth as auth_service

settings = get_settings()

router = APIRouter(tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    """Attach the signed session cookie; it expires with the session."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_token(token),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        400: {"description": "Missing fields, short password, or email already registered"},
    },
)
async def register(
    data: RegisterRequest,
    session: DBSession,
    store: SessionStoreDep,
    token: SessionToken,
    response: Response,
) -> AuthResponse:
    """
    Register a new user account and start a session for it.

    Args:
        data: Registration data (name, email, password).
        session: Database session.
        store: Session store.
        token: Session token already held by the client, if any.
        response: Outgoing response (for the session cookie).

    Returns:
        Confirmation message and the new user's identity.
    """
    user, new_token = await auth_service.register(session, store, data, token)
    _set_session_cookie(response, new_token)
    return AuthResponse(message="User registered successfully", user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
    responses={
        400: {"description": "Missing fields or invalid credentials"},
    },
)
async def login(
    data: LoginRequest,
    session: DBSession,
    store: SessionStoreDep,
    token: SessionToken,
    response: Response,
) -> AuthResponse:
    """
    Authenticate a user and start a session.

    Unknown emails and wrong passwords get the same error message.

    Args:
        data: Login credentials.
        session: Database session.
        store: Session store.
        token: Session token already held by the client, if any.
        response: Outgoing response (for the session cookie).

    Returns:
        Confirmation message and the user's identity.
    """
    user, new_token = await auth_service.login(session, store, data, token)
    _set_session_cookie(response, new_token)
    return AuthResponse(message="Login successful", user=user)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    responses={
        500: {"description": "Session store failure"},
    },
)
async def logout(
    store: SessionStoreDep,
    token: SessionToken,
    response: Response,
) -> MessageResponse:
    """
    End the current session and clear the cookie.

    Succeeds even when there is no session, so repeated calls are harmless.
    """
    await auth_service.logout(store, token)
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logout successful")


@router.get(
    "/user",
    response_model=UserEnvelope,
    summary="Get the signed-in user",
    responses={
        401: {"description": "Not authenticated"},
    },
)
async def get_user(current_user: CurrentUser) -> UserEnvelope:
    """Return the identity bound to the current session."""
    return UserEnvelope(user=current_user)
