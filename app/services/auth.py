# app/services/auth.py
"""
Session management: registration, login, logout and identity lookup.

Every successful register or login starts a brand new session in the
configured session store and returns its token; any token the caller
already held is destroyed first. The stored payload is the user's
public identity, so resolving the current user needs no database query.

Security notes:
- Passwords are hashed with bcrypt before storage
- Login failures use one message for unknown email and wrong password
- Sessions expire a fixed time after creation (not sliding)
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import crud
from app.core.config import get_settings
from app.core.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    ValidationError,
)
from app.core.security import new_session_token
from app.models import User
from app.schemas import LoginRequest, RegisterRequest, UserRead
from app.services.sessions import SessionStore, SessionStoreError

logger = logging.getLogger(__name__)
settings = get_settings()

MIN_PASSWORD_LENGTH = 6


async def register(
    session: Session,
    store: SessionStore,
    data: RegisterRequest,
    previous_token: str | None = None,
) -> tuple[UserRead, str]:
    """
    Create an account and sign it in.

    Args:
        session: Database session.
        store: Session store.
        data: Registration payload.
        previous_token: Session token already held by the caller, if any.

    Returns:
        The new identity and its session token.

    Raises:
        ValidationError: If a field is missing or the password is too short.
        ConflictError: If the email is already registered.
        InternalError: If the session could not be stored.
    """
    name = (data.name or "").strip()
    email = (data.email or "").strip().lower()
    password = data.password or ""

    if not name or not email or not password:
        raise ValidationError("All fields are required")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )

    if crud.get_user_by_email(session, email):
        raise ConflictError("User with this email already exists")

    try:
        user = crud.create_user(session, name=name, email=email, password=password)
    except IntegrityError as e:
        session.rollback()
        raise ConflictError("User with this email already exists") from e

    token = await _start_session(store, user, previous_token)
    logger.info("Registered user %s", user.id)
    return UserRead.model_validate(user), token


async def login(
    session: Session,
    store: SessionStore,
    data: LoginRequest,
    previous_token: str | None = None,
) -> tuple[UserRead, str]:
    """
    Verify credentials and start a session.

    Raises:
        ValidationError: If email or password is missing.
        AuthError: If the email is unknown or the password is wrong.
        InternalError: If the session could not be stored.
    """
    if not data.email or not data.password:
        raise ValidationError("Email and password are required")

    user = crud.authenticate_user(session, data.email, data.password)
    if user is None:
        logger.warning("Failed login attempt")
        raise AuthError("Invalid email or password")

    token = await _start_session(store, user, previous_token)
    logger.info("User %s logged in", user.id)
    return UserRead.model_validate(user), token


async def logout(store: SessionStore, token: str | None) -> None:
    """
    End the caller's session.

    Logging out without a session is a no-op, so repeated calls succeed.

    Raises:
        InternalError: If the store failed to remove the session.
    """
    if token is None:
        return
    try:
        await store.destroy(token)
    except SessionStoreError as e:
        raise InternalError("Could not log out") from e
    logger.info("Session ended")


async def current_identity(store: SessionStore, token: str | None) -> UserRead | None:
    """
    Resolve a session token to the signed-in identity.

    Returns:
        The identity, or None if there is no live session for the token.

    Raises:
        InternalError: If the store could not be read.
    """
    if token is None:
        return None
    try:
        data = await store.get(token)
    except SessionStoreError as e:
        raise InternalError("Session store unavailable") from e
    if data is None:
        return None
    return UserRead.model_validate(data)


async def _start_session(
    store: SessionStore, user: User, previous_token: str | None
) -> str:
    """Replace any existing session with a fresh one bound to ``user``."""
    identity = UserRead.model_validate(user)
    token = new_session_token()
    try:
        if previous_token is not None:
            await store.destroy(previous_token)
        await store.set(token, identity.model_dump(mode="json"), settings.session_ttl_seconds)
    except SessionStoreError as e:
        raise InternalError("Could not create session") from e
    return token
