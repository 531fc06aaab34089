# app/deps.py
"""
FastAPI dependencies for sessions and authentication.

This module provides dependency injection components for:
- Database session management
- Access to the configured session store
- Reading the signed session cookie
- The authentication gate used by every protected route

The session store is read from ``app.state.session_store`` so it can be
swapped (Redis, in-memory) without touching any handler.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import AuthRequiredError
from app.core.security import unsign_session_token
from app.db import get_session
from app.schemas import UserRead
from app.services import auth as auth_service
from app.services.sessions import SessionStore

logger = logging.getLogger(__name__)
settings = get_settings()

# Database session dependency
DBSession = Annotated[Session, Depends(get_session)]


def get_session_store(request: Request) -> SessionStore:
    """
    Return the session store chosen at startup.

    Args:
        request: FastAPI request object (for accessing app.state).

    Returns:
        The application's SessionStore.
    """
    return request.app.state.session_store


def get_session_token(request: Request) -> str | None:
    """
    Extract the raw session token from the session cookie.

    Returns:
        The token, or None if the cookie is absent or its signature is invalid.
    """
    cookie = request.cookies.get(settings.session_cookie_name)
    if not cookie:
        return None
    token = unsign_session_token(cookie)
    if token is None:
        logger.warning("Rejected session cookie with invalid signature")
    return token


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
SessionToken = Annotated[str | None, Depends(get_session_token)]


async def get_current_user(store: SessionStoreDep, token: SessionToken) -> UserRead:
    """
    Resolve the signed-in identity or reject the request.

    Returns:
        The identity bound to the session.

    Raises:
        AuthRequiredError: If there is no live session.
        InternalError: If the session store is unavailable.
    """
    identity = await auth_service.current_identity(store, token)
    if identity is None:
        raise AuthRequiredError()
    return identity


# Type alias for dependency injection
CurrentUser = Annotated[UserRead, Depends(get_current_user)]
