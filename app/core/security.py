# app/core/security.py
"""
Security utilities for password hashing and session tokens.

This module provides cryptographic utilities for:
- Password hashing and verification using bcrypt
- Opaque session token generation
- Session cookie signing and verification using itsdangerous

Session tokens carry no claims; they only index the server-side session
store. Signing the cookie lets forged values be rejected without a store
round-trip.
"""

import secrets

from itsdangerous import BadSignature, Signer
from passlib.context import CryptContext

from app.core.config import get_settings

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_cookie_signer = Signer(settings.secret_key, salt="crm-session-cookie")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plaintext password to verify.
        hashed_password: The bcrypt-hashed password to compare against.

    Returns:
        True if passwords match, False otherwise.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Uses the bcrypt algorithm with automatic salt generation.

    Args:
        password: The plaintext password to hash.

    Returns:
        The bcrypt-hashed password string.
    """
    return pwd_context.hash(password)


def new_session_token() -> str:
    """Generate a fresh, unguessable session token."""
    return secrets.token_urlsafe(32)


def sign_session_token(token: str) -> str:
    """
    Sign a session token for use as a cookie value.

    Args:
        token: The raw session token.

    Returns:
        The token with an appended signature.
    """
    return _cookie_signer.sign(token).decode("utf-8")


def unsign_session_token(cookie_value: str) -> str | None:
    """
    Verify a signed cookie value and extract the session token.

    Args:
        cookie_value: Value of the session cookie as sent by the client.

    Returns:
        The raw session token, or None if the signature is invalid.
    """
    try:
        return _cookie_signer.unsign(cookie_value).decode("utf-8")
    except BadSignature:
        return None
