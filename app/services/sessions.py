# app/services/sessions.py
"""
Server-side session stores.

A session store maps an opaque token to a small JSON-serializable
payload (the authenticated identity). Handlers never touch a concrete
store: the application picks one at startup and exposes it on
``app.state.session_store``.

Two implementations are provided:
- RedisSessionStore: shared across processes, expiry enforced by Redis
- InMemorySessionStore: single process, used for tests and as the
  fallback when Redis is unavailable

Expiry is fixed at creation time. Reading a session never extends it.

Key conventions:
- Session data: "session:{token}"
"""

import json
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """The session backend could not complete an operation."""


class SessionStore(Protocol):
    """Capability interface implemented by every session backend."""

    async def get(self, token: str) -> dict[str, Any] | None:
        """Return the session payload, or None if absent or expired."""
        ...

    async def set(self, token: str, data: dict[str, Any], ttl_seconds: int) -> None:
        """Store a payload that expires ``ttl_seconds`` from now."""
        ...

    async def destroy(self, token: str) -> None:
        """Remove a session. Removing an unknown token is not an error."""
        ...


def get_session_cache_key(token: str) -> str:
    """
    Generate the Redis key for a session.

    Args:
        token: The raw session token.

    Returns:
        Key string in format "session:{token}".
    """
    return f"session:{token}"


class RedisSessionStore:
    """
    Session store backed by Redis.

    Payloads are stored as JSON with ``SETEX`` so Redis drops them when
    the session lifetime is over. Connection and command failures are
    raised as SessionStoreError.
    """

    def __init__(self, redis_client: Any) -> None:
        self._redis = redis_client

    async def get(self, token: str) -> dict[str, Any] | None:
        key = get_session_cache_key(token)
        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            logger.error("Redis error reading session: %s", e)
            raise SessionStoreError("Session store unavailable") from e

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding malformed session payload")
            await self.destroy(token)
            return None

    async def set(self, token: str, data: dict[str, Any], ttl_seconds: int) -> None:
        key = get_session_cache_key(token)
        try:
            await self._redis.setex(key, ttl_seconds, json.dumps(data))
        except RedisError as e:
            logger.error("Redis error writing session: %s", e)
            raise SessionStoreError("Session store unavailable") from e

    async def destroy(self, token: str) -> None:
        key = get_session_cache_key(token)
        try:
            await self._redis.delete(key)
        except RedisError as e:
            logger.error("Redis error deleting session: %s", e)
            raise SessionStoreError("Session store unavailable") from e


class InMemorySessionStore:
    """
    Process-local session store.

    Args:
        clock: Monotonic time source in seconds, injectable for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._sessions: dict[str, tuple[float, dict[str, Any]]] = {}

    async def get(self, token: str) -> dict[str, Any] | None:
        entry = self._sessions.get(token)
        if entry is None:
            return None
        expires_at, data = entry
        if self._clock() >= expires_at:
            del self._sessions[token]
            return None
        return dict(data)

    async def set(self, token: str, data: dict[str, Any], ttl_seconds: int) -> None:
        now = self._clock()
        self._prune(now)
        self._sessions[token] = (now + ttl_seconds, dict(data))

    async def destroy(self, token: str) -> None:
        self._sessions.pop(token, None)

    def _prune(self, now: float) -> None:
        """Drop expired sessions whose tokens were never presented again."""
        expired = [t for t, (expires_at, _) in self._sessions.items() if now >= expires_at]
        for token in expired:
            del self._sessions[token]

    def __len__(self) -> int:
        return len(self._sessions)
