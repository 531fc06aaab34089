# tests/conftest.py
"""
Pytest fixtures and configuration for testing the CRM API.

This module provides:
- In-memory SQLite database setup for isolated tests
- Test client with dependency overrides and an in-memory session store
- User factories and session helpers
- Redis mock for session store tests

All fixtures are function-scoped to ensure test isolation.
"""

import asyncio
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.security import get_password_hash, new_session_token, sign_session_token
from app.db import get_session
from app.main import app
from app.models import Base, User, UserRole
from app.schemas import UserRead
from app.services.sessions import InMemorySessionStore

settings = get_settings()

# Use SQLite for tests (in-memory)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
)


def override_get_session() -> Generator[Session, None, None]:
    """Override database session for testing."""
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# Override the dependency
app.dependency_overrides[get_session] = override_get_session


class FakeRedis:
    """
    Fake Redis client for testing.

    Provides an in-memory dictionary-based implementation of the
    async Redis interface used by the application.
    """

    def __init__(self) -> None:
        """Initialize fake Redis with empty store."""
        self._store: dict[str, str] = {}
        self._ttls: dict[str, int] = {}
        self.closed = False

    async def get(self, key: str) -> str | None:
        """Get value by key."""
        return self._store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        """Set value with expiration (TTL stored but not enforced in tests)."""
        self._store[key] = value
        self._ttls[key] = ttl

    async def delete(self, key: str) -> int:
        """Delete key and return count of deleted keys."""
        if key in self._store:
            del self._store[key]
            self._ttls.pop(key, None)
            return 1
        return 0

    async def ping(self) -> bool:
        """Health check."""
        return True

    async def aclose(self) -> None:
        """Close the connection."""
        self.closed = True

    def clear(self) -> None:
        """Clear all stored data."""
        self._store.clear()
        self._ttls.clear()


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def fake_redis() -> FakeRedis:
    """Create a fake Redis client for testing."""
    return FakeRedis()


@pytest.fixture(scope="function")
def session_store() -> InMemorySessionStore:
    """Create an empty in-memory session store."""
    return InMemorySessionStore()


@pytest.fixture(scope="function")
def client_factory(
    db_session: Session, session_store: InMemorySessionStore
) -> Callable[[], TestClient]:
    """
    Build test clients that share the database and session store.

    Each client has its own cookie jar, so each one can act as a
    different signed-in user.
    """
    app.state.session_store = session_store

    def make_client() -> TestClient:
        return TestClient(app)

    return make_client


@pytest.fixture(scope="function")
def client(client_factory: Callable[[], TestClient]) -> TestClient:
    """Create a test client with fresh database and session store."""
    return client_factory()


@pytest.fixture
def user_data() -> dict[str, Any]:
    """Sample user registration data."""
    return {
        "name": "Test User",
        "email": "test@example.com",
        "password": "securepassword123",
    }


@pytest.fixture
def contact_data() -> dict[str, Any]:
    """Sample contact data."""
    return {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@example.com",
        "phone": "+1234567890",
        "company": "Acme",
        "jobTitle": "Buyer",
        "notes": "Met at the trade fair",
    }


def create_test_user(
    session: Session,
    email: str = "test@example.com",
    password: str = "testpassword123",
    name: str = "Test User",
    role: UserRole = UserRole.USER,
) -> User:
    """
    Create a test user directly in the database.

    Args:
        session: Database session.
        email: User email address.
        password: Plain text password (will be hashed).
        name: User's display name.
        role: User role (USER or ADMIN).

    Returns:
        The created User object.
    """
    user = User(
        name=name,
        email=email.lower(),
        hashed_password=get_password_hash(password),
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def sign_in(client: TestClient, store: InMemorySessionStore, user: User) -> str:
    """
    Put a session for ``user`` into the store and hand its cookie to ``client``.

    Args:
        client: The client that should act as ``user``.
        store: The session store the app is using.
        user: The user to sign in.

    Returns:
        The raw session token.
    """
    token = new_session_token()
    identity = UserRead.model_validate(user).model_dump(mode="json")
    asyncio.run(store.set(token, identity, settings.session_ttl_seconds))
    client.cookies.set(settings.session_cookie_name, sign_session_token(token))
    return token


@pytest.fixture
def owner(db_session: Session) -> User:
    """Create a regular user who owns contacts."""
    return create_test_user(db_session, email="owner@example.com", name="Owner")


@pytest.fixture
def other_user(db_session: Session) -> User:
    """Create a second, unrelated user."""
    return create_test_user(db_session, email="other@example.com", name="Other")


@pytest.fixture
def owner_client(
    client: TestClient, session_store: InMemorySessionStore, owner: User
) -> TestClient:
    """Client signed in as ``owner``."""
    sign_in(client, session_store, owner)
    return client


@pytest.fixture
def other_client(
    client_factory: Callable[[], TestClient],
    session_store: InMemorySessionStore,
    other_user: User,
) -> TestClient:
    """Client signed in as ``other_user``."""
    other = client_factory()
    sign_in(other, session_store, other_user)
    return other
