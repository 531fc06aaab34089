# tests/test_auth.py
"""Tests for registration, login, logout and the current-user endpoint."""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app import crud
from app.core.config import get_settings
from app.models import User
from app.services.sessions import InMemorySessionStore
from tests.conftest import create_test_user

settings = get_settings()


class TestUserRegistration:
    """Tests for user registration."""

    def test_register_success(self, client: TestClient, user_data: dict[str, Any]) -> None:
        """Test successful user registration returns 201 and a session cookie."""
        response = client.post("/api/register", json=user_data)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User registered successfully"
        assert data["user"]["email"] == user_data["email"]
        assert data["user"]["name"] == user_data["name"]
        assert data["user"]["role"] == "user"
        assert "id" in data["user"]
        # Password should not be in response
        assert "password" not in data["user"]
        assert "hashed_password" not in data["user"]
        assert settings.session_cookie_name in response.cookies

    def test_register_signs_user_in(
        self, client: TestClient, user_data: dict[str, Any]
    ) -> None:
        """Test that the registration cookie authenticates later requests."""
        registered = client.post("/api/register", json=user_data).json()["user"]

        response = client.get("/api/user")

        assert response.status_code == 200
        assert response.json()["user"] == registered

    def test_register_duplicate_email_case_insensitive(
        self, client: TestClient, db_session: Session, user_data: dict[str, Any]
    ) -> None:
        """Test that an email differing only in case is rejected and not stored twice."""
        client.post("/api/register", json=user_data)

        duplicate = {**user_data, "email": user_data["email"].upper()}
        response = client.post("/api/register", json=duplicate)

        assert response.status_code == 400
        assert response.json()["error"] == "User with this email already exists"
        count = db_session.execute(select(func.count(User.id))).scalar()
        assert count == 1

    def test_register_duplicate_caught_by_unique_constraint(
        self,
        client: TestClient,
        db_session: Session,
        user_data: dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a duplicate slipping past the lookup is still a 400 conflict."""
        create_test_user(db_session, email=user_data["email"])
        # Simulate a concurrent registration that inserted after our lookup
        monkeypatch.setattr(crud, "get_user_by_email", lambda session, email: None)

        response = client.post("/api/register", json=user_data)

        assert response.status_code == 400
        assert response.json()["error"] == "User with this email already exists"
        assert settings.session_cookie_name not in response.cookies
        count = db_session.execute(select(func.count(User.id))).scalar()
        assert count == 1

    def test_register_missing_fields(self, client: TestClient) -> None:
        """Test that a missing field returns 400."""
        response = client.post(
            "/api/register", json={"email": "a@example.com", "password": "secret1"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"

    def test_register_blank_name(self, client: TestClient, user_data: dict[str, Any]) -> None:
        """Test that a whitespace-only name counts as missing."""
        user_data["name"] = "   "
        response = client.post("/api/register", json=user_data)

        assert response.status_code == 400

    def test_register_password_of_six_characters(
        self, client: TestClient, user_data: dict[str, Any]
    ) -> None:
        """Test that the minimum password length is accepted."""
        user_data["password"] = "abcdef"
        response = client.post("/api/register", json=user_data)

        assert response.status_code == 201

    def test_register_password_of_five_characters(
        self, client: TestClient, user_data: dict[str, Any]
    ) -> None:
        """Test that a password one character too short returns 400."""
        user_data["password"] = "abcde"
        response = client.post("/api/register", json=user_data)

        assert response.status_code == 400
        assert "at least 6 characters" in response.json()["error"]

    def test_register_stores_lowercase_email(
        self, client: TestClient, db_session: Session, user_data: dict[str, Any]
    ) -> None:
        """Test that emails are normalized before storage."""
        user_data["email"] = "  Mixed.Case@Example.COM "
        response = client.post("/api/register", json=user_data)

        assert response.json()["user"]["email"] == "mixed.case@example.com"
        assert crud.get_user_by_email(db_session, "MIXED.case@example.com") is not None


class TestUserLogin:
    """Tests for user login."""

    def test_login_returns_same_identity_as_registration(
        self,
        client_factory: Callable[[], TestClient],
        user_data: dict[str, Any],
    ) -> None:
        """Test that logging in with the registered credentials yields the same id."""
        registered = client_factory().post("/api/register", json=user_data).json()["user"]

        client = client_factory()
        response = client.post(
            "/api/login",
            json={"email": user_data["email"], "password": user_data["password"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["id"] == registered["id"]
        assert client.get("/api/user").json()["user"]["id"] == registered["id"]

    def test_login_is_case_insensitive_on_email(
        self, client: TestClient, db_session: Session
    ) -> None:
        """Test login with a differently-cased email."""
        create_test_user(db_session, email="case@example.com", password="password1")

        response = client.post(
            "/api/login", json={"email": "CASE@example.com", "password": "password1"}
        )

        assert response.status_code == 200

    def test_login_wrong_password_and_unknown_email_look_the_same(
        self, client: TestClient, db_session: Session
    ) -> None:
        """Test that failures do not reveal whether the account exists."""
        create_test_user(db_session, email="known@example.com", password="password1")

        wrong_password = client.post(
            "/api/login", json={"email": "known@example.com", "password": "nope123"}
        )
        unknown_email = client.post(
            "/api/login", json={"email": "unknown@example.com", "password": "nope123"}
        )

        assert wrong_password.status_code == 400
        assert unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"] == "Invalid email or password"
        assert settings.session_cookie_name not in wrong_password.cookies

    def test_login_missing_fields(self, client: TestClient) -> None:
        """Test that login without a password returns 400."""
        response = client.post("/api/login", json={"email": "a@example.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "Email and password are required"

    def test_login_replaces_previous_session(
        self,
        client: TestClient,
        db_session: Session,
        session_store: InMemorySessionStore,
    ) -> None:
        """Test that logging in again discards the old session token."""
        create_test_user(db_session, email="twice@example.com", password="password1")
        credentials = {"email": "twice@example.com", "password": "password1"}

        client.post("/api/login", json=credentials)
        assert len(session_store) == 1

        client.post("/api/login", json=credentials)
        assert len(session_store) == 1


class TestLogout:
    """Tests for logout."""

    def test_logout_ends_session(self, client: TestClient, user_data: dict[str, Any]) -> None:
        """Test that the session is unusable after logout."""
        client.post("/api/register", json=user_data)
        old_cookie = client.cookies.get(settings.session_cookie_name)

        response = client.post("/api/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logout successful"
        assert client.get("/api/user").status_code == 401

        # Replaying the old cookie must not work either
        client.cookies.set(settings.session_cookie_name, old_cookie)
        assert client.get("/api/user").status_code == 401
        assert client.get("/api/contacts").status_code == 401

    def test_logout_twice_succeeds(self, client: TestClient, user_data: dict[str, Any]) -> None:
        """Test that logout is idempotent."""
        client.post("/api/register", json=user_data)

        first = client.post("/api/logout")
        second = client.post("/api/logout")

        assert first.status_code == 200
        assert second.status_code == 200

    def test_logout_without_session(self, client: TestClient) -> None:
        """Test that logging out while signed out is harmless."""
        response = client.post("/api/logout")

        assert response.status_code == 200


class TestCurrentUser:
    """Tests for /api/user endpoint."""

    def test_get_current_user_no_cookie(self, client: TestClient) -> None:
        """Test getting current user without a session returns 401."""
        response = client.get("/api/user")

        assert response.status_code == 401
        assert response.json()["error"] == "Authentication required. Please login."

    def test_get_current_user_tampered_cookie(
        self, client: TestClient, user_data: dict[str, Any]
    ) -> None:
        """Test that a cookie with a broken signature is rejected."""
        client.post("/api/register", json=user_data)
        cookie = client.cookies.get(settings.session_cookie_name)
        token, _signature = cookie.rsplit(".", 1)
        client.cookies.clear()
        client.cookies.set(settings.session_cookie_name, f"{token}.forged")

        response = client.get("/api/user")

        assert response.status_code == 401

    def test_get_current_user_unknown_token(self, client: TestClient) -> None:
        """Test that a correctly signed but unknown token is rejected."""
        from app.core.security import new_session_token, sign_session_token

        client.cookies.set(
            settings.session_cookie_name, sign_session_token(new_session_token())
        )

        response = client.get("/api/user")

        assert response.status_code == 401


class TestPasswordHashing:
    """Tests for password security."""

    def test_password_is_hashed_in_database(
        self, client: TestClient, db_session: Session, user_data: dict[str, Any]
    ) -> None:
        """Test that password is stored as bcrypt hash, not plaintext."""
        client.post("/api/register", json=user_data)

        user = crud.get_user_by_email(db_session, user_data["email"])

        # Password should be hashed
        assert user.hashed_password != user_data["password"]
        # bcrypt hashes start with $2b$
        assert user.hashed_password.startswith("$2b$")
