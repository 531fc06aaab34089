# app/schemas.py
"""
Pydantic v2 schemas for request/response validation.

This module defines all Pydantic models used for API request validation
and response serialization. Organized into sections:
- User and session schemas (registration, login, identity)
- Contact schemas (CRUD operations)
- Dashboard schemas
- Generic response schemas

The JSON wire format is camelCase (``firstName``, ``createdAt``...).
Request models accept both camelCase and snake_case keys; response
models serialize with camelCase aliases.

Request models deliberately leave required fields optional: presence
checks happen in the service layer so that a missing field yields the
same 400 message whatever the client sent.
"""

from datetime import UTC, datetime

from pydantic import (
    AliasGenerator,
    BaseModel,
    ConfigDict,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from app.models import ContactSource, ContactStatus, UserRole


class RequestModel(BaseModel):
    """Base for request bodies: camelCase or snake_case keys, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ResponseModel(BaseModel):
    """Base for response bodies: built from ORM objects, serialized as camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps (SQLite drops the offset)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ============================================================================
# User Schemas
# ============================================================================


class RegisterRequest(RequestModel):
    """
    Schema for user registration.

    Attributes:
        name: Display name.
        email: Login email (compared case-insensitively).
        password: Plaintext password, at least 6 characters.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(RequestModel):
    """
    Schema for user login.

    Attributes:
        email: User's email address.
        password: User's password (plaintext, will be verified against hash).
    """

    email: str | None = None
    password: str | None = None


class UserRead(ResponseModel):
    """
    Authenticated identity as stored in a session and returned to clients.

    Never includes the password hash.

    Attributes:
        id: User's unique identifier.
        name: Display name.
        email: Email address.
        role: User's role (user or admin).
    """

    id: str
    name: str
    email: str
    role: UserRole


class UserSummary(ResponseModel):
    """Minimal projection of a user, used for a contact's assignee."""

    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    """Response of register and login."""

    message: str
    user: UserRead


class UserEnvelope(BaseModel):
    """Response of GET /api/user."""

    user: UserRead


# ============================================================================
# Contact Schemas
# ============================================================================


class ContactFields(RequestModel):
    """
    Writable contact fields.

    This model is also the allow-list for partial updates: keys not
    declared here (``id``, ``createdBy``, ``createdAt``...) are dropped
    during parsing and can never reach the database row.

    Attributes:
        first_name: Contact's first name.
        last_name: Contact's last name.
        email: Contact's email address.
        phone: Contact's phone number.
        company: Optional company name.
        job_title: Optional job title.
        status: Pipeline stage.
        source: Acquisition channel.
        notes: Optional free-form notes.
        assigned_to: Optional id of the user the contact is assigned to.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    job_title: str | None = None
    status: ContactStatus | None = None
    source: ContactSource | None = None
    notes: str | None = None
    assigned_to: str | None = None


class ContactCreate(ContactFields):
    """Body of POST /api/contacts."""

    pass


class ContactUpdate(ContactFields):
    """Body of PUT /api/contacts/{id}; only the keys sent are applied."""

    pass


class ContactRead(ResponseModel):
    """
    Schema for reading contact data.

    ``assigned_to`` is expanded to the assignee's summary, or None when
    unset or when the referenced user no longer exists. The id is also
    serialized as ``_id``, the key the browser client uses.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    company: str | None
    job_title: str | None
    status: ContactStatus
    source: ContactSource
    notes: str | None
    assigned_to: UserSummary | None
    created_by: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Normalize timestamps to timezone-aware UTC."""
        return _as_utc(v)

    @computed_field(alias="_id")
    @property
    def record_id(self) -> str:
        """Same value as ``id``."""
        return self.id


class ContactEnvelope(BaseModel):
    """Response of GET /api/contacts/{id}."""

    contact: ContactRead


class ContactMessage(BaseModel):
    """Response of contact create and update."""

    message: str
    contact: ContactRead


class ContactList(BaseModel):
    """Response of GET /api/contacts."""

    contacts: list[ContactRead]


# ============================================================================
# Dashboard Schemas
# ============================================================================


class StatusCount(BaseModel):
    """
    Number of contacts in one status.

    Serialized as ``{"_id": status, "status": status, "count": n}``; the
    browser client looks entries up by ``_id``.
    """

    status: ContactStatus
    count: int

    @computed_field(alias="_id")
    @property
    def group_key(self) -> ContactStatus:
        """The status this entry counts."""
        return self.status


class DashboardStats(ResponseModel):
    """
    Aggregates over the current user's contacts.

    Attributes:
        total_contacts: Number of contacts owned by the user.
        contacts_by_status: One entry per status that has at least one contact.
    """

    total_contacts: int
    contacts_by_status: list[StatusCount]


# ============================================================================
# Generic Schemas
# ============================================================================


class MessageResponse(BaseModel):
    """
    Generic message response.

    Attributes:
        message: The message text.
    """

    message: str


class HealthResponse(BaseModel):
    """Response of GET /api/health."""

    status: str
    timestamp: datetime
    database: str
    port: int
