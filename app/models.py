# app/models.py
"""
SQLAlchemy 2.0 ORM models.

This module defines the database models for the CRM API:
- User: Credentials and role of an account holder
- Contact: A CRM record owned by exactly one user

All models use SQLAlchemy 2.0 declarative mapping with type annotations.
"""

from datetime import UTC, datetime
from enum import Enum as PyEnum
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def generate_id() -> str:
    """Generate an opaque primary key."""
    return uuid4().hex


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def enum_values(enum_cls: type[PyEnum]) -> list[str]:
    """Persist enum values (``"lead"``) rather than member names (``"LEAD"``)."""
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Provides the declarative base for SQLAlchemy models. All models
    should inherit from this class.
    """

    pass


class UserRole(str, PyEnum):
    """
    Enumeration of user roles.

    Attributes:
        USER: Regular account created by registration.
        ADMIN: The bootstrap administrator account.
    """

    USER = "user"
    ADMIN = "admin"


class ContactStatus(str, PyEnum):
    """Pipeline stage of a contact."""

    LEAD = "lead"
    OPPORTUNITY = "opportunity"
    CUSTOMER = "customer"
    CLOSED = "closed"


class ContactSource(str, PyEnum):
    """Channel a contact came from."""

    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL_MEDIA = "social_media"
    COLD_CALL = "cold_call"
    OTHER = "other"


class User(Base):
    """
    User model for authentication.

    Attributes:
        id: Opaque primary key.
        name: Display name.
        email: Unique, lower-cased email address used as the login key.
        hashed_password: bcrypt-hashed password.
        role: User role (user or admin).
        created_at: Registration time, never modified.
        contacts: Relationship to owned Contact records.

    Note:
        Passwords are never stored in plaintext and never serialized.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            values_callable=enum_values,
        ),
        default=UserRole.USER,
        server_default=UserRole.USER.value,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    contacts: Mapped[list["Contact"]] = relationship(
        "Contact", back_populates="owner", foreign_keys="Contact.created_by"
    )

    def __repr__(self) -> str:
        """Return string representation of User."""
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"


class Contact(Base):
    """
    Contact model representing a CRM record.

    Each contact is owned by the user who created it (``created_by``) and
    is only visible to that user. ``assigned_to_id`` is a weak link to
    another user: there is no foreign key, and an id that no longer
    matches a user simply resolves to no assignee.

    Attributes:
        id: Opaque primary key.
        first_name, last_name: Contact's name.
        email: Contact's email address (lower-cased).
        phone: Phone number, free format.
        company, job_title, notes: Optional details.
        status: Pipeline stage.
        source: Acquisition channel.
        assigned_to_id: Optional id of the assigned user.
        created_by: Id of the owning user.
        created_at: Creation time, never modified.
        updated_at: Time of the last successful mutation.
    """

    __tablename__ = "contacts"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[ContactStatus] = mapped_column(
        Enum(
            ContactStatus,
            name="contact_status",
            native_enum=False,
            values_callable=enum_values,
        ),
        default=ContactStatus.LEAD,
        server_default=ContactStatus.LEAD.value,
        nullable=False,
    )
    source: Mapped[ContactSource] = mapped_column(
        Enum(
            ContactSource,
            name="contact_source",
            native_enum=False,
            values_callable=enum_values,
        ),
        default=ContactSource.OTHER,
        server_default=ContactSource.OTHER.value,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_to_id: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Foreign key to User
    created_by: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User", back_populates="contacts", foreign_keys=[created_by]
    )
    assigned_to: Mapped[Optional["User"]] = relationship(
        "User",
        primaryjoin="foreign(Contact.assigned_to_id) == User.id",
        viewonly=True,
    )

    __table_args__ = (Index("ix_contacts_created_by_created_at", created_by, created_at),)

    def __repr__(self) -> str:
        """Return string representation of Contact."""
        return f"<Contact(id={self.id}, email='{self.email}', status='{self.status.value}')>"
