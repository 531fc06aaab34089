# app/crud.py
"""CRUD operations for users and contacts - pure data access layer."""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.core.security import get_password_hash, verify_password
from app.models import Contact, ContactStatus, User, UserRole, utcnow

# Attributes a client may change on an existing contact, keyed by the
# field name used in request schemas.
MUTABLE_CONTACT_FIELDS: dict[str, str] = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "phone": "phone",
    "company": "company",
    "job_title": "job_title",
    "status": "status",
    "source": "source",
    "notes": "notes",
    "assigned_to": "assigned_to_id",
}


# ============================================================================
# User CRUD Operations
# ============================================================================


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.USER,
) -> User:
    """Create a new user with hashed password."""
    user = User(
        name=name.strip(),
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        role=role,
    )
    session.add(user)
    session.flush()
    return user


def get_user_by_id(session: Session, user_id: str) -> User | None:
    """Get a user by ID."""
    stmt = select(User).where(User.id == user_id)
    return session.execute(stmt).scalar_one_or_none()


def get_user_by_email(session: Session, email: str) -> User | None:
    """Get a user by email (case-insensitive)."""
    stmt = select(User).where(func.lower(User.email) == email.strip().lower())
    return session.execute(stmt).scalar_one_or_none()


def authenticate_user(session: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(session, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# ============================================================================
# Contact CRUD Operations
# ============================================================================


def create_contact(session: Session, owner_id: str, values: dict[str, Any]) -> Contact:
    """
    Create a new contact owned by a specific user.

    ``values`` uses request field names and must already be validated;
    unknown keys are ignored.
    """
    now = utcnow()
    contact = Contact(created_by=owner_id, created_at=now, updated_at=now)
    _apply_fields(contact, values)
    session.add(contact)
    session.flush()
    return contact


def get_contact(session: Session, contact_id: str, owner_id: str) -> Contact | None:
    """Get a contact by ID, scoped to a specific user."""
    stmt = (
        select(Contact)
        .options(selectinload(Contact.assigned_to))
        .where(Contact.id == contact_id, Contact.created_by == owner_id)
    )
    return session.execute(stmt).scalar_one_or_none()


def list_contacts(session: Session, owner_id: str) -> list[Contact]:
    """List a user's contacts, newest first."""
    stmt = (
        select(Contact)
        .options(selectinload(Contact.assigned_to))
        .where(Contact.created_by == owner_id)
        .order_by(Contact.created_at.desc(), Contact.id.desc())
    )
    return list(session.execute(stmt).scalars().all())


def update_contact(session: Session, contact: Contact, changes: dict[str, Any]) -> Contact:
    """Apply allow-listed changes to a contact and bump its update time."""
    _apply_fields(contact, changes)
    contact.updated_at = utcnow()
    session.flush()
    # The assignee relationship is view-only; reload it from the new id
    session.expire(contact, ["assigned_to"])
    return contact


def delete_contact(session: Session, contact: Contact) -> None:
    """Delete a contact."""
    session.delete(contact)
    session.flush()


def count_contacts(session: Session, owner_id: str) -> int:
    """Count all contacts owned by a user."""
    stmt = select(func.count(Contact.id)).where(Contact.created_by == owner_id)
    return session.execute(stmt).scalar() or 0


def count_contacts_by_status(
    session: Session, owner_id: str
) -> list[tuple[ContactStatus, int]]:
    """Group a user's contacts by status; statuses without contacts are absent."""
    stmt = (
        select(Contact.status, func.count(Contact.id))
        .where(Contact.created_by == owner_id)
        .group_by(Contact.status)
    )
    return [(status, count) for status, count in session.execute(stmt).all()]


def _apply_fields(contact: Contact, values: dict[str, Any]) -> None:
    """Copy allow-listed values onto a contact, ignoring everything else."""
    for field, value in values.items():
        attribute = MUTABLE_CONTACT_FIELDS.get(field)
        if attribute is not None:
            setattr(contact, attribute, value)
