# app/services/contacts.py
"""
Owner-scoped contact operations.

Every function takes the id of the signed-in user and only ever touches
that user's contacts. A contact owned by someone else is reported
exactly like a contact that does not exist, so ids cannot be probed
across accounts.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from app import crud
from app.core.exceptions import NotFoundError, ValidationError
from app.models import Contact
from app.schemas import ContactCreate, ContactUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone")
TEXT_FIELDS = ("first_name", "last_name", "email", "phone", "company", "job_title", "notes")
# Fields that always have a value once the contact exists
NON_NULLABLE_FIELDS = (*REQUIRED_FIELDS, "status", "source")


def list_contacts(session: Session, owner_id: str) -> list[Contact]:
    """Return the owner's contacts, newest first."""
    return crud.list_contacts(session, owner_id)


def create_contact(session: Session, owner_id: str, data: ContactCreate) -> Contact:
    """
    Create a contact owned by ``owner_id``.

    ``status`` and ``source`` fall back to their column defaults when
    omitted or null.

    Raises:
        ValidationError: If first name, last name, email or phone is missing.
    """
    values = _normalize(data.model_dump())
    if any(not values.get(field) for field in REQUIRED_FIELDS):
        raise ValidationError("First name, last name, email, and phone are required")

    values = {field: value for field, value in values.items() if value is not None}
    contact = crud.create_contact(session, owner_id, values)
    logger.info("User %s created contact %s", owner_id, contact.id)
    return contact


def get_contact(session: Session, owner_id: str, contact_id: str) -> Contact:
    """
    Fetch one of the owner's contacts.

    Raises:
        NotFoundError: If the contact does not exist or is not owned by ``owner_id``.
    """
    contact = crud.get_contact(session, contact_id, owner_id)
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


def update_contact(
    session: Session, owner_id: str, contact_id: str, data: ContactUpdate
) -> Contact:
    """
    Merge the fields present in ``data`` onto one of the owner's contacts.

    Only keys the client actually sent are applied; keys outside the
    contact field allow-list never get this far.

    Raises:
        NotFoundError: If the contact does not exist or is not owned by ``owner_id``.
        ValidationError: If a required field or an enum is set to null or blank.
    """
    contact = get_contact(session, owner_id, contact_id)

    changes = _normalize(data.model_dump(exclude_unset=True))
    for field in NON_NULLABLE_FIELDS:
        if field in changes and not changes[field]:
            raise ValidationError(f"{_label(field)} cannot be empty")

    updated = crud.update_contact(session, contact, changes)
    logger.info("User %s updated contact %s", owner_id, contact_id)
    return updated


def delete_contact(session: Session, owner_id: str, contact_id: str) -> None:
    """
    Permanently delete one of the owner's contacts.

    Raises:
        NotFoundError: If the contact does not exist or is not owned by ``owner_id``.
    """
    contact = get_contact(session, owner_id, contact_id)
    crud.delete_contact(session, contact)
    logger.info("User %s deleted contact %s", owner_id, contact_id)


def _normalize(values: dict[str, Any]) -> dict[str, Any]:
    """Trim text fields, lower-case the email and turn blank optionals into None."""
    result = dict(values)
    for field in TEXT_FIELDS:
        value = result.get(field)
        if isinstance(value, str):
            value = value.strip()
            result[field] = value or None
    if result.get("email"):
        result["email"] = result["email"].lower()
    if "assigned_to" in result and not result["assigned_to"]:
        result["assigned_to"] = None
    return result


def _label(field: str) -> str:
    """Human-readable field name for error messages."""
    return field.replace("_", " ").capitalize()
