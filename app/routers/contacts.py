# app/routers/contacts.py
"""
Contacts API router with CRUD endpoints, scoped to the authenticated user.

This module provides endpoints for managing contacts:
- List contacts, newest first
- Create new contacts
- Get single contact by ID
- Partial contact updates
- Delete contacts

All endpoints are scoped to the authenticated user - users can only
access and modify their own contacts. Another user's contact answers
404, the same as a contact that does not exist.
"""

from fastapi import APIRouter, status

from app.deps import CurrentUser, DBSession
from app.schemas import (
    ContactCreate,
    ContactEnvelope,
    ContactList,
    ContactMessage,
    ContactRead,
    ContactUpdate,
    MessageResponse,
)
from app.services import contacts as contact_service

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.get(
    "",
    response_model=ContactList,
    summary="List contacts",
)
def list_contacts(
    session: DBSession,
    current_user: CurrentUser,
) -> ContactList:
    """
    List all contacts of the authenticated user, newest first.

    Each contact's assignee is expanded to its id, name and email.
    """
    contacts = contact_service.list_contacts(session, current_user.id)
    return ContactList(contacts=[ContactRead.model_validate(c) for c in contacts])


@router.post(
    "",
    response_model=ContactMessage,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new contact",
    responses={
        400: {"description": "Missing required fields or invalid status/source"},
    },
)
def create_contact(
    data: ContactCreate,
    session: DBSession,
    current_user: CurrentUser,
) -> ContactMessage:
    """
    Create a new contact for the authenticated user.

    First name, last name, email and phone are required. Status defaults
    to ``lead`` and source to ``other``.

    Args:
        data: Contact fields.
        session: Database session.
        current_user: The authenticated user.

    Returns:
        Confirmation message and the created contact.
    """
    contact = contact_service.create_contact(session, current_user.id, data)
    return ContactMessage(
        message="Contact created successfully",
        contact=ContactRead.model_validate(contact),
    )


@router.get(
    "/{contact_id}",
    response_model=ContactEnvelope,
    summary="Get a contact by ID",
    responses={
        404: {"description": "Contact not found"},
    },
)
def get_contact(
    contact_id: str,
    session: DBSession,
    current_user: CurrentUser,
) -> ContactEnvelope:
    """Get a single contact owned by the authenticated user."""
    contact = contact_service.get_contact(session, current_user.id, contact_id)
    return ContactEnvelope(contact=ContactRead.model_validate(contact))


@router.put(
    "/{contact_id}",
    response_model=ContactMessage,
    summary="Update a contact",
    responses={
        400: {"description": "A required field was cleared"},
        404: {"description": "Contact not found"},
    },
)
def update_contact(
    contact_id: str,
    data: ContactUpdate,
    session: DBSession,
    current_user: CurrentUser,
) -> ContactMessage:
    """
    Update the fields present in the body; other fields keep their values.

    Keys that are not contact fields (``id``, ``createdBy``, ``createdAt``,
    ``updatedAt``...) are ignored. ``updatedAt`` is always refreshed.

    Args:
        contact_id: The contact's ID.
        data: Partial contact data.
        session: Database session.
        current_user: The authenticated user.

    Returns:
        Confirmation message and the updated contact.
    """
    contact = contact_service.update_contact(session, current_user.id, contact_id, data)
    return ContactMessage(
        message="Contact updated successfully",
        contact=ContactRead.model_validate(contact),
    )


@router.delete(
    "/{contact_id}",
    response_model=MessageResponse,
    summary="Delete a contact",
    responses={
        404: {"description": "Contact not found"},
    },
)
def delete_contact(
    contact_id: str,
    session: DBSession,
    current_user: CurrentUser,
) -> MessageResponse:
    """Permanently delete a contact owned by the authenticated user."""
    contact_service.delete_contact(session, current_user.id, contact_id)
    return MessageResponse(message="Contact deleted successfully")
