# app/services/dashboard.py
"""Dashboard aggregates over the signed-in user's contacts."""

from sqlalchemy.orm import Session

from app import crud
from app.schemas import DashboardStats, StatusCount


def get_stats(session: Session, owner_id: str) -> DashboardStats:
    """
    Count the owner's contacts, overall and per status.

    Read-only. Statuses with no contacts are left out, and the order of
    the per-status entries is whatever the database returns.
    """
    total = crud.count_contacts(session, owner_id)
    by_status = [
        StatusCount(status=status, count=count)
        for status, count in crud.count_contacts_by_status(session, owner_id)
    ]
    return DashboardStats(total_contacts=total, contacts_by_status=by_status)
