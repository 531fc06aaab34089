# app/routers/dashboard.py
"""Dashboard router: aggregate figures for the authenticated user."""

from fastapi import APIRouter

from app.deps import CurrentUser, DBSession
from app.schemas import DashboardStats
from app.services import dashboard as dashboard_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Contact counts for the dashboard",
)
def get_stats(session: DBSession, current_user: CurrentUser) -> DashboardStats:
    """
    Return the total number of contacts and the count per status.

    Statuses without contacts are omitted.
    """
    return dashboard_service.get_stats(session, current_user.id)
