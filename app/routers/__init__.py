# app/routers/__init__.py
"""API routers package."""

from app.routers import auth, contacts, dashboard

__all__ = ["auth", "contacts", "dashboard"]
