# app/services/bootstrap.py
"""
Startup initialization: make sure the administrator account exists.

Called once from the application lifespan, never at import time. The
database may still be starting when the API boots, so connection
failures are retried with exponential backoff.
"""

import logging
import time
from collections.abc import Callable
from contextlib import AbstractContextManager

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app import crud
from app.core.config import Settings
from app.models import UserRole

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


def ensure_admin(
    session_factory: SessionFactory,
    settings: Settings,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Create the administrator account unless it already exists.

    Idempotent: the reserved ``settings.admin_email`` is looked up first
    and nothing is written if an account with it is present.

    Args:
        session_factory: Context manager yielding a committing DB session.
        settings: Application settings with admin credentials and retry policy.
        sleep: Delay function, replaceable in tests.

    Returns:
        True if the admin was created, False if it already existed or the
        database stayed unreachable.
    """
    delay = settings.bootstrap_initial_delay
    attempts = max(settings.bootstrap_max_attempts, 1)

    for attempt in range(1, attempts + 1):
        try:
            with session_factory() as session:
                if crud.get_user_by_email(session, settings.admin_email):
                    logger.info("Admin user already exists")
                    return False
                crud.create_user(
                    session,
                    name=settings.admin_name,
                    email=settings.admin_email,
                    password=settings.admin_password,
                    role=UserRole.ADMIN,
                )
            logger.info("Admin user created: %s", settings.admin_email)
            return True
        except IntegrityError:
            # Another worker inserted the admin between our lookup and insert
            logger.info("Admin user already exists")
            return False
        except OperationalError as e:
            if attempt == attempts:
                break
            logger.warning(
                "Database not reachable (attempt %d/%d), retrying in %.1fs: %s",
                attempt,
                attempts,
                delay,
                e,
            )
            sleep(delay)
            delay *= 2

    logger.error("Could not initialize admin user after %d attempts", attempts)
    return False
