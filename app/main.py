# app/main.py
"""
FastAPI application entry point with session authentication and CORS.

This module configures and creates the FastAPI application instance with:
- Lifespan management (startup/shutdown handlers)
- Session store selection (Redis, falling back to in-memory)
- One-time administrator bootstrap
- CORS middleware for the browser client
- Typed error handlers
- Router registration for all API endpoints

The application provides a REST API for a small CRM: users sign in with
a session cookie and manage their own contacts.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from app.core.config import get_settings
from app.core.exceptions import register_exception_handlers
from app.db import get_session_context, ping_database
from app.deps import DBSession
from app.routers import auth, contacts, dashboard
from app.schemas import HealthResponse
from app.services.bootstrap import ensure_admin
from app.services.sessions import InMemorySessionStore, RedisSessionStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler for startup and shutdown events.

    On startup:
    - Logs application info
    - Connects the Redis session store, or falls back to in-memory sessions
    - Ensures the administrator account exists

    On shutdown:
    - Closes Redis connection
    - Logs shutdown message

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application.
    """
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    logger.info("Debug mode: %s", settings.debug)

    redis_client = None
    if settings.session_backend == "redis":
        try:
            redis_client = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await redis_client.ping()
            app.state.session_store = RedisSessionStore(redis_client)
            logger.info("Redis connected for session storage")
        except Exception as e:
            logger.warning(f"Redis not available, sessions kept in memory: {e}")
            redis_client = None
            app.state.session_store = InMemorySessionStore()
    else:
        app.state.session_store = InMemorySessionStore()
        logger.info("Using in-memory session storage")

    await run_in_threadpool(ensure_admin, get_session_context, settings)

    yield

    # Cleanup
    if redis_client is not None:
        await redis_client.aclose()
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="""
## CRM API

A REST API for a small customer-relationship-management application.

### Features

- **Session authentication**: register, login and logout with a signed session cookie
- **Contacts**: create, read, update and delete contacts you own
- **Dashboard**: total contacts and counts per status

### Authentication Flow

1. **Register**: `POST /api/register` - Creates an account and signs it in
2. **Login**: `POST /api/login` - Starts a session (24 hours, not extended on use)
3. **Use the cookie**: the browser sends it with every request
4. **Logout**: `POST /api/logout` - Ends the session immediately

### Ownership

Contacts are visible only to the user who created them. Someone else's
contact answers 404, exactly like a contact that does not exist.

### Errors

Failures return `{"error": "<message>"}` with status 400, 401, 404 or 500.
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    openapi_url="/openapi.json",
)

register_exception_handlers(app)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(contacts.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    """
    Redirect root to API documentation.

    Returns:
        Redirect response to /docs.
    """
    return RedirectResponse(url="/docs")


@app.get("/api/health", response_model=HealthResponse, tags=["health"])
def health_check(session: DBSession) -> HealthResponse:
    """
    Health check endpoint.

    Reports whether the server is up and the database answers.

    Returns:
        Status, current time, database state and listening port.
    """
    return HealthResponse(
        status="Server is running",
        timestamp=datetime.now(UTC),
        database="connected" if ping_database(session) else "disconnected",
        port=settings.port,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
