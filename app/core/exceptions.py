# app/core/exceptions.py
"""
Typed application errors and their HTTP mapping.

Services raise one of the errors below; the handlers registered by
:func:`register_exception_handlers` turn them into ``{"error": message}``
JSON bodies with the matching status code. Routers never build error
responses themselves.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CRMError(Exception):
    """
    Base class for all errors surfaced to API clients.

    Attributes:
        status_code: HTTP status code the error maps to.
        message: Short, client-safe description.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CRMError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(CRMError):
    """
    Bad credentials.

    The message is identical for an unknown email and a wrong password
    so that responses cannot be used to enumerate accounts.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid email or password"


class ConflictError(CRMError):
    """A unique value (user email) is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User with this email already exists"


class AuthRequiredError(CRMError):
    """No valid session accompanies the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required. Please login."


class NotFoundError(CRMError):
    """Resource is missing or belongs to another user."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(CRMError):
    """Store or session backend failure."""


async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
    """Render a typed application error."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Render request parsing failures as 400 with the first problem found.

    Covers malformed JSON bodies and values outside an enum (e.g. an
    unknown contact status).
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if location:
            message = f"{location}: {message}"
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": message}
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide their details from the client."""
    logger.exception(
        "Unhandled exception on %s %s", request.method, request.url.path
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on the application."""
    app.add_exception_handler(CRMError, crm_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
