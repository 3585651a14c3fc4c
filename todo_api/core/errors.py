"""
Application error taxonomy.

Services raise these; the exception handlers registered in
``todo_api.main`` translate them into JSON responses (or a redirect,
for ``UnauthorizedError``).
"""

from typing import Any, Optional

from fastapi import status

from todo_api.core import messages


class AppError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = messages.WENT_WRONG

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = messages.REQUIRED_DATA


class NotFoundError(AppError):
    """Referenced entity does not exist or is logically deleted."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = messages.NOT_FOUND


class UnauthorizedError(AppError):
    """Request lacks a valid authenticated session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = messages.UNAUTHORIZED


class ForbiddenError(AppError):
    """Authenticated user may not act on the target entity."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = messages.FORBIDDEN


class PersistenceError(AppError):
    """Underlying store operation failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = messages.INTERNAL_SERVER_ERROR


class IdentityDataMissing(ValidationError):
    """Identity provider profile lacks data needed to build a user."""

    default_message = messages.EMAIL_NOT_PROVIDED


class IdentityPersistenceFailure(PersistenceError):
    """Storing the authenticated user failed; the handshake is aborted."""

    default_message = messages.LOGIN_FAILED
