"""
Application error taxonomy.

Every failure that reaches a route is one of these. Each carries the
user-facing message and the HTTP status it is rendered with by the
exception handler registered in `main.create_app`.
"""

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong, please try again"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(AppError):
    """Malformed or missing required input."""

    status_code = 422
    default_message = "Invalid inputs passed, please check your data"


class NotFound(AppError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Could not find the requested resource"


class Unauthorized(AppError):
    """Credential mismatch, missing token, or insufficient rights."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class InternalFailure(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class TransactionAborted(InternalFailure):
    """The store failed inside a unit of work; nothing was committed."""

    default_message = "Operation failed, please try again later"


__all__ = [
    "AppError",
    "ValidationFailed",
    "NotFound",
    "Unauthorized",
    "InternalFailure",
    "TransactionAborted",
]
