"""
Custom Exceptions.

Every error a service can raise on purpose derives from ApplicationError.
Each subclass carries its machine-readable ``code`` and a default message;
exception_handlers.py maps the class to an HTTP status.

Usage:
    raise NotFoundError("Note not found")
    raise ValidationError("Color must be a hex value", details={"color": value})
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    code = "SYS_INTERNAL_ERROR"
    default_message = "Internal error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """The resource does not exist for the current owner."""

    code = "RES_NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(ApplicationError):
    """Input passed schema validation but breaks a business rule."""

    code = "VAL_VALIDATION_ERROR"
    default_message = "Validation failed"


class AuthenticationError(ApplicationError):
    """Missing, invalid or expired credentials."""

    code = "AUTH_UNAUTHORIZED"
    default_message = "Authentication required"


class AuthorizationError(ApplicationError):
    code = "AUTHZ_FORBIDDEN"
    default_message = "Permission denied"


class ConflictError(ApplicationError):
    """A unique name or email is already taken."""

    code = "RES_CONFLICT"
    default_message = "Resource conflict"


class RateLimitError(ApplicationError):
    """Too many attempts; ``retry_after`` is in seconds."""

    code = "RATE_LIMITED"
    default_message = "Rate limit exceeded"

    def __init__(self, message: str | None = None, retry_after: int = 0) -> None:
        self.retry_after = retry_after
        super().__init__(message, details={"retry_after": retry_after})


class DatabaseError(ApplicationError):
    code = "SYS_DATABASE_ERROR"
    default_message = "Database error"
