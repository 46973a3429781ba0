"""
Service error taxonomy.

Every error carries the HTTP status and the client-facing message used
in the ``{"success": false, "message": ...}`` envelope.  The handlers in
``api.middleware`` do the conversion.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class; also stands for unexpected internal failures."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Missing or malformed input, including a rejected upload."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(ServiceError):
    status_code = 400
    default_message = "Email already registered"


class UnauthorizedError(ServiceError):
    status_code = 401
    default_message = "Invalid email or password"


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "User not found"
