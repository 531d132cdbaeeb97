"""Error Hierarchy — one exception class per HTTP status the API returns.

Invariants:
    - Every error carries a message and a status_code; details are optional
    - to_response() produces the REST envelope {success, message, details?}
    - details are only serialized when the caller allows it (non-production)

Design Decisions:
    - Single hierarchy with AppError base: FastAPI global handler catches all
    - Subclasses only fix the status code and a default message
"""

from typing import Any


class AppError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details

    def to_response(self, include_details: bool = True) -> dict:
        """Convert to standardized REST error response."""
        body: dict[str, Any] = {"success": False, "message": self.message}
        if include_details and self.details is not None:
            body["details"] = self.details
        return body


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(AppError):
    """Requested resource does not exist."""
    status_code = 404
    default_message = "Resource not found"

    def __init__(self, resource: str | None = None, resource_id: Any = None):
        if resource and resource_id is not None:
            message = f"{resource} with id {resource_id} not found"
        elif resource:
            message = f"{resource} not found"
        else:
            message = None
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class InternalServerError(AppError):
    status_code = 500
    default_message = "Internal server error"


def error_response(message: str, details: Any = None) -> dict:
    """Envelope for errors that do not originate from AppError."""
    body: dict[str, Any] = {"success": False, "message": message}
    if details is not None:
        body["details"] = details
    return body
