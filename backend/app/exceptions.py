"""
BileMo API — Custom Exception Hierarchy
=========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, repositories and security dependencies.
When:  During request processing when an expected failure occurs.

Exception Hierarchy:
    ApiError (base)
    ├── ValidationFailedError    → 400 Bad Request (violations list)
    ├── UnauthorizedError        → 401 Unauthorized (missing/expired token)
    ├── ForbiddenError           → 403 Forbidden (role or ownership)
    └── NotFoundError            → 404 Not Found

Persistence failures are deliberately absent: SQLAlchemy errors propagate
untouched and the catch-all handler answers 500.
"""

from typing import Any, Dict, List, Optional


class ApiError(Exception):
    """
    Base exception for all BileMo application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationFailedError(ApiError):
    """
    Raised when an entity fails field constraints.

    What:    Carries every violation found, not just the first one.
    When:    Create/update payloads that break a constraint, duplicate emails.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "violations": [{"field": "email", "message": "This value is already used."}]
        }
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        violations: List[Dict[str, str]],
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.violations = violations

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailedError":
        return cls(violations=[{"field": field, "message": message}])


class UnauthorizedError(ApiError):
    """
    Raised when the bearer credential is missing, malformed or expired.

    HTTP:    401 Unauthorized, with `WWW-Authenticate: Bearer`
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Authentication credentials were missing or invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(ApiError):
    """
    Raised when an authenticated principal lacks the role for an action,
    or tries to act on a user that belongs to another customer.

    HTTP:    403 Forbidden
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "You do not have sufficient rights for this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ApiError):
    """
    Raised when a requested resource does not exist.

    What:    The client asked for an id that doesn't exist in the database.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records (not an exception).
    Repositories convert None into NotFoundError so routes stay free of
    existence checks.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
