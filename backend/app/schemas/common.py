"""
BileMo API — Shared Schemas
=============================

Error bodies, HATEOAS link objects, the health response, and the helper
that turns Pydantic errors into the API's violation list.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field


class Link(BaseModel):
    """A HATEOAS relation: `{"href": "/api/users/1"}`."""
    href: str


class Violation(BaseModel):
    field: str = Field(description="Dotted path of the offending field")
    message: str = Field(description="Human-readable constraint description")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "violations": [{"field": "price", "message": "Input should be ..."}],
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    violations: Optional[List[Violation]] = Field(
        default=None, description="Field violations (validation errors only)"
    )
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    cache_entries: int = Field(description="Number of cached list pages")
    cache_hits: int
    cache_misses: int
    uptime_seconds: float = Field(description="Seconds since service started")


# Request validation locations FastAPI prefixes to every error path
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def violations_from_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flattens Pydantic / FastAPI error dicts into `[{"field", "message"}]`.

    `("body", "price")` becomes `"price"`; a whole-body error (invalid JSON,
    missing body) is reported against the empty field name.
    """
    violations = []
    for error in errors:
        loc: Sequence[Any] = error.get("loc", ())
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        violations.append({
            "field": ".".join(str(part) for part in loc),
            "message": error.get("msg", "Invalid value"),
        })
    return violations
