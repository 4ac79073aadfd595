"""
Shared error handling for the Matcher gateway.

Every failure that crosses a component boundary is a ``DomainError``. The
``message`` is safe to return to callers; ``details`` carries operational
context (coordinates, upstream status) and is only ever logged.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str


class DomainError(Exception):
    """Base exception for matcher domain failures."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(error=self.message)


class ValidationError(DomainError):
    """Out-of-range or malformed search input."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class UnauthorizedError(DomainError):
    """Missing, invalid or unauthenticated bearer token."""

    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class NotFoundError(DomainError):
    """Upstream reported that no driver matched the search."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "Driver not found in the search radius",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class BreakerOpenError(DomainError):
    """Call rejected by the circuit breaker without reaching the upstream."""

    code = "BREAKER_OPEN"
    status_code = 503

    def __init__(self, message: str = "Driver service temporarily unavailable",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class UpstreamUnavailableError(DomainError):
    """Upstream answered with an unexpected status or could not be reached."""

    code = "UPSTREAM_UNAVAILABLE"
    status_code = 500

    def __init__(self, message: str = "Internal server error",
                 status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if status is not None:
            details["upstream_status"] = status
        self.status = status
        super().__init__(message, details)


class InternalError(DomainError):
    """Decode failure or other unexpected condition."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
