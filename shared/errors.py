"""
Shared error handling for the Student Portal services.
"""

from typing import Dict, Any, Optional

from opentelemetry import trace
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


def current_trace_id() -> Optional[str]:
    """Return the trace id of the active span, if one is recording."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.trace_id != 0:
            return f"{span_context.trace_id:032x}"
    return None


class PortalException(Exception):
    """Base exception for portal services."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            trace_id=current_trace_id(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class AuthenticationError(PortalException):
    """Bad credentials presented at login."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class AuthorizationError(PortalException):
    """The caller may not act on the requested resource."""

    status_code = 403

    def __init__(self, message: str = "Authorization failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "AUTHORIZATION_ERROR"):
        super().__init__(code, message, details)


class TokenRejectedError(AuthorizationError):
    """Bearer token missing, malformed, expired, or not verifiable."""

    status_code = 401

    def __init__(self, message: str = "Invalid or missing bearer token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="TOKEN_REJECTED")


class NotFoundError(PortalException):
    """Entity lookup by id failed."""

    status_code = 404

    def __init__(self, entity: str, entity_id: Any, details: Optional[Dict[str, Any]] = None):
        details = {"entity": entity, "id": entity_id, **(details or {})}
        super().__init__("NOT_FOUND", f"{entity} {entity_id} not found", details)


class ConflictError(PortalException):
    """Unique constraint would be violated."""

    status_code = 409

    def __init__(self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFLICT", message, details)


class ValidationError(PortalException):
    """Validation-related errors."""

    status_code = 422

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ExternalServiceError(PortalException):
    """External service errors."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class PersistenceError(PortalException):
    """The backing store rejected or failed an operation."""

    status_code = 503

    def __init__(self, message: str = "Persistence error", details: Optional[Dict[str, Any]] = None):
        super().__init__("PERSISTENCE_ERROR", message, details)
