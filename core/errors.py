# ============================================================================
# SERVICE ERRORS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Foundation - Exception hierarchy
# PURPOSE: Exceptions that carry the HTTP status they surface as
# CREATED: 14 OCT 2026
# ============================================================================
"""
Service Errors

Services raise these; blueprints turn them into ErrorResponse bodies via
function.http.exception_response. Anything that is not a ServiceError
surfaces as a 500.
"""

from typing import Any, List, Optional


class ServiceError(Exception):
    """Base exception for service operations."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised when request input fails validation."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: Optional[List[str]] = None, field: str = None, value: Any = None):
        self.errors = errors or []
        self.field = field
        self.value = value
        details = "; ".join(self.errors) if self.errors else None
        super().__init__(message, details)


class AuthenticationError(ServiceError):
    """Raised when the caller cannot be identified."""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(ServiceError):
    """Raised when the caller is identified but not allowed."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(ServiceError):
    """Raised when a requested resource does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(ServiceError):
    """Raised when the resource state does not allow the operation."""

    status_code = 409
    code = "CONFLICT"


class RateLimitError(ServiceError):
    """Raised when a caller exceeds its request budget."""

    status_code = 429
    code = "RATE_LIMITED"


class UpstreamError(ServiceError):
    """Raised when a third-party API fails or is unreachable."""

    status_code = 502
    code = "UPSTREAM_ERROR"

    def __init__(self, message: str, details: Optional[str] = None, service: str = None, status_code: int = None):
        self.service = service
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message, details)


class ConfigurationError(UpstreamError):
    """Raised when an integration is used without its settings."""

    code = "NOT_CONFIGURED"


__all__ = [
    "ServiceError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "UpstreamError",
    "ConfigurationError",
]
