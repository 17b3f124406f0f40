# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Core module initialization
# PURPOSE: Export core contracts, errors and entity models
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================

from core.contracts import (
    DomainRegistrationStatus,
    EmailServiceStatus,
    LeadSource,
    ReferralStatus,
    UserRole,
)
from core.errors import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServiceError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    # Enums
    "DomainRegistrationStatus",
    "EmailServiceStatus",
    "LeadSource",
    "ReferralStatus",
    "UserRole",
    # Errors
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
