# ============================================================================
# FUNCTION APP MODELS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Pydantic models for API
# PURPOSE: Request and response models for function app endpoints
# CREATED: 16 OCT 2026
# ============================================================================
"""
Function App Models

Pydantic V2 models for API requests and responses.
"""

from function.models.requests import (
    CreateDomainRegistrationRequest,
    UpdateDomainRegistrationRequest,
    CreateLeadRequest,
    CreateReferralRequest,
    CreateCustomerRequest,
)
from function.models.responses import (
    ErrorResponse,
    DomainRegistrationResponse,
    CompletedRegistrationResponse,
    ExperimentsResponse,
    PlatformStatsResponse,
)

__all__ = [
    # Requests
    "CreateDomainRegistrationRequest",
    "UpdateDomainRegistrationRequest",
    "CreateLeadRequest",
    "CreateReferralRequest",
    "CreateCustomerRequest",
    # Responses
    "ErrorResponse",
    "DomainRegistrationResponse",
    "CompletedRegistrationResponse",
    "ExperimentsResponse",
    "PlatformStatsResponse",
]
