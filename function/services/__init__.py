# ============================================================================
# FUNCTION APP SERVICES
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Services - Exports
# PURPOSE: Business logic between blueprints and repositories/clients
# CREATED: 17 OCT 2026
# ============================================================================

from function.services.domain_registration_service import CompletionResult, DomainRegistrationService
from function.services.experiment_service import ExperimentService
from function.services.lead_service import LeadService
from function.services.platform_stats_service import PlatformStatsService
from function.services.rate_limiter import SlidingWindowRateLimiter
from function.services.referral_service import ReferralService
from function.services.user_profile_service import UserProfileService

__all__ = [
    "CompletionResult",
    "DomainRegistrationService",
    "ExperimentService",
    "LeadService",
    "PlatformStatsService",
    "ReferralService",
    "SlidingWindowRateLimiter",
    "UserProfileService",
]
