# ============================================================================
# FUNCTION APP REPOSITORIES
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Cosmos DB repositories
# PURPOSE: One repository per entity container
# CREATED: 15 OCT 2026
# ============================================================================
"""
Function App Repositories

Cosmos DB access for the function app. Each repository binds one model
from core.models and resolves its container lazily.
"""

from function.repositories.base import CosmosRepository, params
from function.repositories.author_invitation_repo import AuthorInvitationRepository
from function.repositories.author_repo import AuthorRepository, BookRepository
from function.repositories.domain_registration_repo import DomainRegistrationRepository
from function.repositories.experiment_repo import ExperimentRepository
from function.repositories.lead_repo import LeadRepository
from function.repositories.locale_repo import CountryRepository, LanguageRepository, StateProvinceRepository
from function.repositories.platform_stats_repo import PlatformStatsRepository
from function.repositories.referral_repo import ReferralRepository
from function.repositories.testimonial_repo import TestimonialRepository
from function.repositories.user_profile_repo import UserProfileRepository

__all__ = [
    "CosmosRepository",
    "params",
    "AuthorInvitationRepository",
    "AuthorRepository",
    "BookRepository",
    "DomainRegistrationRepository",
    "ExperimentRepository",
    "LeadRepository",
    "LanguageRepository",
    "CountryRepository",
    "StateProvinceRepository",
    "PlatformStatsRepository",
    "ReferralRepository",
    "TestimonialRepository",
    "UserProfileRepository",
]
