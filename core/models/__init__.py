# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Model exports
# PURPOSE: Central export point for all Cosmos entity models
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All Pydantic models persisted in Cosmos DB. Container metadata is
declared on each model via __container__ / __partition_key__, and
ALL_DOCUMENT_MODELS drives container provisioning.
"""

from core.models.base import CamelModel, CosmosDocument, utc_now, new_id
from core.models.author import Author, Book
from core.models.author_invitation import INVITATION_TTL_DAYS, AuthorInvitation
from core.models.domain_registration import ContactInformation, Domain, DomainRegistration
from core.models.experiment import Experiment, ExperimentVariant
from core.models.lead import Lead
from core.models.locale import Country, Language, StateProvince
from core.models.platform_stats import CURRENT_STATS_ID, PlatformStats
from core.models.referral import Referral
from core.models.testimonial import Testimonial
from core.models.user_profile import UserProfile

ALL_DOCUMENT_MODELS = [
    Author,
    AuthorInvitation,
    Book,
    Country,
    DomainRegistration,
    Experiment,
    Lead,
    Language,
    PlatformStats,
    Referral,
    StateProvince,
    Testimonial,
    UserProfile,
]

__all__ = [
    "CamelModel",
    "CosmosDocument",
    "utc_now",
    "new_id",
    "Author",
    "AuthorInvitation",
    "INVITATION_TTL_DAYS",
    "Book",
    "ContactInformation",
    "Domain",
    "DomainRegistration",
    "Experiment",
    "ExperimentVariant",
    "Lead",
    "Language",
    "Country",
    "StateProvince",
    "PlatformStats",
    "CURRENT_STATS_ID",
    "Referral",
    "Testimonial",
    "UserProfile",
    "ALL_DOCUMENT_MODELS",
]
