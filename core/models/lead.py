# ============================================================================
# LEAD MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Marketing lead capture
# PURPOSE: Email sign-ups from landing pages, blog and exit-intent popups
# LAST_REVIEWED: 15 OCT 2026
# ============================================================================
"""
Lead Model

Partitioned by the lowercase email domain, which spreads writes and keeps
the duplicate-email lookup single-partition.
"""

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field

from core.contracts import EmailServiceStatus, LeadSource
from core.models.base import CosmosDocument, utc_now


class Lead(CosmosDocument):
    """
    Captured lead.

    Container: Leads, partition key /emailDomain
    """

    __container__: ClassVar[str] = "Leads"
    __partition_key__: ClassVar[str] = "email_domain"

    email: str
    first_name: Optional[str] = None
    source: LeadSource
    lead_magnet: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    referrer: Optional[str] = None
    locale: str = "en-US"
    ip_address: Optional[str] = None
    consent_given: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    email_service_status: EmailServiceStatus = EmailServiceStatus.PENDING
    email_domain: str = "unknown"

    @staticmethod
    def domain_of(email: str) -> str:
        """Lowercase domain part of an email, or 'unknown'."""
        if not email or "@" not in email:
            return "unknown"
        domain = email.rsplit("@", 1)[1].strip().lower()
        return domain or "unknown"


__all__ = ["Lead"]
