# ============================================================================
# DOMAIN REGISTRATION MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Custom domain purchase and provisioning record
# PURPOSE: Track a user's domain purchase through registrar, DNS and Front Door
# LAST_REVIEWED: 15 OCT 2026
# ============================================================================
"""
DomainRegistration Model

One custom-domain request by one user. Partitioned by upn so a user's
registrations live together; admin lookups by id are cross-partition.

Lifecycle: see DomainRegistrationStatus.
"""

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field, field_validator

from core.contracts import DomainRegistrationStatus
from core.models.base import CamelModel, CosmosDocument, utc_now


class Domain(CamelModel):
    """Second-level + top-level domain pair."""

    top_level_domain: str = Field(..., description="TLD without the dot, e.g. 'com'")
    second_level_domain: str = Field(..., description="Label left of the TLD, e.g. 'janedoe'")

    @property
    def full_domain_name(self) -> str:
        return f"{self.second_level_domain}.{self.top_level_domain}"


class ContactInformation(CamelModel):
    """Registrant contact details sent to the registrar."""

    first_name: str = ""
    last_name: str = ""
    address: str = ""
    address2: Optional[str] = None
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""
    email_address: str = ""
    telephone_number: str = ""


class DomainRegistration(CosmosDocument):
    """
    A user's domain registration.

    Container: DomainRegistrations, partition key /upn
    """

    __container__: ClassVar[str] = "DomainRegistrations"
    __partition_key__: ClassVar[str] = "upn"

    upn: str = Field(..., description="Owner's user principal name (partition key)")
    domain: Optional[Domain] = None
    contact_information: Optional[ContactInformation] = None
    created_at: datetime = Field(default_factory=utc_now)
    last_updated_at: Optional[datetime] = None
    status: DomainRegistrationStatus = DomainRegistrationStatus.PENDING

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value):
        if value is None:
            return DomainRegistrationStatus.PENDING
        return DomainRegistrationStatus(value)

    @property
    def full_domain_name(self) -> Optional[str]:
        return self.domain.full_domain_name if self.domain else None


__all__ = ["Domain", "ContactInformation", "DomainRegistration"]
