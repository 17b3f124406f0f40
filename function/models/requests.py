# ============================================================================
# API REQUEST MODELS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Request schemas
# PURPOSE: Pydantic V2 models for incoming API requests
# CREATED: 16 OCT 2026
# ============================================================================
"""
API Request Models

Pydantic V2 models for incoming API requests.
All models accept camelCase (wire) or snake_case field names and use V2
patterns: ConfigDict, model_validate, model_dump.

Field bounds here are shape checks only. Business rules (reserved
domains, allowed TLDs, phone formats, ...) live in
function.services.domain_validation.
"""

from typing import List, Literal, Optional

from pydantic import Field

from core.contracts import DomainRegistrationStatus, LeadSource
from core.models.base import CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ============================================================================
# DOMAIN REGISTRATIONS
# ============================================================================

class DomainInput(CamelModel):
    """Domain part of a registration request."""

    top_level_domain: str = Field(..., min_length=2, max_length=10, description="TLD, e.g. 'com'")
    second_level_domain: str = Field(..., min_length=1, max_length=63, description="SLD, e.g. 'janedoe'")


class ContactInformationInput(CamelModel):
    """Registrant contact details."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    address: str = Field(..., min_length=1, max_length=100)
    address2: Optional[str] = Field(default=None, max_length=100)
    city: str = Field(..., min_length=1, max_length=50)
    state: str = Field(..., min_length=1, max_length=50)
    country: str = Field(..., min_length=1, max_length=50)
    zip_code: str = Field(..., min_length=1, max_length=20)
    email_address: str = Field(..., min_length=1, max_length=100)
    telephone_number: str = Field(..., min_length=1, max_length=20)


class CreateDomainRegistrationRequest(CamelModel):
    """Request to register a custom domain."""

    domain: DomainInput
    contact_information: ContactInformationInput


class UpdateDomainRegistrationRequest(CamelModel):
    """Partial update; any subset of the fields may be supplied."""

    domain: Optional[DomainInput] = None
    contact_information: Optional[ContactInformationInput] = None
    status: Optional[DomainRegistrationStatus] = None

    @property
    def has_updates(self) -> bool:
        return any(v is not None for v in (self.domain, self.contact_information, self.status))


# ============================================================================
# TESTIMONIALS
# ============================================================================

class TestimonialRequest(CamelModel):
    """Create or replace a testimonial."""

    author_name: str = Field(..., min_length=1, max_length=100)
    author_title: Optional[str] = Field(default=None, max_length=150)
    quote: str = Field(..., min_length=1, max_length=2000)
    rating: int = Field(default=5, ge=1, le=5)
    photo_url: Optional[str] = Field(default=None, max_length=500)
    featured: bool = False
    locale: str = Field(default="en-US", min_length=1, max_length=10)


# ============================================================================
# LEADS / REFERRALS
# ============================================================================

class CreateLeadRequest(CamelModel):
    """Lead capture from a landing page, blog, popup or newsletter form."""

    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    first_name: Optional[str] = Field(default=None, max_length=100)
    source: LeadSource
    lead_magnet: Optional[str] = Field(default=None, max_length=100)
    utm_source: Optional[str] = Field(default=None, max_length=200)
    utm_medium: Optional[str] = Field(default=None, max_length=200)
    utm_campaign: Optional[str] = Field(default=None, max_length=200)
    referrer: Optional[str] = Field(default=None, max_length=500)
    locale: str = Field(..., min_length=1, max_length=10)
    consent_given: bool = False


class CreateReferralRequest(CamelModel):
    """Invite an email address on behalf of a referrer."""

    referrer_id: str = Field(..., min_length=1, max_length=200)
    referred_email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)


# ============================================================================
# STRIPE
# ============================================================================

class CreateCustomerRequest(CamelModel):
    """Create (or find) the Stripe customer for the caller."""

    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    name: Optional[str] = Field(default=None, max_length=200)


ProrationBehavior = Literal["create_prorations", "none", "always_invoice"]


class CreateSubscriptionRequest(CamelModel):
    """Subscribe the caller's linked customer to one price."""

    price_id: str = Field(..., min_length=1, max_length=255)


class UpdateSubscriptionRequest(CamelModel):
    """Plan, quantity or period-end cancellation change; unset fields are left alone."""

    cancel_at_period_end: Optional[bool] = None
    proration_behavior: Optional[ProrationBehavior] = None
    subscription_item_id: Optional[str] = Field(default=None, max_length=255)
    price_id: Optional[str] = Field(default=None, max_length=255)
    quantity: Optional[int] = Field(default=None, ge=1)
    expand_latest_invoice_payment_intent: bool = False


class CancelSubscriptionRequest(CamelModel):
    invoice_now: Optional[bool] = None
    prorate: Optional[bool] = None


class InvoicePreviewRequest(CamelModel):
    """Upcoming invoice for the caller, optionally with a proposed plan change."""

    subscription_id: Optional[str] = Field(default=None, max_length=255)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    proration_behavior: Optional[ProrationBehavior] = None
    subscription_item_id: Optional[str] = Field(default=None, max_length=255)
    price_id: Optional[str] = Field(default=None, max_length=255)
    quantity: Optional[int] = Field(default=None, ge=1)


class CreateCheckoutSessionRequest(CamelModel):
    price_id: str = Field(..., min_length=1, max_length=255)
    domain: str = Field(..., min_length=1, max_length=253)


class PriceListRequest(CamelModel):
    """
    Price catalog filters.

    active=True keeps prices whose product is active too; active=False
    keeps inactive prices only.
    """

    active: Optional[bool] = None
    product_id: Optional[str] = Field(default=None, max_length=255)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    limit: int = Field(default=100, ge=1, le=100)
    include_product_details: bool = True


# ============================================================================
# AUTHOR INVITATIONS
# ============================================================================

class CreateAuthorInvitationRequest(CamelModel):
    """
    Invite an author. Either domainName or domainNames (or both) may be sent;
    presence and format are checked by InvitationService.
    """

    email_address: Optional[str] = Field(default=None, max_length=254)
    domain_name: Optional[str] = Field(default=None, max_length=253)
    domain_names: Optional[List[str]] = Field(default=None, max_length=20)
    notes: Optional[str] = Field(default=None, max_length=1000)


__all__ = [
    "EMAIL_PATTERN",
    "DomainInput",
    "ContactInformationInput",
    "CreateDomainRegistrationRequest",
    "UpdateDomainRegistrationRequest",
    "TestimonialRequest",
    "CreateLeadRequest",
    "CreateReferralRequest",
    "CreateCustomerRequest",
    "CreateSubscriptionRequest",
    "UpdateSubscriptionRequest",
    "CancelSubscriptionRequest",
    "InvoicePreviewRequest",
    "CreateCheckoutSessionRequest",
    "PriceListRequest",
    "CreateAuthorInvitationRequest",
]
