# ============================================================================
# API RESPONSE MODELS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Response schemas
# PURPOSE: Pydantic V2 models for API responses
# CREATED: 16 OCT 2026
# ============================================================================
"""
API Response Models

Pydantic V2 models for API responses. Every response serializes with
camelCase keys: use to_body() (model_dump by_alias, JSON mode).
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from core.contracts import DomainRegistrationStatus, InvitationStatus
from core.models import AuthorInvitation, ContactInformation, Domain, DomainRegistration, PlatformStats
from core.models.base import CamelModel, utc_now


class ResponseModel(CamelModel):
    """Base for response bodies."""

    def to_body(self, exclude_none: bool = False) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=exclude_none)


class ErrorResponse(ResponseModel):
    """Standard error response."""

    status_code: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(default=None, description="Additional details")
    code: Optional[str] = Field(default=None, description="Error code for programmatic handling")
    trace_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Correlates with logs")
    timestamp: datetime = Field(default_factory=utc_now)


# ============================================================================
# DOMAIN REGISTRATIONS
# ============================================================================

class DomainRegistrationResponse(ResponseModel):
    """Domain registration as returned to its owner."""

    id: str
    upn: str
    domain: Optional[Domain] = None
    contact_information: Optional[ContactInformation] = None
    created_at: datetime
    last_updated_at: Optional[datetime] = None
    status: DomainRegistrationStatus

    @classmethod
    def from_entity(cls, registration: DomainRegistration) -> "DomainRegistrationResponse":
        return cls(
            id=registration.id,
            upn=registration.upn,
            domain=registration.domain,
            contact_information=registration.contact_information,
            created_at=registration.created_at,
            last_updated_at=registration.last_updated_at,
            status=registration.status,
        )


class CompletionStepsResponse(ResponseModel):
    """Outcome of each completion workflow step."""

    whmcs_registration: bool = False
    dns_configuration: bool = False
    front_door: bool = False


class CompletedRegistrationResponse(DomainRegistrationResponse):
    """Registration after an admin completion run, with per-step outcomes."""

    steps: CompletionStepsResponse


# ============================================================================
# TESTIMONIALS / LEADS / REFERRALS
# ============================================================================

class TestimonialListResponse(ResponseModel):
    testimonials: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0


class LeadResponse(ResponseModel):
    id: str
    status: str = Field(..., description="'created' or 'existing'")
    message: str


class ReferralCreatedResponse(ResponseModel):
    referral_code: str
    referral_url: str


class ReferralStatsResponse(ResponseModel):
    user_id: str
    total_referrals: int = 0
    successful_referrals: int = 0
    pending_credits: int = 0
    redeemed_credits: int = 0


# ============================================================================
# EXPERIMENTS
# ============================================================================

class AssignedExperiment(ResponseModel):
    id: str
    name: str
    variant: str = Field(..., description="Assigned variant id")
    config: Dict[str, Any] = Field(default_factory=dict)


class ExperimentsResponse(ResponseModel):
    experiments: List[AssignedExperiment] = Field(default_factory=list)
    session_id: str


# ============================================================================
# PLATFORM STATS
# ============================================================================

class PlatformStatsResponse(ResponseModel):
    active_authors: int = 0
    books_published: int = 0
    total_revenue: float = 0
    average_rating: float = 0
    countries_served: int = 0
    last_updated: Optional[datetime] = None

    @classmethod
    def from_entity(cls, stats: PlatformStats) -> "PlatformStatsResponse":
        return cls(
            active_authors=stats.active_authors,
            books_published=stats.books_published,
            total_revenue=stats.total_revenue,
            average_rating=stats.average_rating,
            countries_served=stats.countries_served,
            last_updated=stats.last_updated,
        )


# ============================================================================
# INTEGRATIONS
# ============================================================================

class WikipediaPersonResponse(ResponseModel):
    title: str = ""
    description: str = ""
    extract: str = ""
    lead_paragraph: str = ""
    thumbnail: Optional[Dict[str, Any]] = None
    canonical_url: str = ""
    language: str


class SubscriptionSummary(ResponseModel):
    id: str
    status: str
    current_period_end: Optional[int] = None
    price_id: Optional[str] = None


class SubscriptionListResponse(ResponseModel):
    subscriptions: List[SubscriptionSummary] = Field(default_factory=list)
    has_more: bool = False


class CustomerResponse(ResponseModel):
    customer_id: str


class SubscriptionCreatedResponse(ResponseModel):
    subscription_id: str
    client_secret: str


class SubscriptionUpdatedResponse(ResponseModel):
    subscription_id: str
    status: str = ""
    latest_invoice_id: str = ""
    client_secret: Optional[str] = None


class SubscriptionCanceledResponse(ResponseModel):
    subscription_id: str
    status: str = ""
    canceled_at: Optional[int] = None


class InvoiceLineResponse(ResponseModel):
    description: str = ""
    quantity: int = 0
    amount: int = 0
    currency: str = ""
    price_id: str = ""


class InvoicePreviewResponse(ResponseModel):
    """Amounts are in the currency's minor unit, as Stripe reports them."""

    invoice_id: str = ""
    currency: str = ""
    amount_due: int = 0
    subtotal: int = 0
    total: int = 0
    lines: List[InvoiceLineResponse] = Field(default_factory=list)


class CheckoutSessionCreatedResponse(ResponseModel):
    checkout_session_id: str
    client_secret: str = ""


class CheckoutSessionResponse(ResponseModel):
    checkout_session_id: str
    status: str = ""
    payment_status: str = ""
    customer_id: str = ""
    mode: str = ""
    url: str = ""


class PriceResponse(ResponseModel):
    id: str
    product_id: str = ""
    product_name: str = ""
    product_description: str = ""
    unit_amount: Optional[int] = None
    currency: str = ""
    active: bool = False
    product_active: bool = False
    nickname: str = ""
    lookup_key: str = ""
    type: str = ""
    is_recurring: bool = False
    recurring_interval: str = ""
    recurring_interval_count: Optional[int] = None
    created_date: Optional[datetime] = None


class PriceListResponse(ResponseModel):
    prices: List[PriceResponse] = Field(default_factory=list)
    has_more: bool = False
    last_id: str = ""


class StripeHealthResponse(ResponseModel):
    stripe_mode: str = "unknown"
    stripe_connected: bool = False
    version: str


class WebhookReceivedResponse(ResponseModel):
    received: bool = True
    event_type: str = ""
    message: str = ""


# ============================================================================
# AUTHOR INVITATIONS
# ============================================================================

class AuthorInvitationResponse(ResponseModel):
    id: str
    email_address: str
    domain_name: str
    domain_names: List[str] = Field(default_factory=list)
    status: InvitationStatus
    created_at: datetime
    expires_at: datetime
    notes: Optional[str] = None
    email_sent: bool = False

    @classmethod
    def from_entity(cls, invitation: AuthorInvitation, email_sent: bool = False) -> "AuthorInvitationResponse":
        return cls(
            id=invitation.id,
            email_address=invitation.email_address,
            domain_name=invitation.domain_name,
            domain_names=invitation.domain_names,
            status=invitation.status,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            notes=invitation.notes,
            email_sent=email_sent,
        )


# ============================================================================
# LOCALE
# ============================================================================

class LocaleEntry(ResponseModel):
    code: str
    name: str


class CountryListResponse(ResponseModel):
    language: str
    count: int
    countries: List[LocaleEntry] = Field(default_factory=list)


class StateProvinceEntry(ResponseModel):
    code: str
    name: str
    country: str
    culture: str


class StateProvinceListResponse(ResponseModel):
    country: str
    culture: str
    count: int
    state_provinces: List[StateProvinceEntry] = Field(default_factory=list)


class CountryStateProvinces(ResponseModel):
    country: str
    culture: str
    state_provinces: List[StateProvinceEntry] = Field(default_factory=list)


class StateProvincesByCultureResponse(ResponseModel):
    culture: str
    total_count: int
    data: List[CountryStateProvinces] = Field(default_factory=list)


__all__ = [
    "ResponseModel",
    "ErrorResponse",
    "DomainRegistrationResponse",
    "CompletionStepsResponse",
    "CompletedRegistrationResponse",
    "TestimonialListResponse",
    "LeadResponse",
    "ReferralCreatedResponse",
    "ReferralStatsResponse",
    "AssignedExperiment",
    "ExperimentsResponse",
    "PlatformStatsResponse",
    "WikipediaPersonResponse",
    "SubscriptionSummary",
    "SubscriptionListResponse",
    "CustomerResponse",
    "SubscriptionCreatedResponse",
    "SubscriptionUpdatedResponse",
    "SubscriptionCanceledResponse",
    "InvoiceLineResponse",
    "InvoicePreviewResponse",
    "CheckoutSessionCreatedResponse",
    "CheckoutSessionResponse",
    "PriceResponse",
    "PriceListResponse",
    "StripeHealthResponse",
    "WebhookReceivedResponse",
    "AuthorInvitationResponse",
    "LocaleEntry",
    "CountryListResponse",
    "StateProvinceEntry",
    "StateProvinceListResponse",
    "CountryStateProvinces",
    "StateProvincesByCultureResponse",
]
