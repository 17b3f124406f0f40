# ============================================================================
# BILLING SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Stripe subscription lifecycle
# PURPOSE: Subscribe, change, cancel, preview and check out for the caller
# CREATED: 18 OCT 2026
# ============================================================================
"""
Billing Service

Every operation acts for the caller's linked Stripe customer (the profile's
stripeCustomerId, set by POST /api/stripe/customers). A caller without a
linked customer gets a 400 asking them to link one first.

Subscriptions and checkout sessions are looked up before they are changed
or returned; one that belongs to another customer is reported as not
found, so one account cannot learn about another account's ids.
"""

import logging
from typing import Any, Dict, Optional

from core.errors import NotFoundError, UpstreamError, ValidationError
from core.models import UserProfile
from function.clients.stripe_client import StripeClient
from function.models.requests import (
    CancelSubscriptionRequest,
    CreateCheckoutSessionRequest,
    CreateSubscriptionRequest,
    InvoicePreviewRequest,
    PriceListRequest,
    UpdateSubscriptionRequest,
)
from function.models.responses import (
    CheckoutSessionCreatedResponse,
    CheckoutSessionResponse,
    InvoiceLineResponse,
    InvoicePreviewResponse,
    PriceListResponse,
    PriceResponse,
    SubscriptionCanceledResponse,
    SubscriptionCreatedResponse,
    SubscriptionUpdatedResponse,
)

logger = logging.getLogger(__name__)

NO_CUSTOMER_MESSAGE = "No Stripe customer is linked to this account"


def _customer_of(value: Any) -> Optional[str]:
    """Customer id from a Stripe object field that may be expanded."""
    if isinstance(value, dict):
        return value.get("id")
    return value


def _id_of(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("id") or ""
    return value or ""


class BillingService:
    """Stripe billing on behalf of one signed-in user."""

    def __init__(self, stripe: Optional[StripeClient] = None):
        self._stripe = stripe or StripeClient()

    @staticmethod
    def _customer_id(profile: UserProfile) -> str:
        if not profile.stripe_customer_id:
            raise ValidationError(NO_CUSTOMER_MESSAGE, field="stripeCustomerId")
        return profile.stripe_customer_id

    def _owned_subscription(self, profile: UserProfile, subscription_id: str) -> Dict[str, Any]:
        customer_id = self._customer_id(profile)
        subscription = self._stripe.get_subscription(subscription_id)
        if subscription is None or _customer_of(subscription.get("customer")) != customer_id:
            if subscription is not None:
                logger.warning(f"{profile.upn} asked for subscription {subscription_id} of another customer")
            raise NotFoundError("Subscription not found", f"No subscription '{subscription_id}' for this account")
        return subscription

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def create_subscription(self, profile: UserProfile, request: CreateSubscriptionRequest) -> SubscriptionCreatedResponse:
        """
        Start a subscription that is paid client-side with the returned secret.

        Raises:
            ValidationError: no linked customer
            UpstreamError: Stripe failed, or returned no payable invoice
        """
        customer_id = self._customer_id(profile)
        subscription = self._stripe.create_subscription(customer_id, request.price_id)
        client_secret = StripeClient.invoice_client_secret(subscription)
        if not client_secret:
            logger.error(f"Subscription {subscription.get('id')} came back without a payable invoice")
            raise UpstreamError(
                "Stripe error",
                f"Subscription {subscription.get('id')} has no latest invoice to pay",
                StripeClient.service_name,
            )
        return SubscriptionCreatedResponse(subscription_id=subscription["id"], client_secret=client_secret)

    def update_subscription(
        self,
        profile: UserProfile,
        subscription_id: str,
        request: UpdateSubscriptionRequest,
    ) -> SubscriptionUpdatedResponse:
        self._owned_subscription(profile, subscription_id)
        updated = self._stripe.update_subscription(
            subscription_id,
            cancel_at_period_end=request.cancel_at_period_end,
            proration_behavior=request.proration_behavior,
            subscription_item_id=request.subscription_item_id,
            price_id=request.price_id,
            quantity=request.quantity,
            expand_latest_invoice=request.expand_latest_invoice_payment_intent,
        )
        return SubscriptionUpdatedResponse(
            subscription_id=updated.get("id") or subscription_id,
            status=updated.get("status") or "",
            latest_invoice_id=_id_of(updated.get("latest_invoice")),
            client_secret=StripeClient.invoice_client_secret(updated),
        )

    def cancel_subscription(
        self,
        profile: UserProfile,
        subscription_id: str,
        request: CancelSubscriptionRequest,
    ) -> SubscriptionCanceledResponse:
        self._owned_subscription(profile, subscription_id)
        canceled = self._stripe.cancel_subscription(
            subscription_id, invoice_now=request.invoice_now, prorate=request.prorate,
        )
        logger.info(f"{profile.upn} canceled subscription {subscription_id}")
        return SubscriptionCanceledResponse(
            subscription_id=canceled.get("id") or subscription_id,
            status=canceled.get("status") or "",
            canceled_at=canceled.get("canceled_at"),
        )

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def preview_invoice(self, profile: UserProfile, request: InvoicePreviewRequest) -> InvoicePreviewResponse:
        customer_id = self._customer_id(profile)
        if request.subscription_id:
            self._owned_subscription(profile, request.subscription_id)

        invoice = self._stripe.preview_invoice(
            customer_id,
            subscription_id=request.subscription_id,
            currency=request.currency,
            proration_behavior=request.proration_behavior,
            subscription_item_id=request.subscription_item_id,
            price_id=request.price_id,
            quantity=request.quantity,
        )
        currency = invoice.get("currency") or ""
        lines = [
            InvoiceLineResponse(
                description=line.get("description") or "",
                quantity=line.get("quantity") or 0,
                amount=line.get("amount") or 0,
                currency=line.get("currency") or currency,
                price_id=StripeClient.line_price_id(line),
            )
            for line in (invoice.get("lines") or {}).get("data") or []
        ]
        return InvoicePreviewResponse(
            # Previews have no id until finalized
            invoice_id=invoice.get("id") or "",
            currency=currency,
            amount_due=invoice.get("amount_due") or 0,
            subtotal=invoice.get("subtotal") or 0,
            total=invoice.get("total") or 0,
            lines=lines,
        )

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def create_checkout_session(
        self,
        profile: UserProfile,
        request: CreateCheckoutSessionRequest,
    ) -> CheckoutSessionCreatedResponse:
        customer_id = self._customer_id(profile)
        session = self._stripe.create_checkout_session(customer_id, request.price_id, request.domain)
        return CheckoutSessionCreatedResponse(
            checkout_session_id=session.get("id") or "",
            client_secret=session.get("client_secret") or "",
        )

    def get_checkout_session(self, profile: UserProfile, session_id: str) -> CheckoutSessionResponse:
        customer_id = self._customer_id(profile)
        session = self._stripe.get_checkout_session(session_id)
        if session is None or _customer_of(session.get("customer")) != customer_id:
            raise NotFoundError("Checkout session not found")
        return CheckoutSessionResponse(
            checkout_session_id=session.get("id") or session_id,
            status=session.get("status") or "",
            payment_status=session.get("payment_status") or "",
            customer_id=customer_id,
            mode=session.get("mode") or "",
            url=session.get("url") or "",
        )

    # ------------------------------------------------------------------
    # Prices
    # ------------------------------------------------------------------

    def list_prices(self, request: PriceListRequest) -> PriceListResponse:
        body = self._stripe.list_prices(
            active=request.active,
            product_id=request.product_id,
            currency=request.currency,
            limit=request.limit,
            include_product_details=request.include_product_details,
        )
        raw = body.get("data") or []
        prices = [PriceResponse(**StripeClient.price_summary(p)) for p in raw]
        if request.active is True:
            # An active price on an archived product is not purchasable
            prices = [p for p in prices if p.active and p.product_active]
        elif request.active is False:
            prices = [p for p in prices if not p.active]

        logger.info(f"Returning {len(prices)} of {len(raw)} Stripe prices (active={request.active})")
        return PriceListResponse(
            prices=prices,
            has_more=bool(body.get("has_more")),
            last_id=raw[-1].get("id", "") if raw else "",
        )


__all__ = ["BillingService", "NO_CUSTOMER_MESSAGE"]
