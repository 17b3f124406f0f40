# ============================================================================
# STRIPE CLIENT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Stripe REST API
# PURPOSE: Customers, subscription lifecycle, checkout and prices for billing
# CREATED: 17 OCT 2026
# ============================================================================
"""
Stripe Client

Form-encoded REST against https://api.stripe.com/v1 with the secret key
as bearer credential. Every failure raises UpstreamError (502); lookups
of a single object return None when Stripe answers 404.

Nested form fields use Stripe's bracket syntax, e.g. items[0][price].
Object ids become URL path segments, so they are checked against
STRIPE_ID_RE before any request.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.errors import UpstreamError, ValidationError
from function.clients.base import UpstreamClient
from function.config import FunctionConfig, get_config

logger = logging.getLogger(__name__)

STRIPE_BASE_URL = "https://api.stripe.com/v1"
# Pinned so expansions and response shapes do not follow the account default
STRIPE_API_VERSION = "2025-03-31.basil"
ACTIVE_SUBSCRIPTION_STATUSES = ("active", "trialing")
STRIPE_ID_RE = re.compile(r"[A-Za-z0-9_]{3,255}")
DEFAULT_PRICE_LIMIT = 100


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset and blank form fields."""
    return {k: v for k, v in data.items() if v is not None and v != ""}


class StripeClient(UpstreamClient):
    """Sync client for the subset of Stripe the platform uses."""

    service_name = "Stripe"

    def __init__(self, config: Optional[FunctionConfig] = None, **kwargs):
        super().__init__(**kwargs)
        self._config = config or get_config()

    @staticmethod
    def _object_path(collection: str, object_id: str) -> str:
        if not STRIPE_ID_RE.fullmatch(object_id or ""):
            raise ValidationError(f"Invalid Stripe id: '{object_id}'")
        return f"/{collection}/{object_id}"

    def _call(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
              data: Optional[Dict[str, Any]] = None, missing_ok: bool = False) -> Optional[Dict[str, Any]]:
        self._require(self._config.has_stripe_config, "STRIPE_API_KEY")
        resp = self._request(
            method,
            f"{STRIPE_BASE_URL}{path}",
            params=params,
            data=data,
            headers={
                "Authorization": f"Bearer {self._config.stripe_api_key}",
                "Stripe-Version": STRIPE_API_VERSION,
            },
        )
        if missing_ok and resp.status_code == 404:
            logger.info(f"Stripe {method} {path}: not found")
            return None
        body = self._json(resp)
        if not resp.is_success:
            message = (body.get("error") or {}).get("message") if isinstance(body, dict) else None
            logger.error(f"Stripe {method} {path} failed: HTTP {resp.status_code}: {message}")
            raise UpstreamError("Stripe error", message or f"HTTP {resp.status_code}", self.service_name)
        return body

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def find_customer_by_email(self, email: str) -> Optional[str]:
        body = self._call("GET", "/customers", params={"email": email, "limit": 1})
        customers = body.get("data") or []
        return customers[0]["id"] if customers else None

    def create_customer(self, email: str, name: Optional[str] = None) -> str:
        data = {"email": email}
        if name:
            data["name"] = name
        body = self._call("POST", "/customers", data=data)
        logger.info(f"Created Stripe customer {body['id']}")
        return body["id"]

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def list_subscriptions(self, customer_id: str, status: str = "all", limit: int = 100) -> Dict[str, Any]:
        """Raw subscription list: {"data": [...], "has_more": bool}."""
        return self._call(
            "GET",
            "/subscriptions",
            params={"customer": customer_id, "status": status, "limit": limit},
        )

    def has_active_subscription(self, customer_id: Optional[str]) -> bool:
        """True if the customer has any subscription in status active or trialing."""
        if not customer_id:
            return False
        subscriptions = self.list_subscriptions(customer_id).get("data") or []
        return any(s.get("status") in ACTIVE_SUBSCRIPTION_STATUSES for s in subscriptions)

    def get_subscription(self, subscription_id: str) -> Optional[Dict[str, Any]]:
        return self._call("GET", self._object_path("subscriptions", subscription_id), missing_ok=True)

    def create_subscription(self, customer_id: str, price_id: str) -> Dict[str, Any]:
        """
        Start an incomplete subscription awaiting its first payment.

        The latest invoice's confirmation secret is expanded so the
        caller can confirm the payment client-side.
        """
        body = self._call("POST", "/subscriptions", data={
            "customer": customer_id,
            "items[0][price]": price_id,
            "payment_behavior": "default_incomplete",
            "expand[]": ["latest_invoice.confirmation_secret"],
        })
        logger.info(f"Created Stripe subscription {body.get('id')} for {customer_id} on {price_id}")
        return body

    def update_subscription(
        self,
        subscription_id: str,
        cancel_at_period_end: Optional[bool] = None,
        proration_behavior: Optional[str] = None,
        subscription_item_id: Optional[str] = None,
        price_id: Optional[str] = None,
        quantity: Optional[int] = None,
        expand_latest_invoice: bool = False,
    ) -> Dict[str, Any]:
        """Change plan, quantity or period-end cancellation of a subscription."""
        data: Dict[str, Any] = {
            "cancel_at_period_end": None if cancel_at_period_end is None else _flag(cancel_at_period_end),
            "proration_behavior": proration_behavior,
        }
        if subscription_item_id or price_id:
            data["items[0][id]"] = subscription_item_id
            data["items[0][price]"] = price_id
            data["items[0][quantity]"] = quantity
        if expand_latest_invoice:
            data["expand[]"] = ["latest_invoice.confirmation_secret"]

        body = self._call("POST", self._object_path("subscriptions", subscription_id), data=_compact(data))
        logger.info(f"Updated Stripe subscription {subscription_id} -> {body.get('status')}")
        return body

    def cancel_subscription(
        self,
        subscription_id: str,
        invoice_now: Optional[bool] = None,
        prorate: Optional[bool] = None,
    ) -> Dict[str, Any]:
        params = _compact({
            "invoice_now": None if invoice_now is None else _flag(invoice_now),
            "prorate": None if prorate is None else _flag(prorate),
        })
        body = self._call("DELETE", self._object_path("subscriptions", subscription_id), params=params or None)
        logger.info(f"Canceled Stripe subscription {subscription_id}")
        return body

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def preview_invoice(
        self,
        customer_id: str,
        subscription_id: Optional[str] = None,
        currency: Optional[str] = None,
        proration_behavior: Optional[str] = None,
        subscription_item_id: Optional[str] = None,
        price_id: Optional[str] = None,
        quantity: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Upcoming invoice for a customer, optionally with a proposed plan change."""
        data: Dict[str, Any] = {
            "customer": customer_id,
            "subscription": subscription_id,
            "currency": currency,
            "subscription_details[proration_behavior]": proration_behavior,
        }
        if subscription_item_id or price_id:
            data["subscription_details[items][0][id]"] = subscription_item_id
            data["subscription_details[items][0][price]"] = price_id
            data["subscription_details[items][0][quantity]"] = quantity
        return self._call("POST", "/invoices/create_preview", data=_compact(data))

    # ------------------------------------------------------------------
    # Checkout sessions
    # ------------------------------------------------------------------

    def create_checkout_session(self, customer_id: str, price_id: str, domain: str) -> Dict[str, Any]:
        """Embedded subscription checkout for one price; the author's domain rides along as metadata."""
        body = self._call("POST", "/checkout/sessions", data={
            "mode": "subscription",
            "ui_mode": "embedded",
            "redirect_on_completion": "never",
            "customer": customer_id,
            "line_items[0][price]": price_id,
            "line_items[0][quantity]": 1,
            "metadata[domain]": domain,
        })
        logger.info(f"Created Stripe checkout session {body.get('id')} for {customer_id}")
        return body

    def get_checkout_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        return self._call("GET", self._object_path("checkout/sessions", session_id), missing_ok=True)

    # ------------------------------------------------------------------
    # Prices
    # ------------------------------------------------------------------

    def list_prices(
        self,
        active: Optional[bool] = None,
        product_id: Optional[str] = None,
        currency: Optional[str] = None,
        limit: int = DEFAULT_PRICE_LIMIT,
        include_product_details: bool = True,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = _compact({
            "active": None if active is None else _flag(active),
            "product": product_id,
            "currency": currency,
            "limit": limit,
        })
        # Product details are needed to apply the product-level active filter
        if include_product_details or active is not None:
            params["expand[]"] = ["data.product"]
        return self._call("GET", "/prices", params=params)

    # ------------------------------------------------------------------
    # Response shaping
    # ------------------------------------------------------------------

    @staticmethod
    def summarize(subscription: Dict[str, Any]) -> Dict[str, Any]:
        """id, status, current period end and first price id of a subscription."""
        items: List[Dict[str, Any]] = (subscription.get("items") or {}).get("data") or []
        first = items[0] if items else {}
        return {
            "id": subscription.get("id"),
            "status": subscription.get("status"),
            # Newer API versions report the period on the item
            "current_period_end": subscription.get("current_period_end") or first.get("current_period_end"),
            "price_id": (first.get("price") or {}).get("id"),
        }

    @staticmethod
    def invoice_client_secret(subscription: Dict[str, Any]) -> Optional[str]:
        """Client secret for paying the subscription's latest invoice, if one was expanded."""
        invoice = subscription.get("latest_invoice")
        if not isinstance(invoice, dict):
            return None
        secret = (invoice.get("confirmation_secret") or {}).get("client_secret")
        if secret:
            return secret
        payment_intent = invoice.get("payment_intent")
        return payment_intent.get("client_secret") if isinstance(payment_intent, dict) else None

    @staticmethod
    def line_price_id(line: Dict[str, Any]) -> str:
        price = line.get("price")
        if isinstance(price, dict) and price.get("id"):
            return price["id"]
        details = (line.get("pricing") or {}).get("price_details") or {}
        return details.get("price") or ""

    @staticmethod
    def price_summary(price: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten a price and its (possibly expanded) product."""
        product = price.get("product")
        expanded = product if isinstance(product, dict) else {}
        recurring = price.get("recurring") or {}
        created = price.get("created")
        return {
            "id": price.get("id", ""),
            "product_id": expanded.get("id", "") if expanded else (product or ""),
            "product_name": expanded.get("name") or "",
            "product_description": expanded.get("description") or "",
            "unit_amount": price.get("unit_amount"),
            "currency": price.get("currency") or "",
            "active": bool(price.get("active")),
            "product_active": bool(expanded.get("active")),
            "nickname": price.get("nickname") or "",
            "lookup_key": price.get("lookup_key") or "",
            "type": price.get("type") or "",
            "is_recurring": bool(recurring),
            "recurring_interval": recurring.get("interval") or "",
            "recurring_interval_count": recurring.get("interval_count"),
            "created_date": datetime.fromtimestamp(created, tz=timezone.utc) if created else None,
        }


__all__ = ["StripeClient", "ACTIVE_SUBSCRIPTION_STATUSES", "STRIPE_API_VERSION", "STRIPE_ID_RE"]
