# ============================================================================
# STRIPE WEBHOOK HANDLER
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Stripe event intake
# PURPOSE: Verify Stripe-Signature and classify billing events
# CREATED: 18 OCT 2026
# ============================================================================
"""
Stripe Webhook Handler

Signature scheme (Stripe-Signature header):
    t=<unix seconds>,v1=<hex hmac>[,v1=<hex hmac>...]
    expected = HMAC-SHA256(secret, f"{t}.{raw body}")
A request verifies when any v1 matches and |now - t| <= 300 seconds.

Verification runs over the raw body bytes; parsing first and re-encoding
would change them.

Handled event types are logged with their object, customer and price ids.
Anything else is acknowledged as unhandled so Stripe stops retrying it.
"""

import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.logging import log_checkpoint, log_context
from function.clients.stripe_client import StripeClient
from function.config import FunctionConfig, get_config

logger = logging.getLogger(__name__)

SIGNATURE_TOLERANCE_SECONDS = 300

HANDLED_EVENTS = frozenset({
    "invoice.paid",
    "invoice.payment_failed",
    "invoice.finalized",
    "customer.subscription.deleted",
    "customer.subscription.trial_will_end",
})

MISSING_SECRET_MESSAGE = "Webhook secret not configured"


@dataclass
class WebhookResult:
    success: bool
    message: str
    event_type: str = ""
    object_id: str = ""
    customer_id: str = ""
    price_id: str = ""


def parse_signature_header(header: str) -> Tuple[Optional[int], List[str]]:
    """(timestamp, v1 signatures) from a Stripe-Signature header."""
    timestamp: Optional[int] = None
    signatures: List[str] = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        key = key.lower()
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                return None, []
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def compute_signature(payload: bytes, timestamp: int, secret: str) -> str:
    signed = f"{timestamp}.".encode("utf-8") + payload
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def verify_signature(
    payload: bytes,
    header: str,
    secret: str,
    now: float,
    tolerance: int = SIGNATURE_TOLERANCE_SECONDS,
) -> bool:
    timestamp, signatures = parse_signature_header(header)
    if timestamp is None or not signatures:
        return False
    if abs(now - timestamp) > tolerance:
        logger.warning(f"Stripe signature timestamp {timestamp} outside {tolerance}s tolerance")
        return False
    expected = compute_signature(payload, timestamp, secret)
    return any(hmac.compare_digest(expected, candidate) for candidate in signatures)


def _customer_id(obj: Dict[str, Any]) -> str:
    customer = obj.get("customer")
    if isinstance(customer, dict):
        return customer.get("id") or ""
    return customer or ""


def _price_id(obj: Dict[str, Any]) -> str:
    """First price on an invoice (lines) or a subscription (items)."""
    for collection in ("lines", "items"):
        rows = (obj.get(collection) or {}).get("data") or []
        if rows:
            return StripeClient.line_price_id(rows[0])
    return ""


class StripeWebhookHandler:
    """Verifies and classifies one webhook delivery."""

    def __init__(self, config: Optional[FunctionConfig] = None, clock: Callable[[], float] = time.time):
        self._config = config or get_config()
        self._clock = clock

    def handle(self, payload: Optional[bytes], signature_header: Optional[str]) -> WebhookResult:
        if not payload or not payload.strip():
            return WebhookResult(False, "Empty payload")
        if not signature_header or not signature_header.strip():
            return WebhookResult(False, "Missing Stripe-Signature header")

        secret = self._config.stripe_webhook_secret
        if not secret:
            logger.warning("Stripe webhook received but STRIPE_WEBHOOK_SECRET is not set")
            return WebhookResult(False, MISSING_SECRET_MESSAGE)

        if not verify_signature(payload, signature_header, secret, self._clock()):
            logger.warning("Stripe webhook rejected: invalid signature")
            return WebhookResult(False, "Invalid signature")

        try:
            event = json.loads(payload)
        except ValueError as e:
            logger.error(f"Stripe webhook payload is not JSON: {e}")
            return WebhookResult(False, "Invalid JSON payload")
        if not isinstance(event, dict):
            return WebhookResult(False, "Invalid JSON payload")

        return self._dispatch(event)

    def _dispatch(self, event: Dict[str, Any]) -> WebhookResult:
        event_type = event.get("type") or ""
        obj = (event.get("data") or {}).get("object") or {}
        object_id = obj.get("id") or ""
        result = WebhookResult(
            success=True,
            message="",
            event_type=event_type,
            object_id=object_id,
            customer_id=_customer_id(obj),
            price_id=_price_id(obj),
        )

        with log_context(operation="stripe_webhook", extra={"stripe_event": event.get("id")}):
            if event_type in HANDLED_EVENTS:
                result.message = f"{event_type}: {object_id}"
                log_checkpoint(event_type, {
                    "object_id": object_id,
                    "customer_id": result.customer_id,
                    "price_id": result.price_id,
                }, logger)
                if event_type == "invoice.payment_failed":
                    logger.warning(f"Stripe invoice payment failed: {object_id} (customer {result.customer_id})")
            else:
                result.message = f"Unhandled: {event_type}" if event_type else "Processed"
                logger.info(f"Stripe webhook: unhandled event {event_type or '?'} for {object_id or '?'}")

        return result


__all__ = [
    "StripeWebhookHandler",
    "WebhookResult",
    "compute_signature",
    "parse_signature_header",
    "verify_signature",
    "SIGNATURE_TOLERANCE_SECONDS",
    "HANDLED_EVENTS",
    "MISSING_SECRET_MESSAGE",
]
