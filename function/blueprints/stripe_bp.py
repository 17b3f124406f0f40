# ============================================================================
# STRIPE BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Billing
# PURPOSE: Stripe customers, subscription lifecycle, checkout and webhooks
# CREATED: 17 OCT 2026
# ============================================================================
"""
Stripe Blueprint

- POST   /api/stripe/customers - Find or create the caller's Stripe customer and link it
- GET    /api/stripe/subscriptions - Caller's subscriptions (empty without a customer)
- POST   /api/stripe/subscriptions - Subscribe the linked customer to a price
- PUT    /api/stripe/subscriptions/{subscriptionId} - Change plan, quantity or period-end cancellation
- POST   /api/stripe/subscriptions/{subscriptionId}/cancel - Cancel now
- POST   /api/stripe/invoices/preview - Upcoming invoice, optionally for a plan change
- POST   /api/stripe/checkout-sessions - Embedded subscription checkout
- GET    /api/stripe/checkout-sessions/{sessionId} - Checkout session status
- POST   /api/stripe/prices - Price catalog
- POST   /api/stripe/webhook - Stripe event intake (signature checked, anonymous)
- GET    /api/stripe/health - Stripe mode and key presence (anonymous)
"""

import logging

import azure.functions as func

from function.auth.guard import authenticate_with_profile
from function.clients.stripe_client import StripeClient
from function.config import get_config
from function.http import error_response, exception_response, json_response, read_json
from function.models.requests import (
    CancelSubscriptionRequest,
    CreateCheckoutSessionRequest,
    CreateCustomerRequest,
    CreateSubscriptionRequest,
    InvoicePreviewRequest,
    PriceListRequest,
    UpdateSubscriptionRequest,
)
from function.models.responses import (
    CustomerResponse,
    StripeHealthResponse,
    SubscriptionListResponse,
    SubscriptionSummary,
    WebhookReceivedResponse,
)
from function.services.billing_service import BillingService
from function.services.stripe_webhook import MISSING_SECRET_MESSAGE, StripeWebhookHandler
from function.services.user_profile_service import UserProfileService

logger = logging.getLogger(__name__)
stripe_bp = func.Blueprint()


@stripe_bp.route(route="stripe/customers", methods=["POST"])
def create_stripe_customer(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/stripe/customers
    Body: {"email": "...", "name": "..."}

    Idempotent per profile: an already linked customer id is returned as is.
    """
    user, profile, error = authenticate_with_profile(req)
    if error:
        return error

    try:
        request = CreateCustomerRequest.model_validate(read_json(req))
        if profile.stripe_customer_id:
            return json_response(CustomerResponse(customer_id=profile.stripe_customer_id))

        stripe = StripeClient()
        customer_id = stripe.find_customer_by_email(request.email)
        if customer_id is None:
            customer_id = stripe.create_customer(request.email, request.name)
        UserProfileService().link_stripe_customer(profile, customer_id)

        logger.info(f"Stripe customer {customer_id} linked for {user.upn}")
        return json_response(CustomerResponse(customer_id=customer_id))
    except Exception as e:
        return exception_response(e, "create Stripe customer")


@stripe_bp.route(route="stripe/subscriptions", methods=["GET"])
def list_stripe_subscriptions(req: func.HttpRequest) -> func.HttpResponse:
    _, profile, error = authenticate_with_profile(req)
    if error:
        return error

    if not profile.stripe_customer_id:
        return json_response(SubscriptionListResponse())

    try:
        body = StripeClient().list_subscriptions(profile.stripe_customer_id)
        response = SubscriptionListResponse(
            subscriptions=[SubscriptionSummary(**StripeClient.summarize(s)) for s in body.get("data") or []],
            has_more=bool(body.get("has_more")),
        )
        return json_response(response)
    except Exception as e:
        return exception_response(e, "list Stripe subscriptions")


def _optional_json(req: func.HttpRequest) -> dict:
    """Body for endpoints where every field is optional."""
    return read_json(req) if req.get_body() else {}


@stripe_bp.route(route="stripe/subscriptions", methods=["POST"])
def create_stripe_subscription(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/stripe/subscriptions
    Body: {"priceId": "price_..."}

    Returns {subscriptionId, clientSecret}; the subscription stays
    incomplete until the client confirms payment with the secret.
    """
    user, profile, error = authenticate_with_profile(req)
    if error:
        return error

    try:
        request = CreateSubscriptionRequest.model_validate(read_json(req))
        response = BillingService().create_subscription(profile, request)
        logger.info(f"{user.upn} started subscription {response.subscription_id}")
        return json_response(response)
    except Exception as e:
        return exception_response(e, "create Stripe subscription")


@stripe_bp.route(route="stripe/subscriptions/{subscriptionId}", methods=["PUT"])
def update_stripe_subscription(req: func.HttpRequest) -> func.HttpResponse:
    _, profile, error = authenticate_with_profile(req)
    if error:
        return error

    subscription_id = req.route_params.get("subscriptionId")
    try:
        request = UpdateSubscriptionRequest.model_validate(read_json(req))
        return json_response(BillingService().update_subscription(profile, subscription_id, request))
    except Exception as e:
        return exception_response(e, f"update Stripe subscription {subscription_id}")


@stripe_bp.route(route="stripe/subscriptions/{subscriptionId}/cancel", methods=["POST"])
def cancel_stripe_subscription(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/stripe/subscriptions/{subscriptionId}/cancel
    Body (optional): {"invoiceNow": bool, "prorate": bool}
    """
    _, profile, error = authenticate_with_profile(req)
    if error:
        return error

    subscription_id = req.route_params.get("subscriptionId")
    try:
        request = CancelSubscriptionRequest.model_validate(_optional_json(req))
        return json_response(BillingService().cancel_subscription(profile, subscription_id, request))
    except Exception as e:
        return exception_response(e, f"cancel Stripe subscription {subscription_id}")


@stripe_bp.route(route="stripe/invoices/preview", methods=["POST"])
def preview_stripe_invoice(req: func.HttpRequest) -> func.HttpResponse:
    _, profile, error = authenticate_with_profile(req)
    if error:
        return error

    try:
        request = InvoicePreviewRequest.model_validate(_optional_json(req))
        return json_response(BillingService().preview_invoice(profile, request))
    except Exception as e:
        return exception_response(e, "preview Stripe invoice")


@stripe_bp.route(route="stripe/checkout-sessions", methods=["POST"])
def create_stripe_checkout_session(req: func.HttpRequest) -> func.HttpResponse:
    _, profile, error = authenticate_with_profile(req)
    if error:
        return error

    try:
        request = CreateCheckoutSessionRequest.model_validate(read_json(req))
        return json_response(BillingService().create_checkout_session(profile, request))
    except Exception as e:
        return exception_response(e, "create Stripe checkout session")


@stripe_bp.route(route="stripe/checkout-sessions/{sessionId}", methods=["GET"])
def get_stripe_checkout_session(req: func.HttpRequest) -> func.HttpResponse:
    _, profile, error = authenticate_with_profile(req)
    if error:
        return error

    session_id = req.route_params.get("sessionId")
    try:
        return json_response(BillingService().get_checkout_session(profile, session_id))
    except Exception as e:
        return exception_response(e, f"get Stripe checkout session {session_id}")


@stripe_bp.route(route="stripe/prices", methods=["POST"])
def list_stripe_prices(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/stripe/prices
    Body (optional): {"active": bool, "productId", "currency", "limit": 1-100, "includeProductDetails": bool}
    """
    _, _, error = authenticate_with_profile(req)
    if error:
        return error

    try:
        request = PriceListRequest.model_validate(_optional_json(req))
        return json_response(BillingService().list_prices(request))
    except Exception as e:
        return exception_response(e, "list Stripe prices")


@stripe_bp.route(route="stripe/webhook", methods=["POST"])
def stripe_webhook(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/stripe/webhook

    Anonymous: the Stripe-Signature header is the credential. A bad
    delivery gets 400 so Stripe records the failure; a missing secret is
    a server fault (500) and Stripe retries later.
    """
    result = StripeWebhookHandler().handle(req.get_body(), req.headers.get("Stripe-Signature"))
    if not result.success:
        status = 500 if result.message == MISSING_SECRET_MESSAGE else 400
        return error_response(result.message, status)
    return json_response(WebhookReceivedResponse(event_type=result.event_type, message=result.message))


@stripe_bp.route(route="stripe/health", methods=["GET"])
def stripe_health(req: func.HttpRequest) -> func.HttpResponse:
    config = get_config()
    response = StripeHealthResponse(
        stripe_mode=config.stripe_mode,
        stripe_connected=config.has_stripe_config,
        version=config.version,
    )
    logger.info(f"Stripe health: mode={response.stripe_mode}, connected={response.stripe_connected}")
    return json_response(response)
