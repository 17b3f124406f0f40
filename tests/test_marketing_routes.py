# ============================================================================
# MARKETING AND INTEGRATION ROUTE TESTS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Tests - Public site endpoints and integration proxies
# PURPOSE: Verify status codes, cache headers and auth on each route
# CREATED: 18 OCT 2026
# ============================================================================
"""
Marketing and Integration Route Tests

Repositories, services and clients are patched where each blueprint
imports them.

Run with:
    pytest tests/test_marketing_routes.py -v
"""

import json
import time
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from core.errors import ConfigurationError, ConflictError, NotFoundError, UpstreamError
from core.models import Author, Lead, PlatformStats, Testimonial
from function.blueprints.author_bp import get_authors_by_domain, get_sitemap
from function.blueprints.experiment_bp import get_experiments
from function.blueprints.integrations_bp import (
    get_penguin_titles,
    get_whmcs_tld_pricing,
    get_wikipedia_person,
    search_amazon_books,
    search_penguin_authors,
)
from function.blueprints.lead_bp import create_lead
from function.blueprints.referral_bp import create_referral, get_referral_stats
from function.blueprints.stats_bp import get_platform_stats
from function.blueprints.stripe_bp import (
    cancel_stripe_subscription,
    create_stripe_customer,
    create_stripe_subscription,
    get_stripe_checkout_session,
    list_stripe_prices,
    list_stripe_subscriptions,
    preview_stripe_invoice,
    stripe_health,
    stripe_webhook,
    update_stripe_subscription,
)
from function.blueprints.testimonial_bp import (
    create_testimonial,
    delete_testimonial,
    list_testimonials,
    update_testimonial,
)
from function.models.responses import (
    AssignedExperiment,
    ExperimentsResponse,
    ReferralCreatedResponse,
    ReferralStatsResponse,
    SubscriptionCanceledResponse,
    SubscriptionCreatedResponse,
    SubscriptionUpdatedResponse,
)
from function.services.billing_service import NO_CUSTOMER_MESSAGE
from function.services.lead_service import RATE_LIMIT_MESSAGE
from function.services.stripe_webhook import compute_signature
from tests.helpers import body_of, call, make_registration, make_request

TESTIMONIAL_REPO = "function.blueprints.testimonial_bp.TestimonialRepository"


def _testimonial(**overrides):
    values = dict(author_name="Jane Doe", quote="Best platform for authors.", rating=5, locale="en-US")
    values.update(overrides)
    return Testimonial(**values)


# ============================================================================
# TESTIMONIALS
# ============================================================================

class TestTestimonialRoutes:

    def test_list_defaults(self):
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.list_testimonials.return_value = ([_testimonial()], 7)
            resp = call(list_testimonials, make_request("GET", "/api/testimonials"))

        assert resp.status_code == 200
        assert resp.headers["Cache-Control"] == "public, max-age=900"
        body = body_of(resp)
        assert body["total"] == 7
        assert body["testimonials"][0]["authorName"] == "Jane Doe"
        repo.return_value.list_testimonials.assert_called_once_with(limit=5, featured=None, locale=None)

    @pytest.mark.parametrize("limit,expected", [("3", 3), ("50", 20), ("0", 5), ("abc", 5)])
    def test_limit_bounds(self, limit, expected):
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.list_testimonials.return_value = ([], 0)
            call(list_testimonials, make_request("GET", "/api/testimonials", params={"limit": limit}))
        assert repo.return_value.list_testimonials.call_args.kwargs["limit"] == expected

    def test_filters(self):
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.list_testimonials.return_value = ([], 0)
            req = make_request("GET", "/api/testimonials", params={"featured": "true", "locale": "es-MX"})
            call(list_testimonials, req)
        repo.return_value.list_testimonials.assert_called_once_with(limit=5, featured=True, locale="es-MX")

    def test_create_requires_admin(self, user):
        req = make_request("POST", "/api/testimonials", body={"authorName": "A", "quote": "Q"}, token=user)
        assert call(create_testimonial, req).status_code == 403

    def test_create(self, admin):
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.create.side_effect = lambda t: t
            req = make_request("POST", "/api/testimonials", body={"authorName": "A", "quote": "Q", "rating": 4}, token=admin)
            resp = call(create_testimonial, req)
        assert resp.status_code == 201
        assert body_of(resp)["rating"] == 4
        assert body_of(resp)["locale"] == "en-US"

    def test_create_rating_out_of_range(self, admin):
        req = make_request("POST", "/api/testimonials", body={"authorName": "A", "quote": "Q", "rating": 6}, token=admin)
        assert call(create_testimonial, req).status_code == 400

    def test_update_same_locale(self, admin):
        existing = _testimonial()
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.find.return_value = existing
            repo.return_value.replace.side_effect = lambda t: t
            req = make_request(
                "PUT", f"/api/testimonials/{existing.id}", route_params={"id": existing.id},
                body={"authorName": "Jane D.", "quote": "Updated"}, token=admin,
            )
            resp = call(update_testimonial, req)

        assert resp.status_code == 200
        body = body_of(resp)
        assert body["id"] == existing.id
        assert body["quote"] == "Updated"
        repo.return_value.delete.assert_not_called()

    def test_update_moves_locale(self, admin):
        existing = _testimonial()
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.find.return_value = existing
            repo.return_value.create.side_effect = lambda t: t
            req = make_request(
                "PUT", f"/api/testimonials/{existing.id}", route_params={"id": existing.id},
                body={"authorName": "Jane", "quote": "Hola", "locale": "es-MX"}, token=admin,
            )
            resp = call(update_testimonial, req)

        assert body_of(resp)["locale"] == "es-MX"
        repo.return_value.delete.assert_called_once_with(existing.id, "en-US")

    def test_update_missing(self, admin):
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.find.return_value = None
            req = make_request(
                "PUT", "/api/testimonials/nope", route_params={"id": "nope"},
                body={"authorName": "A", "quote": "Q"}, token=admin,
            )
            assert call(update_testimonial, req).status_code == 404

    def test_delete(self, admin):
        existing = _testimonial()
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.find.return_value = existing
            repo.return_value.delete.return_value = True
            req = make_request("DELETE", f"/api/testimonials/{existing.id}", route_params={"id": existing.id}, token=admin)
            resp = call(delete_testimonial, req)
        assert resp.status_code == 204

    def test_delete_missing(self, admin):
        with patch(TESTIMONIAL_REPO) as repo:
            repo.return_value.find.return_value = None
            req = make_request("DELETE", "/api/testimonials/nope", route_params={"id": "nope"}, token=admin)
            assert call(delete_testimonial, req).status_code == 404


# ============================================================================
# LEADS
# ============================================================================

class TestLeadRoute:

    BODY = {"email": "reader@example.com", "source": "newsletter", "locale": "en-US"}

    def test_created(self):
        with patch("function.blueprints.lead_bp.LeadService") as service:
            service.return_value.capture.return_value = (Lead(email="reader@example.com", source="newsletter"), True)
            req = make_request("POST", "/api/leads", body=self.BODY, headers={"X-Forwarded-For": "198.51.100.7, 10.0.0.1"})
            resp = call(create_lead, req)

        assert resp.status_code == 201
        assert body_of(resp)["status"] == "created"
        assert service.return_value.capture.call_args.args[1] == "198.51.100.7"

    def test_existing(self):
        with patch("function.blueprints.lead_bp.LeadService") as service:
            service.return_value.capture.return_value = (Lead(email="reader@example.com", source="newsletter"), False)
            resp = call(create_lead, make_request("POST", "/api/leads", body=self.BODY, headers={"X-Real-IP": "198.51.100.8"}))
        assert resp.status_code == 200
        body = body_of(resp)
        assert body["status"] == "existing"
        assert body["message"] == "Email already registered"

    def test_rate_limit_end_to_end(self):
        with patch("function.services.lead_service.LeadRepository") as repo:
            repo.return_value.get_by_email.return_value = None
            repo.return_value.create.side_effect = lambda lead: lead
            statuses = [
                call(create_lead, make_request("POST", "/api/leads", body=self.BODY, headers={"X-Real-IP": "192.0.2.1"})).status_code
                for _ in range(11)
            ]
        assert statuses[:10] == [201] * 10
        assert statuses[10] == 429
        last = call(create_lead, make_request("POST", "/api/leads", body=self.BODY, headers={"X-Real-IP": "192.0.2.1"}))
        assert body_of(last)["error"] == RATE_LIMIT_MESSAGE

    def test_invalid_source(self):
        with patch("function.services.lead_service.LeadRepository"):
            resp = call(create_lead, make_request("POST", "/api/leads", body=dict(self.BODY, source="tv")))
        assert resp.status_code == 400


# ============================================================================
# REFERRALS / EXPERIMENTS / AUTHORS / STATS
# ============================================================================

class TestReferralRoutes:

    def test_create(self):
        with patch("function.blueprints.referral_bp.ReferralService") as service:
            service.return_value.create.return_value = ReferralCreatedResponse(
                referral_code="ABCD1234", referral_url="https://example.com/signup?ref=ABCD1234",
            )
            req = make_request("POST", "/api/referrals", body={"referrerId": "u1", "referredEmail": "f@example.com"})
            resp = call(create_referral, req)
        assert resp.status_code == 201
        assert body_of(resp) == {"referralCode": "ABCD1234", "referralUrl": "https://example.com/signup?ref=ABCD1234"}

    def test_duplicate(self):
        with patch("function.blueprints.referral_bp.ReferralService") as service:
            service.return_value.create.side_effect = ConflictError("Referral already exists for this email")
            req = make_request("POST", "/api/referrals", body={"referrerId": "u1", "referredEmail": "f@example.com"})
            assert call(create_referral, req).status_code == 409

    def test_bad_email(self):
        req = make_request("POST", "/api/referrals", body={"referrerId": "u1", "referredEmail": "nope"})
        with patch("function.blueprints.referral_bp.ReferralService"):
            assert call(create_referral, req).status_code == 400

    def test_stats(self):
        with patch("function.blueprints.referral_bp.ReferralService") as service:
            service.return_value.stats.return_value = ReferralStatsResponse(user_id="u1", total_referrals=3)
            resp = call(get_referral_stats, make_request("GET", "/api/referrals/u1", route_params={"userId": "u1"}))
        assert body_of(resp)["totalReferrals"] == 3


class TestExperimentRoute:

    def test_page_required(self):
        resp = call(get_experiments, make_request("GET", "/api/experiments"))
        assert resp.status_code == 400
        assert body_of(resp)["error"] == "Missing required parameter: 'page'"

    def test_assignment(self):
        response = ExperimentsResponse(
            experiments=[AssignedExperiment(id="e1", name="Hero", variant="v1", config={"color": "blue"})],
            session_id="u1",
        )
        with patch("function.blueprints.experiment_bp.ExperimentService") as service:
            service.return_value.assign.return_value = response
            req = make_request("GET", "/api/experiments", params={"page": "landing", "userId": "u1"})
            resp = call(get_experiments, req)
        body = body_of(resp)
        assert body["sessionId"] == "u1"
        assert body["experiments"][0]["variant"] == "v1"
        service.return_value.assign.assert_called_once_with("landing", "u1")


class TestAuthorRoute:

    def _req(self):
        return make_request(
            "GET", "/api/authors/janedoe/com",
            route_params={"secondLevelDomain": "janedoe", "topLevelDomain": "com"},
        )

    def test_found(self):
        author = Author(top_level_domain="com", second_level_domain="janedoe", author_name="Jane Doe")
        with patch("function.blueprints.author_bp.AuthorRepository") as repo:
            repo.return_value.list_by_domain.return_value = [author]
            resp = call(get_authors_by_domain, self._req())
        assert body_of(resp)[0]["authorName"] == "Jane Doe"
        repo.return_value.list_by_domain.assert_called_once_with("com", "janedoe")

    def test_not_found(self):
        with patch("function.blueprints.author_bp.AuthorRepository") as repo:
            repo.return_value.list_by_domain.return_value = []
            resp = call(get_authors_by_domain, self._req())
        assert resp.status_code == 404
        assert body_of(resp)["error"] == "Domain not found"


class TestSitemapRoute:

    def _req(self, tld="com", sld="janedoe"):
        return make_request(
            "GET", f"/api/sitemap.xml/{tld}/{sld}",
            route_params={"topLevelDomain": tld, "secondLevelDomain": sld},
        )

    def test_sitemap_for_registered_domain(self):
        registration = make_registration(last_updated_at=datetime(2026, 10, 3, 14, 30, tzinfo=timezone.utc))
        with patch("function.blueprints.author_bp.DomainRegistrationRepository") as repo:
            repo.return_value.find_by_domain.return_value = registration
            resp = call(get_sitemap, self._req())

        assert resp.status_code == 200
        assert resp.mimetype == "application/xml"
        text = resp.get_body().decode()
        assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert 'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"' in text
        assert "<loc>https://janedoe.com</loc>" in text
        assert "<lastmod>2026-10-03</lastmod>" in text
        assert "<changefreq>weekly</changefreq>" in text
        assert "<priority>1.0</priority>" in text
        repo.return_value.find_by_domain.assert_called_once_with("com", "janedoe")

    def test_never_updated_uses_created_date(self):
        registration = make_registration(created_at=datetime(2026, 9, 1, tzinfo=timezone.utc))
        with patch("function.blueprints.author_bp.DomainRegistrationRepository") as repo:
            repo.return_value.find_by_domain.return_value = registration
            resp = call(get_sitemap, self._req())
        assert "<lastmod>2026-09-01</lastmod>" in resp.get_body().decode()

    def test_unregistered_domain(self):
        with patch("function.blueprints.author_bp.DomainRegistrationRepository") as repo:
            repo.return_value.find_by_domain.return_value = None
            resp = call(get_sitemap, self._req(sld="nobody"))
        assert resp.status_code == 404
        assert body_of(resp)["error"] == "Domain registration not found for nobody.com"

    def test_lookup_failure(self):
        with patch("function.blueprints.author_bp.DomainRegistrationRepository") as repo:
            repo.return_value.find_by_domain.side_effect = RuntimeError("cosmos down")
            resp = call(get_sitemap, self._req())
        assert resp.status_code == 500


class TestStatsRoute:

    def test_stats(self):
        with patch("function.blueprints.stats_bp.PlatformStatsService") as service:
            service.return_value.get_stats.return_value = PlatformStats(active_authors=9, countries_served=3)
            resp = call(get_platform_stats, make_request("GET", "/api/stats/platform"))
        assert resp.headers["Cache-Control"] == "public, max-age=3600"
        body = body_of(resp)
        assert body["activeAuthors"] == 9
        assert body["countriesServed"] == 3
        assert "id" not in body


# ============================================================================
# INTEGRATIONS
# ============================================================================

class TestWikipediaRoute:

    def _req(self, language="en", name="Jane Austen"):
        return make_request(
            "GET", f"/api/wikipedia/{language}/{name}", route_params={"language": language, "personName": name},
        )

    def test_found(self):
        facts = {
            "title": "Jane Austen", "description": "", "extract": "Novelist", "lead_paragraph": "",
            "thumbnail": None, "canonical_url": "https://en.wikipedia.org/wiki/Jane_Austen", "language": "en",
        }
        with patch("function.blueprints.integrations_bp.WikipediaClient") as client:
            client.return_value.get_person_facts.return_value = facts
            resp = call(get_wikipedia_person, self._req())
        assert resp.status_code == 200
        assert body_of(resp)["canonicalUrl"] == facts["canonical_url"]

    def test_not_found(self):
        facts = {"title": "", "extract": "", "lead_paragraph": "", "language": "en"}
        with patch("function.blueprints.integrations_bp.WikipediaClient") as client:
            client.return_value.get_person_facts.return_value = facts
            resp = call(get_wikipedia_person, self._req(name="Nobody"))
        assert resp.status_code == 404
        assert body_of(resp)["searchTerm"] == "Nobody"

    def test_bad_input(self):
        with patch("function.blueprints.integrations_bp.WikipediaClient") as client:
            client.return_value.get_person_facts.side_effect = ValueError("Person name cannot be empty")
            assert call(get_wikipedia_person, self._req(name=" ")).status_code == 400

    def test_upstream_failure(self):
        with patch("function.blueprints.integrations_bp.WikipediaClient") as client:
            client.return_value.get_person_facts.side_effect = UpstreamError("Wikipedia unreachable")
            assert call(get_wikipedia_person, self._req()).status_code == 502

    def test_crafted_language_rejected_before_any_request(self):
        with patch("function.clients.base.httpx.Client") as http_client:
            resp = call(get_wikipedia_person, self._req(language="internal.example#"))
        assert resp.status_code == 400
        assert body_of(resp)["error"] == "Invalid language code: 'internal.example#'"
        http_client.assert_not_called()


class TestAuthenticatedIntegrationRoutes:

    def test_penguin_requires_auth(self):
        req = make_request("GET", "/api/penguin/authors/Jane", route_params={"authorName": "Jane"})
        assert call(search_penguin_authors, req).status_code == 401

    def test_penguin_search(self, user):
        with patch("function.blueprints.integrations_bp.PenguinRandomHouseClient") as client:
            client.return_value.search_authors.return_value = {"data": {"authors": []}}
            req = make_request("GET", "/api/penguin/authors/Jane", route_params={"authorName": "Jane"}, token=user)
            resp = call(search_penguin_authors, req)
        assert body_of(resp) == {"data": {"authors": []}}

    @pytest.mark.parametrize("params,expected", [({}, (10, 0)), ({"rows": "25", "start": "5"}, (25, 5)), ({"rows": "0", "start": "-1"}, (10, 0))])
    def test_penguin_titles_paging(self, user, params, expected):
        with patch("function.blueprints.integrations_bp.PenguinRandomHouseClient") as client:
            client.return_value.get_titles_by_author.return_value = {}
            req = make_request(
                "GET", "/api/penguin/authors/123/titles", params=params, route_params={"authorKey": "123"}, token=user,
            )
            call(get_penguin_titles, req)
        kwargs = client.return_value.get_titles_by_author.call_args.kwargs
        assert (kwargs["rows"], kwargs["start"]) == expected

    def test_amazon_unconfigured(self, user):
        with patch("function.blueprints.integrations_bp.AmazonProductClient") as client:
            client.return_value.search_books_by_author.side_effect = ConfigurationError("Amazon Product API is not configured")
            req = make_request("GET", "/api/amazon/books/author/Jane", route_params={"authorName": "Jane"}, token=user)
            assert call(search_amazon_books, req).status_code == 502

    def test_whmcs_pricing_uses_configured_client(self, user, monkeypatch):
        monkeypatch.setenv("WHMCS_CLIENT_ID", "42")
        with patch("function.blueprints.integrations_bp.WhmcsClient") as client:
            client.return_value.get_tld_pricing.return_value = {"result": "success"}
            resp = call(get_whmcs_tld_pricing, make_request("GET", "/api/whmcs/tld-pricing", params={"currencyId": "2"}, token=user))
        assert resp.status_code == 200
        client.return_value.get_tld_pricing.assert_called_once_with(client_id="42", currency_id=2)


# ============================================================================
# STRIPE
# ============================================================================

class TestStripeRoutes:

    def test_existing_customer_returned(self, user, user_profile):
        user_profile.stripe_customer_id = "cus_existing"
        with patch("function.blueprints.stripe_bp.StripeClient") as stripe:
            req = make_request("POST", "/api/stripe/customers", body={"email": "jane@example.com"}, token=user)
            resp = call(create_stripe_customer, req)
        assert body_of(resp) == {"customerId": "cus_existing"}
        stripe.assert_not_called()

    def test_creates_and_links(self, user, user_profile):
        with patch("function.blueprints.stripe_bp.StripeClient") as stripe, \
             patch("function.blueprints.stripe_bp.UserProfileService") as profiles:
            stripe.return_value.find_customer_by_email.return_value = None
            stripe.return_value.create_customer.return_value = "cus_new"
            req = make_request("POST", "/api/stripe/customers", body={"email": "jane@example.com", "name": "Jane"}, token=user)
            resp = call(create_stripe_customer, req)

        assert body_of(resp) == {"customerId": "cus_new"}
        stripe.return_value.create_customer.assert_called_once_with("jane@example.com", "Jane")
        profiles.return_value.link_stripe_customer.assert_called_once_with(user_profile, "cus_new")

    def test_subscriptions_without_customer(self, user):
        resp = call(list_stripe_subscriptions, make_request("GET", "/api/stripe/subscriptions", token=user))
        assert body_of(resp) == {"subscriptions": [], "hasMore": False}

    def test_subscriptions(self, user, user_profile):
        user_profile.stripe_customer_id = "cus_1"
        body = {"data": [{"id": "sub_1", "status": "active", "current_period_end": 1700000000}], "has_more": False}
        with patch("function.blueprints.stripe_bp.StripeClient") as stripe:
            stripe.return_value.list_subscriptions.return_value = body
            stripe.summarize.side_effect = lambda s: {"id": s["id"], "status": s["status"]}
            resp = call(list_stripe_subscriptions, make_request("GET", "/api/stripe/subscriptions", token=user))
        assert body_of(resp)["subscriptions"][0]["id"] == "sub_1"


BILLING_SERVICE = "function.blueprints.stripe_bp.BillingService"


class TestBillingRoutes:

    def test_create_subscription(self, user, user_profile):
        user_profile.stripe_customer_id = "cus_1"
        created = SubscriptionCreatedResponse(subscription_id="sub_1", client_secret="sec_1")
        with patch(BILLING_SERVICE) as service:
            service.return_value.create_subscription.return_value = created
            req = make_request("POST", "/api/stripe/subscriptions", body={"priceId": "price_1"}, token=user)
            resp = call(create_stripe_subscription, req)

        assert body_of(resp) == {"subscriptionId": "sub_1", "clientSecret": "sec_1"}
        profile, request = service.return_value.create_subscription.call_args.args
        assert profile is user_profile
        assert request.price_id == "price_1"

    def test_create_subscription_requires_price(self, user):
        with patch(BILLING_SERVICE) as service:
            resp = call(create_stripe_subscription, make_request("POST", "/api/stripe/subscriptions", body={}, token=user))
        assert resp.status_code == 400
        service.return_value.create_subscription.assert_not_called()

    def test_create_subscription_without_customer(self, user):
        req = make_request("POST", "/api/stripe/subscriptions", body={"priceId": "price_1"}, token=user)
        with patch("function.services.billing_service.StripeClient") as stripe:
            resp = call(create_stripe_subscription, req)
        assert resp.status_code == 400
        assert body_of(resp)["error"] == NO_CUSTOMER_MESSAGE
        stripe.return_value.create_subscription.assert_not_called()

    def test_anonymous_rejected(self):
        with patch(BILLING_SERVICE) as service:
            resp = call(create_stripe_subscription, make_request("POST", "/api/stripe/subscriptions", body={"priceId": "p"}))
        assert resp.status_code == 401
        service.assert_not_called()

    def test_update_passes_route_id(self, user, user_profile):
        with patch(BILLING_SERVICE) as service:
            service.return_value.update_subscription.return_value = SubscriptionUpdatedResponse(
                subscription_id="sub_1", status="active",
            )
            req = make_request(
                "PUT", "/api/stripe/subscriptions/sub_1", body={"cancelAtPeriodEnd": True},
                route_params={"subscriptionId": "sub_1"}, token=user,
            )
            resp = call(update_stripe_subscription, req)

        assert resp.status_code == 200
        _, subscription_id, request = service.return_value.update_subscription.call_args.args
        assert subscription_id == "sub_1"
        assert request.cancel_at_period_end is True

    def test_cancel_with_empty_body(self, user):
        canceled = SubscriptionCanceledResponse(subscription_id="sub_1", status="canceled", canceled_at=1760000000)
        with patch(BILLING_SERVICE) as service:
            service.return_value.cancel_subscription.return_value = canceled
            req = make_request(
                "POST", "/api/stripe/subscriptions/sub_1/cancel", route_params={"subscriptionId": "sub_1"}, token=user,
            )
            resp = call(cancel_stripe_subscription, req)

        assert body_of(resp)["status"] == "canceled"
        request = service.return_value.cancel_subscription.call_args.args[2]
        assert request.invoice_now is None

    def test_cancel_foreign_subscription_is_404(self, user):
        with patch(BILLING_SERVICE) as service:
            service.return_value.cancel_subscription.side_effect = NotFoundError("Subscription not found")
            req = make_request(
                "POST", "/api/stripe/subscriptions/sub_9/cancel", route_params={"subscriptionId": "sub_9"}, token=user,
            )
            resp = call(cancel_stripe_subscription, req)
        assert resp.status_code == 404

    def test_preview_rejects_bad_proration(self, user):
        req = make_request("POST", "/api/stripe/invoices/preview", body={"prorationBehavior": "sometimes"}, token=user)
        with patch(BILLING_SERVICE) as service:
            resp = call(preview_stripe_invoice, req)
        assert resp.status_code == 400
        service.return_value.preview_invoice.assert_not_called()

    def test_checkout_session_missing(self, user):
        with patch(BILLING_SERVICE) as service:
            service.return_value.get_checkout_session.side_effect = NotFoundError("Checkout session not found")
            req = make_request(
                "GET", "/api/stripe/checkout-sessions/cs_1", route_params={"sessionId": "cs_1"}, token=user,
            )
            resp = call(get_stripe_checkout_session, req)
        assert resp.status_code == 404
        assert body_of(resp)["error"] == "Checkout session not found"

    def test_prices_stripe_down_is_502(self, user):
        with patch(BILLING_SERVICE) as service:
            service.return_value.list_prices.side_effect = UpstreamError("Stripe unreachable")
            resp = call(list_stripe_prices, make_request("POST", "/api/stripe/prices", token=user))
        assert resp.status_code == 502


class TestStripeWebhookRoute:

    def _delivery(self, event, secret="whsec_route", timestamp=None):
        payload = json.dumps(event).encode("utf-8")
        timestamp = int(time.time()) if timestamp is None else timestamp
        signature = compute_signature(payload, timestamp, secret)
        return make_request(
            "POST", "/api/stripe/webhook", body=payload,
            headers={"Stripe-Signature": f"t={timestamp},v1={signature}"},
        )

    def test_signed_event_accepted(self, monkeypatch):
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_route")
        event = {"type": "invoice.payment_failed", "data": {"object": {"id": "in_1", "customer": "cus_1"}}}
        resp = call(stripe_webhook, self._delivery(event))
        assert resp.status_code == 200
        assert body_of(resp) == {
            "received": True,
            "eventType": "invoice.payment_failed",
            "message": "invoice.payment_failed: in_1",
        }

    def test_forged_signature_is_400(self, monkeypatch):
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_route")
        resp = call(stripe_webhook, self._delivery({"type": "invoice.paid"}, secret="whsec_guess"))
        assert resp.status_code == 400
        assert body_of(resp)["error"] == "Invalid signature"

    def test_replayed_delivery_is_400(self, monkeypatch):
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_route")
        stale = int(time.time()) - 3600
        resp = call(stripe_webhook, self._delivery({"type": "invoice.paid"}, timestamp=stale))
        assert resp.status_code == 400

    def test_unconfigured_secret_is_500(self):
        resp = call(stripe_webhook, self._delivery({"type": "invoice.paid"}))
        assert resp.status_code == 500
        assert body_of(resp)["error"] == "Webhook secret not configured"


class TestStripeHealthRoute:

    @pytest.mark.parametrize("key,mode,connected", [
        ("sk_test_abc", "test", True),
        ("sk_live_abc", "live", True),
        ("rk_other", "unknown", True),
        (None, "unknown", False),
    ])
    def test_mode(self, monkeypatch, key, mode, connected):
        if key:
            monkeypatch.setenv("STRIPE_API_KEY", key)
        resp = call(stripe_health, make_request("GET", "/api/stripe/health"))
        body = body_of(resp)
        assert body["stripeMode"] == mode
        assert body["stripeConnected"] is connected
        assert body["version"] == "1.0.0"
        assert "sk_" not in resp.get_body().decode()
