# ============================================================================
# INTEGRATIONS BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Third-party lookups
# PURPOSE: Wikipedia, Penguin Random House, Amazon and WHMCS pass-through
# CREATED: 17 OCT 2026
# ============================================================================
"""
Integrations Blueprint

Read-only lookups against third-party APIs. Upstream failures map to
502, missing integration settings too (ConfigurationError).

- GET /api/wikipedia/{language}/{personName} - Person facts (anonymous)
- GET /api/penguin/authors/{authorName} - PRH author search
- GET /api/penguin/authors/{authorKey}/titles?rows&start - PRH titles by author
- GET /api/amazon/books/author/{authorName}?page - PA-API book search
- GET /api/whmcs/tld-pricing?clientId&currencyId - WHMCS TLD pricing

All but Wikipedia require a Bearer token and a user profile.
"""

import logging
from typing import Optional

import azure.functions as func

from function.auth.guard import authenticate_with_profile
from function.clients.amazon_client import AmazonProductClient
from function.clients.penguin_client import DEFAULT_ROWS, DEFAULT_START, PenguinRandomHouseClient
from function.clients.whmcs_client import WhmcsClient
from function.clients.wikipedia_client import WikipediaClient
from function.config import get_config
from function.http import error_response, exception_response, json_response
from function.models.responses import WikipediaPersonResponse

logger = logging.getLogger(__name__)
integrations_bp = func.Blueprint()


def _int_param(value: Optional[str], default: Optional[int], minimum: Optional[int] = None) -> Optional[int]:
    """Parse an integer query param; default when missing, malformed or below minimum."""
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if minimum is not None and parsed < minimum:
        return default
    return parsed


# ============================================================================
# WIKIPEDIA
# ============================================================================

@integrations_bp.route(route="wikipedia/{language}/{personName}", methods=["GET"])
def get_wikipedia_person(req: func.HttpRequest) -> func.HttpResponse:
    language = req.route_params.get("language") or ""
    person_name = req.route_params.get("personName") or ""

    try:
        facts = WikipediaClient().get_person_facts(person_name, language)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return exception_response(e, f"wikipedia lookup for '{person_name}'")

    if not (facts["title"] or facts["extract"] or facts["lead_paragraph"]):
        return json_response(
            {
                "message": f"No Wikipedia article found for '{person_name}'",
                "language": language,
                "searchTerm": person_name,
            },
            status_code=404,
        )
    return json_response(WikipediaPersonResponse.model_validate(facts))


# ============================================================================
# PENGUIN RANDOM HOUSE
# ============================================================================

@integrations_bp.route(route="penguin/authors/{authorName}", methods=["GET"])
def search_penguin_authors(req: func.HttpRequest) -> func.HttpResponse:
    _, _, error = authenticate_with_profile(req)
    if error:
        return error

    author_name = req.route_params.get("authorName")
    try:
        return json_response(PenguinRandomHouseClient().search_authors(author_name))
    except Exception as e:
        return exception_response(e, f"PRH author search for '{author_name}'")


@integrations_bp.route(route="penguin/authors/{authorKey}/titles", methods=["GET"])
def get_penguin_titles(req: func.HttpRequest) -> func.HttpResponse:
    _, _, error = authenticate_with_profile(req)
    if error:
        return error

    author_key = req.route_params.get("authorKey")
    rows = _int_param(req.params.get("rows"), DEFAULT_ROWS, minimum=1)
    start = _int_param(req.params.get("start"), DEFAULT_START, minimum=0)
    try:
        return json_response(PenguinRandomHouseClient().get_titles_by_author(author_key, rows=rows, start=start))
    except Exception as e:
        return exception_response(e, f"PRH titles for {author_key}")


# ============================================================================
# AMAZON
# ============================================================================

@integrations_bp.route(route="amazon/books/author/{authorName}", methods=["GET"])
def search_amazon_books(req: func.HttpRequest) -> func.HttpResponse:
    _, _, error = authenticate_with_profile(req)
    if error:
        return error

    author_name = req.route_params.get("authorName")
    page = _int_param(req.params.get("page"), 1, minimum=1)
    try:
        return json_response(AmazonProductClient().search_books_by_author(author_name, item_page=page))
    except Exception as e:
        return exception_response(e, f"Amazon book search for '{author_name}'")


# ============================================================================
# WHMCS
# ============================================================================

@integrations_bp.route(route="whmcs/tld-pricing", methods=["GET"])
def get_whmcs_tld_pricing(req: func.HttpRequest) -> func.HttpResponse:
    _, _, error = authenticate_with_profile(req)
    if error:
        return error

    client_id = req.params.get("clientId") or get_config().whmcs_client_id
    currency_id = _int_param(req.params.get("currencyId"), None)
    try:
        return json_response(WhmcsClient().get_tld_pricing(client_id=client_id, currency_id=currency_id))
    except Exception as e:
        return exception_response(e, "WHMCS TLD pricing")
