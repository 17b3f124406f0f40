# ============================================================================
# LOCALE BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Localized reference data
# PURPOSE: Language, country and state/province pick lists
# CREATED: 19 OCT 2026
# ============================================================================
"""
Locale Blueprint

Every route requires a Bearer token:
- GET /api/languages/{language} - Languages named in {language}
- GET /api/countries/{language} - Countries named in {language}, sorted by name
- GET /api/stateprovinces/{culture} - States/provinces for a culture, grouped by country
- GET /api/stateprovinces/{countryCode}/{culture} - One country's states/provinces

An empty result is a 404 so the client can fall back to its default language.
"""

import logging
import re
from itertools import groupby
from typing import List, Optional, Tuple

import azure.functions as func

from core.models import StateProvince
from function.auth.guard import authenticate
from function.http import error_response, exception_response, json_response
from function.models.responses import (
    CountryListResponse,
    CountryStateProvinces,
    LocaleEntry,
    StateProvinceEntry,
    StateProvinceListResponse,
    StateProvincesByCultureResponse,
)
from function.repositories.locale_repo import CountryRepository, LanguageRepository, StateProvinceRepository

logger = logging.getLogger(__name__)
locale_bp = func.Blueprint()

LANGUAGE_RE = re.compile(r"[a-z]{2,3}(-[a-z0-9]{2,8})?")
CULTURE_RE = re.compile(r"([A-Za-z]{2,3})-([A-Za-z]{2})")
COUNTRY_CODE_RE = re.compile(r"[A-Za-z]{2}")


def _language(req: func.HttpRequest) -> Tuple[Optional[str], Optional[func.HttpResponse]]:
    raw = (req.route_params.get("language") or "").strip()
    if not raw:
        return None, error_response("Language parameter is required", 400)
    language = raw.lower()
    if not LANGUAGE_RE.fullmatch(language):
        return None, error_response(f"Invalid language format: {raw}", 400)
    return language, None


def _culture(req: func.HttpRequest) -> Tuple[Optional[str], Optional[func.HttpResponse]]:
    """Culture as ll-CC (en-us -> en-US)."""
    raw = (req.route_params.get("culture") or "").strip()
    if not raw:
        return None, error_response("Culture parameter is required", 400)
    match = CULTURE_RE.fullmatch(raw)
    if not match:
        return None, error_response(f"Invalid culture format: {raw}", 400)
    return f"{match.group(1).lower()}-{match.group(2).upper()}", None


def _entries(rows: List[StateProvince]) -> List[StateProvinceEntry]:
    return [
        StateProvinceEntry(code=r.code, name=r.name, country=r.country, culture=r.culture)
        for r in sorted(rows, key=lambda r: r.name)
    ]


@locale_bp.route(route="languages/{language}", methods=["GET"])
def get_languages(req: func.HttpRequest) -> func.HttpResponse:
    _, error = authenticate(req)
    if error:
        return error
    language, error = _language(req)
    if error:
        return error

    try:
        languages = LanguageRepository().list_by_request_language(language)
    except Exception as e:
        return exception_response(e, f"list languages for {language}")

    if not languages:
        return error_response(f"No Languages found for language: {language}", 404)
    logger.info(f"Returning {len(languages)} languages named in {language}")
    return json_response([LocaleEntry(code=lang.code, name=lang.name).to_body() for lang in languages])


@locale_bp.route(route="countries/{language}", methods=["GET"])
def get_countries(req: func.HttpRequest) -> func.HttpResponse:
    _, error = authenticate(req)
    if error:
        return error
    language, error = _language(req)
    if error:
        return error

    try:
        countries = CountryRepository().list_by_language(language)
    except Exception as e:
        return exception_response(e, f"list countries for {language}")

    if not countries:
        return error_response(f"No Countries found for language: {language}", 404)
    entries = sorted((LocaleEntry(code=c.code, name=c.name) for c in countries), key=lambda e: e.name)
    return json_response(CountryListResponse(language=language, count=len(entries), countries=entries))


@locale_bp.route(route="stateprovinces/{culture}", methods=["GET"])
def get_state_provinces(req: func.HttpRequest) -> func.HttpResponse:
    _, error = authenticate(req)
    if error:
        return error
    culture, error = _culture(req)
    if error:
        return error

    try:
        rows = StateProvinceRepository().list_by_culture(culture)
    except Exception as e:
        return exception_response(e, f"list states/provinces for {culture}")

    if not rows:
        return error_response(f"No StateProvinces found for culture: {culture}", 404)

    rows = sorted(rows, key=lambda r: r.country)
    groups = [
        CountryStateProvinces(country=country, culture=culture, state_provinces=_entries(list(group)))
        for country, group in groupby(rows, key=lambda r: r.country)
    ]
    return json_response(StateProvincesByCultureResponse(culture=culture, total_count=len(rows), data=groups))


@locale_bp.route(route="stateprovinces/{countryCode}/{culture}", methods=["GET"])
def get_state_provinces_by_country(req: func.HttpRequest) -> func.HttpResponse:
    _, error = authenticate(req)
    if error:
        return error

    raw_country = (req.route_params.get("countryCode") or "").strip()
    if not raw_country:
        return error_response("CountryCode parameter is required", 400)
    if not COUNTRY_CODE_RE.fullmatch(raw_country):
        return error_response("CountryCode must be a 2-letter ISO country code (e.g., US, CA, MX)", 400)
    country = raw_country.upper()
    culture, error = _culture(req)
    if error:
        return error

    try:
        rows = StateProvinceRepository().list_by_country_and_culture(country, culture)
    except Exception as e:
        return exception_response(e, f"list states/provinces for {country} {culture}")

    if not rows:
        return error_response(f"No StateProvinces found for country: {country}, culture: {culture}", 404)
    entries = _entries(rows)
    return json_response(StateProvinceListResponse(
        country=country, culture=culture, count=len(entries), state_provinces=entries,
    ))
