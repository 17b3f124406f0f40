# ============================================================================
# LOCALE ROUTE TESTS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Tests - Localized reference data endpoints
# PURPOSE: Verify parameter checks, partition routing and response grouping
# CREATED: 19 OCT 2026
# ============================================================================
"""
Locale Route Tests

Run with:
    pytest tests/test_locale_routes.py -v
"""

from unittest.mock import MagicMock, patch

import pytest

from core.models import Country, Language, StateProvince
from function.blueprints.locale_bp import (
    get_countries,
    get_languages,
    get_state_provinces,
    get_state_provinces_by_country,
)
from function.repositories.locale_repo import StateProvinceRepository
from tests.helpers import body_of, call, make_request

LOCALE = "function.blueprints.locale_bp"


def _province(code, name, country="US", culture="en-US"):
    return StateProvince(code=code, name=name, country=country, culture=culture)


class TestLanguages:

    def test_languages_for_request_language(self, user):
        rows = [Language(code="en", name="Inglés", request_language="es")]
        with patch(f"{LOCALE}.LanguageRepository") as repo:
            repo.return_value.list_by_request_language.return_value = rows
            req = make_request("GET", "/api/languages/ES", route_params={"language": "ES"}, token=user)
            resp = call(get_languages, req)

        assert resp.status_code == 200
        assert body_of(resp) == [{"code": "en", "name": "Inglés"}]
        repo.return_value.list_by_request_language.assert_called_once_with("es")

    def test_nothing_seeded_is_404(self, user):
        with patch(f"{LOCALE}.LanguageRepository") as repo:
            repo.return_value.list_by_request_language.return_value = []
            resp = call(get_languages, make_request(
                "GET", "/api/languages/xx", route_params={"language": "xx"}, token=user,
            ))
        assert resp.status_code == 404
        assert body_of(resp)["error"] == "No Languages found for language: xx"

    @pytest.mark.parametrize("language", ["english", "e", "en_US", "en-"])
    def test_malformed_language(self, user, language):
        with patch(f"{LOCALE}.LanguageRepository") as repo:
            resp = call(get_languages, make_request(
                "GET", "/api/languages/x", route_params={"language": language}, token=user,
            ))
        assert resp.status_code == 400
        repo.assert_not_called()

    def test_requires_token(self):
        resp = call(get_languages, make_request("GET", "/api/languages/en", route_params={"language": "en"}))
        assert resp.status_code == 401


class TestCountries:

    def test_sorted_by_name(self, user):
        rows = [
            Country(code="US", name="United States", language="en"),
            Country(code="CA", name="Canada", language="en"),
        ]
        with patch(f"{LOCALE}.CountryRepository") as repo:
            repo.return_value.list_by_language.return_value = rows
            resp = call(get_countries, make_request(
                "GET", "/api/countries/en", route_params={"language": "en"}, token=user,
            ))

        assert body_of(resp) == {
            "language": "en",
            "count": 2,
            "countries": [{"code": "CA", "name": "Canada"}, {"code": "US", "name": "United States"}],
        }

    def test_store_failure_is_500(self, user):
        with patch(f"{LOCALE}.CountryRepository") as repo:
            repo.return_value.list_by_language.side_effect = RuntimeError("cosmos down")
            resp = call(get_countries, make_request(
                "GET", "/api/countries/en", route_params={"language": "en"}, token=user,
            ))
        assert resp.status_code == 500


class TestStateProvinces:

    def test_grouped_by_country(self, user):
        rows = [
            _province("WA", "Washington"),
            _province("ON", "Ontario", country="CA"),
            _province("CA", "California"),
        ]
        with patch(f"{LOCALE}.StateProvinceRepository") as repo:
            repo.return_value.list_by_culture.return_value = rows
            resp = call(get_state_provinces, make_request(
                "GET", "/api/stateprovinces/en-us", route_params={"culture": "en-us"}, token=user,
            ))

        body = body_of(resp)
        assert body["culture"] == "en-US"
        assert body["totalCount"] == 3
        assert [g["country"] for g in body["data"]] == ["CA", "US"]
        assert [p["code"] for p in body["data"][1]["stateProvinces"]] == ["CA", "WA"]
        repo.return_value.list_by_culture.assert_called_once_with("en-US")

    def test_by_country(self, user):
        rows = [_province("QC", "Québec", "CA", "fr-CA"), _province("AB", "Alberta", "CA", "fr-CA")]
        with patch(f"{LOCALE}.StateProvinceRepository") as repo:
            repo.return_value.list_by_country_and_culture.return_value = rows
            req = make_request(
                "GET", "/api/stateprovinces/ca/fr-CA",
                route_params={"countryCode": "ca", "culture": "fr-CA"}, token=user,
            )
            resp = call(get_state_provinces_by_country, req)

        body = body_of(resp)
        assert (body["country"], body["culture"], body["count"]) == ("CA", "fr-CA", 2)
        assert [p["name"] for p in body["stateProvinces"]] == ["Alberta", "Québec"]
        repo.return_value.list_by_country_and_culture.assert_called_once_with("CA", "fr-CA")

    @pytest.mark.parametrize("country,culture,message", [
        ("USA", "en-US", "CountryCode must be a 2-letter ISO country code (e.g., US, CA, MX)"),
        ("US", "english", "Invalid culture format: english"),
        ("US", " ", "Culture parameter is required"),
    ])
    def test_bad_parameters(self, user, country, culture, message):
        with patch(f"{LOCALE}.StateProvinceRepository") as repo:
            req = make_request(
                "GET", "/api/stateprovinces/x/y", route_params={"countryCode": country, "culture": culture}, token=user,
            )
            resp = call(get_state_provinces_by_country, req)
        assert resp.status_code == 400
        assert body_of(resp)["error"] == message
        repo.assert_not_called()

    def test_repository_reads_culture_partition(self):
        container = MagicMock()
        container.query_items.return_value = iter([])
        StateProvinceRepository(container).list_by_country_and_culture("CA", "fr-CA")
        kwargs = container.query_items.call_args.kwargs
        assert kwargs["partition_key"] == "fr-CA"
        assert kwargs["parameters"] == [{"name": "@country", "value": "CA"}, {"name": "@culture", "value": "fr-CA"}]
