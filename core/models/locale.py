# ============================================================================
# LOCALE MODELS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Localized reference data
# PURPOSE: Language, country and state/province names per display language
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Locale Models

Reference data seeded out of band and read by the locale endpoints. Each
row is one name in one display language, so the same code appears once
per language (or culture) it is translated into.
"""

from typing import ClassVar

from core.models.base import CosmosDocument


class Language(CosmosDocument):
    """
    ISO 639-1 language named in request_language ("Spanish" vs "Español").

    Container: Languages, partition key /requestLanguage
    """

    __container__: ClassVar[str] = "Languages"
    __partition_key__: ClassVar[str] = "request_language"

    code: str
    name: str
    request_language: str


class Country(CosmosDocument):
    """
    ISO 3166-1 alpha-2 country named in one language.

    Container: Countries, partition key /language
    """

    __container__: ClassVar[str] = "Countries"
    __partition_key__: ClassVar[str] = "language"

    code: str
    name: str
    language: str


class StateProvince(CosmosDocument):
    """
    State or province of a country, named for one culture (e.g. fr-CA).

    Container: StateProvinces, partition key /culture
    """

    __container__: ClassVar[str] = "StateProvinces"
    __partition_key__: ClassVar[str] = "culture"

    code: str
    name: str
    country: str
    culture: str


__all__ = ["Language", "Country", "StateProvince"]
