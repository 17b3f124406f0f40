# ============================================================================
# LOCALE REPOSITORIES
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Languages, Countries and StateProvinces containers
# PURPOSE: Single-partition reads of localized reference data
# CREATED: 19 OCT 2026
# ============================================================================

from typing import List

from core.models import Country, Language, StateProvince
from function.repositories.base import CosmosRepository, params


class LanguageRepository(CosmosRepository[Language]):
    """Languages container (partition key /requestLanguage)."""

    model = Language

    def list_by_request_language(self, request_language: str) -> List[Language]:
        return self.query(
            "SELECT * FROM c WHERE c.requestLanguage = @language ORDER BY c.name",
            params(language=request_language),
            partition_key=request_language,
        )


class CountryRepository(CosmosRepository[Country]):
    """Countries container (partition key /language)."""

    model = Country

    def list_by_language(self, language: str) -> List[Country]:
        return self.query(
            "SELECT * FROM c WHERE c.language = @language ORDER BY c.name",
            params(language=language),
            partition_key=language,
        )


class StateProvinceRepository(CosmosRepository[StateProvince]):
    """StateProvinces container (partition key /culture)."""

    model = StateProvince

    def list_by_culture(self, culture: str) -> List[StateProvince]:
        return self.query(
            "SELECT * FROM c WHERE c.culture = @culture",
            params(culture=culture),
            partition_key=culture,
        )

    def list_by_country_and_culture(self, country: str, culture: str) -> List[StateProvince]:
        return self.query(
            "SELECT * FROM c WHERE c.country = @country AND c.culture = @culture",
            params(country=country, culture=culture),
            partition_key=culture,
        )


__all__ = ["LanguageRepository", "CountryRepository", "StateProvinceRepository"]
