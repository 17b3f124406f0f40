# ============================================================================
# AUTHOR REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Authors and Books container access
# PURPOSE: Author lookup by domain and locale, platform counters
# CREATED: 16 OCT 2026
# ============================================================================

from typing import List, Optional

from core.models import Author, Book
from function.repositories.base import CosmosRepository, params

_DOMAIN_FILTER = "c.topLevelDomain = @tld AND c.secondLevelDomain = @sld"


class AuthorRepository(CosmosRepository[Author]):
    """Authors container (partition key /id)."""

    model = Author

    def list_by_domain(self, top_level_domain: str, second_level_domain: str) -> List[Author]:
        return self.query(
            f"SELECT * FROM c WHERE {_DOMAIN_FILTER}",
            params(tld=top_level_domain, sld=second_level_domain),
        )

    def list_by_domain_and_locale(
        self,
        top_level_domain: str,
        second_level_domain: str,
        language_name: str,
        region_name: Optional[str] = None,
    ) -> List[Author]:
        """Authors for one domain in one language (and region, when given)."""
        query = f"SELECT * FROM c WHERE {_DOMAIN_FILTER} AND LOWER(c.languageName) = @lang"
        values = {"tld": top_level_domain, "sld": second_level_domain, "lang": language_name.lower()}
        if region_name:
            query += " AND LOWER(c.regionName) = @region"
            values["region"] = region_name.lower()
        return self.query(query, params(**values))

    def get_default(self, top_level_domain: str, second_level_domain: str) -> Optional[Author]:
        return self.first(
            f"SELECT * FROM c WHERE {_DOMAIN_FILTER} AND c.isDefault = true",
            params(tld=top_level_domain, sld=second_level_domain),
        )

    def count_distinct_regions(self) -> int:
        """Number of distinct non-empty regions across all authors."""
        regions = self.query_raw(
            "SELECT DISTINCT VALUE c.regionName FROM c WHERE IS_DEFINED(c.regionName) "
            "AND NOT IS_NULL(c.regionName) AND c.regionName != ''"
        )
        return len({str(r).upper() for r in regions})


class BookRepository(CosmosRepository[Book]):
    """Books container (partition key /authorId)."""

    model = Book


__all__ = ["AuthorRepository", "BookRepository"]
