# ============================================================================
# TESTIMONIAL REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Testimonials container access
# PURPOSE: Filtered testimonial listing and admin CRUD
# CREATED: 15 OCT 2026
# ============================================================================

from typing import List, Optional, Tuple

from core.models import Testimonial
from function.repositories.base import CosmosRepository, params


class TestimonialRepository(CosmosRepository[Testimonial]):
    """Testimonials container (partition key /locale)."""

    model = Testimonial

    def _where(self, featured: Optional[bool], locale: Optional[str]) -> Tuple[str, list]:
        clauses = []
        values = {}
        if featured is not None:
            clauses.append("c.featured = @featured")
            values["featured"] = featured
        if locale:
            clauses.append("c.locale = @locale")
            values["locale"] = locale
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params(**values)

    def list_testimonials(
        self,
        limit: int = 5,
        featured: Optional[bool] = None,
        locale: Optional[str] = None,
    ) -> Tuple[List[Testimonial], int]:
        """
        Newest testimonials matching the filters.

        Returns:
            (testimonials limited to `limit`, total matching count)
        """
        where, parameters = self._where(featured, locale)
        items = self.query(
            f"SELECT TOP @limit * FROM c{where} ORDER BY c.createdAt DESC",
            parameters + params(limit=limit),
            partition_key=locale or None,
        )
        total = self.query_raw(f"SELECT VALUE COUNT(1) FROM c{where}", parameters, partition_key=locale or None)
        return items, int(total[0]) if total else len(items)

    def find(self, testimonial_id: str) -> Optional[Testimonial]:
        return self.find_by_id(testimonial_id)


__all__ = ["TestimonialRepository"]
