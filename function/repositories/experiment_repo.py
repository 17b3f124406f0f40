# ============================================================================
# EXPERIMENT REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Experiments container access
# PURPOSE: Active experiments for a page
# CREATED: 16 OCT 2026
# ============================================================================

from typing import List

from core.models import Experiment
from function.repositories.base import CosmosRepository, params


class ExperimentRepository(CosmosRepository[Experiment]):
    """Experiments container (partition key /page)."""

    model = Experiment

    def list_active_for_page(self, page: str) -> List[Experiment]:
        return self.query(
            "SELECT * FROM c WHERE c.page = @page AND c.isActive = true",
            params(page=page),
            partition_key=page,
        )


__all__ = ["ExperimentRepository"]
