# ============================================================================
# PLATFORM STATS REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - PlatformStats container access
# PURPOSE: Read and write the singleton 'current' stats document
# CREATED: 16 OCT 2026
# ============================================================================

from typing import Optional

from core.models import CURRENT_STATS_ID, PlatformStats
from function.repositories.base import CosmosRepository


class PlatformStatsRepository(CosmosRepository[PlatformStats]):
    """PlatformStats container (partition key /id)."""

    model = PlatformStats

    def get_current(self) -> Optional[PlatformStats]:
        return self.get(CURRENT_STATS_ID, CURRENT_STATS_ID)

    def save_current(self, stats: PlatformStats) -> PlatformStats:
        stats.id = CURRENT_STATS_ID
        return self.upsert(stats)


__all__ = ["PlatformStatsRepository"]
