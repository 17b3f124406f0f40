# ============================================================================
# PLATFORM STATS MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Public platform counters
# PURPOSE: Headline numbers for the marketing site
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from core.models.base import CosmosDocument, utc_now

CURRENT_STATS_ID = "current"


class PlatformStats(CosmosDocument):
    """
    Singleton stats document (id 'current').

    Container: PlatformStats, partition key /id
    """

    __container__: ClassVar[str] = "PlatformStats"
    __partition_key__: ClassVar[str] = "id"

    id: str = CURRENT_STATS_ID
    active_authors: int = 0
    books_published: int = 0
    total_revenue: float = 0.0
    average_rating: float = 0.0
    countries_served: int = 0
    last_updated: datetime = Field(default_factory=utc_now)


__all__ = ["PlatformStats", "CURRENT_STATS_ID"]
