# ============================================================================
# PLATFORM STATS SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Landing page statistics
# PURPOSE: Cached read and recompute of the 'current' stats document
# CREATED: 17 OCT 2026
# ============================================================================
"""
Platform Stats Service

Reads are served from a process-wide cache for CACHE_TTL_SECONDS. When
Cosmos cannot be read the last cached value is served, even if stale,
and with no cache at all a zeroed document is returned: the landing page
never fails because of stats.
"""

import logging
import threading
import time
from typing import Optional, Tuple

from core.models import PlatformStats, utc_now
from function.repositories.author_repo import AuthorRepository, BookRepository
from function.repositories.platform_stats_repo import PlatformStatsRepository

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 3600
DEFAULT_AVERAGE_RATING = 4.8

_cache: Optional[Tuple[PlatformStats, float]] = None
_cache_lock = threading.Lock()


def reset_stats_cache() -> None:
    global _cache
    with _cache_lock:
        _cache = None


class PlatformStatsService:
    """Platform-wide counters shown on marketing pages."""

    def __init__(
        self,
        repo: Optional[PlatformStatsRepository] = None,
        author_repo: Optional[AuthorRepository] = None,
        book_repo: Optional[BookRepository] = None,
        clock=time.monotonic,
    ):
        self._repo = repo or PlatformStatsRepository()
        self._author_repo = author_repo
        self._book_repo = book_repo
        self._clock = clock

    def get_stats(self) -> PlatformStats:
        global _cache
        now = self._clock()
        with _cache_lock:
            cached = _cache
        if cached is not None and now - cached[1] < CACHE_TTL_SECONDS:
            return cached[0]

        try:
            stats = self._repo.get_current()
            if stats is None:
                logger.info("No platform stats document; computing")
                stats = self.compute()
        except Exception as e:
            if cached is not None:
                logger.warning(f"Platform stats read failed, serving stale cache: {e}")
                return cached[0]
            logger.error(f"Platform stats read failed, serving defaults: {e}")
            return PlatformStats()

        with _cache_lock:
            _cache = (stats, now)
        return stats

    def compute(self) -> PlatformStats:
        """Recount authors, books and regions, then upsert the 'current' document."""
        author_repo = self._author_repo or AuthorRepository()
        book_repo = self._book_repo or BookRepository()

        previous = self._repo.get_current()
        stats = PlatformStats(
            active_authors=author_repo.count(),
            books_published=book_repo.count(),
            total_revenue=previous.total_revenue if previous else 0.0,
            average_rating=DEFAULT_AVERAGE_RATING,
            countries_served=author_repo.count_distinct_regions(),
            last_updated=utc_now(),
        )
        logger.info(
            f"Computed platform stats: authors={stats.active_authors}, "
            f"books={stats.books_published}, countries={stats.countries_served}"
        )
        return self._repo.save_current(stats)


__all__ = ["PlatformStatsService", "reset_stats_cache", "CACHE_TTL_SECONDS", "DEFAULT_AVERAGE_RATING"]
