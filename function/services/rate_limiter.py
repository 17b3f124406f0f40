# ============================================================================
# RATE LIMITER
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - In-process sliding window
# PURPOSE: Per-client request throttling for anonymous write endpoints
# CREATED: 17 OCT 2026
# ============================================================================
"""
Sliding-Window Rate Limiter

Per-process only: each Functions worker keeps its own window, so the
effective limit across a scaled-out app is a multiple of the configured
one.

is_allowed() only looks, so a caller can reject a request early without
consuming quota. try_acquire() checks and records under one lock and is
what admits a request. Keys whose window empties are dropped, so memory
is bounded by the clients seen in the last window.
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

logger = logging.getLogger(__name__)

LEAD_MAX_REQUESTS = 10
LEAD_WINDOW_SECONDS = 60


class SlidingWindowRateLimiter:
    """At most max_requests per key within any window_seconds span."""

    def __init__(
        self,
        max_requests: int = LEAD_MAX_REQUESTS,
        window_seconds: float = LEAD_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def _count(self, key: str, now: float) -> int:
        """Drop expired hits for key (and the key itself once empty). Caller holds the lock."""
        hits = self._hits.get(key)
        if hits is None:
            return 0
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if not hits:
            del self._hits[key]
            return 0
        return len(hits)

    def is_allowed(self, key: str) -> bool:
        with self._lock:
            allowed = self._count(key, self._clock()) < self.max_requests
        if not allowed:
            logger.warning(f"Rate limit exceeded for {key}")
        return allowed

    def try_acquire(self, key: str) -> bool:
        """Record a hit if the key is under its limit; False (nothing recorded) otherwise."""
        with self._lock:
            now = self._clock()
            if self._count(key, now) >= self.max_requests:
                allowed = False
            else:
                self._hits.setdefault(key, deque()).append(now)
                allowed = True
        if not allowed:
            logger.warning(f"Rate limit exceeded for {key}")
        return allowed

    def record(self, key: str) -> None:
        with self._lock:
            now = self._clock()
            self._count(key, now)
            self._hits.setdefault(key, deque()).append(now)

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_lead_limiter: Optional[SlidingWindowRateLimiter] = None


def get_lead_rate_limiter() -> SlidingWindowRateLimiter:
    global _lead_limiter
    if _lead_limiter is None:
        _lead_limiter = SlidingWindowRateLimiter(LEAD_MAX_REQUESTS, LEAD_WINDOW_SECONDS)
    return _lead_limiter


__all__ = [
    "SlidingWindowRateLimiter",
    "get_lead_rate_limiter",
    "LEAD_MAX_REQUESTS",
    "LEAD_WINDOW_SECONDS",
]
