# ============================================================================
# EXPERIMENT SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - A/B variant assignment
# PURPOSE: Deterministic variant bucketing per session
# CREATED: 17 OCT 2026
# ============================================================================
"""
Experiment Service

A session is bucketed into 0..99 by hashing "{experimentId}:{sessionId}"
with SHA-256 and reading the first four bytes as a signed little-endian
int. Variants are walked in id order, accumulating trafficPercentage,
and the first variant whose cumulative share exceeds the bucket wins.
A bucket past the total (percentages summing to under 100) falls to the
last variant. The same session always sees the same variant.
"""

import hashlib
import logging
import uuid
from typing import List, Optional

from core.models import Experiment, ExperimentVariant
from function.models.responses import AssignedExperiment, ExperimentsResponse
from function.repositories.experiment_repo import ExperimentRepository

logger = logging.getLogger(__name__)


def bucket_for(experiment_id: str, session_id: str) -> int:
    digest = hashlib.sha256(f"{experiment_id}:{session_id}".encode("utf-8")).digest()
    value = int.from_bytes(digest[:4], "little", signed=True)
    return abs(value) % 100


def select_variant(experiment: Experiment, session_id: str) -> Optional[ExperimentVariant]:
    """Variant for this session, or None when the experiment has no variants."""
    if not experiment.variants:
        return None
    if experiment.total_traffic != 100:
        logger.warning(
            f"Experiment {experiment.id} traffic percentages sum to {experiment.total_traffic}, not 100"
        )

    bucket = bucket_for(experiment.id, session_id)
    ordered = sorted(experiment.variants, key=lambda v: v.id)
    cumulative = 0
    for variant in ordered:
        cumulative += variant.traffic_percentage
        if bucket < cumulative:
            return variant

    # Unmatched buckets go to the last variant as stored, not the last by id
    fallback = experiment.variants[-1]
    logger.warning(f"Falling back to variant {fallback.id} for experiment {experiment.id}")
    return fallback


class ExperimentService:
    """Experiment assignment for a page."""

    def __init__(self, repo: Optional[ExperimentRepository] = None):
        self._repo = repo or ExperimentRepository()

    def assign(self, page: str, user_id: Optional[str] = None) -> ExperimentsResponse:
        session_id = user_id or str(uuid.uuid4())
        assigned: List[AssignedExperiment] = []

        for experiment in self._repo.list_active_for_page(page):
            variant = select_variant(experiment, session_id)
            if variant is None:
                logger.warning(f"Experiment {experiment.id} has no variants; skipped")
                continue
            assigned.append(AssignedExperiment(
                id=experiment.id,
                name=experiment.name,
                variant=variant.id,
                config=variant.config,
            ))

        logger.debug(f"Assigned {len(assigned)} experiments on page '{page}' to session {session_id}")
        return ExperimentsResponse(experiments=assigned, session_id=session_id)


__all__ = ["ExperimentService", "bucket_for", "select_variant"]
