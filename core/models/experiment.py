# ============================================================================
# EXPERIMENT MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - A/B experiments
# PURPOSE: Page experiments with weighted variants
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Experiment Model

An experiment belongs to one page and splits traffic across variants by
trafficPercentage. Percentages are expected to sum to 100; assignment
tolerates other sums (see ExperimentService).
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, List

from pydantic import Field

from core.models.base import CamelModel, CosmosDocument, utc_now


class ExperimentVariant(CamelModel):
    """One arm of an experiment."""

    id: str
    name: str
    traffic_percentage: int = Field(default=0, ge=0, le=100)
    config: Dict[str, Any] = Field(default_factory=dict)


class Experiment(CosmosDocument):
    """
    Page experiment.

    Container: Experiments, partition key /page
    """

    __container__: ClassVar[str] = "Experiments"
    __partition_key__: ClassVar[str] = "page"

    name: str
    page: str
    is_active: bool = True
    variants: List[ExperimentVariant] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def total_traffic(self) -> int:
        return sum(v.traffic_percentage for v in self.variants)


__all__ = ["ExperimentVariant", "Experiment"]
