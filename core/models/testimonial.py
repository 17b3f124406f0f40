# ============================================================================
# TESTIMONIAL MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Marketing testimonials
# PURPOSE: Customer quotes shown on the landing pages
# LAST_REVIEWED: 15 OCT 2026
# ============================================================================
"""
Testimonial Model

Partitioned by locale: landing pages only ever read one locale.
"""

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field

from core.models.base import CosmosDocument, utc_now


class Testimonial(CosmosDocument):
    """
    Customer testimonial.

    Container: Testimonials, partition key /locale
    """

    __container__: ClassVar[str] = "Testimonials"
    __partition_key__: ClassVar[str] = "locale"

    author_name: str = Field(..., max_length=100)
    author_title: Optional[str] = Field(default=None, max_length=150)
    quote: str = Field(..., max_length=2000)
    rating: int = Field(default=5, ge=1, le=5)
    photo_url: Optional[str] = None
    featured: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    locale: str = Field(default="en-US", max_length=10)


__all__ = ["Testimonial"]
