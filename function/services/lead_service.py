# ============================================================================
# LEAD SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Lead capture
# PURPOSE: Rate-limited, deduplicated lead capture from marketing forms
# CREATED: 17 OCT 2026
# ============================================================================
"""
Lead Service

Order of checks for one capture:
    rate limit (429) -> body validation (400) -> record hit -> dedupe by email

A duplicate email is not an error: the existing lead id is returned and
the caller reports status 'existing'.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from core.errors import RateLimitError
from core.models import Lead
from function.models.requests import CreateLeadRequest
from function.repositories.lead_repo import LeadRepository
from function.services.rate_limiter import SlidingWindowRateLimiter, get_lead_rate_limiter

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


class LeadService:
    """Lead capture."""

    def __init__(
        self,
        repo: Optional[LeadRepository] = None,
        limiter: Optional[SlidingWindowRateLimiter] = None,
    ):
        self._repo = repo or LeadRepository()
        self._limiter = limiter or get_lead_rate_limiter()

    @staticmethod
    def rate_limit_key(ip_address: str) -> str:
        return f"{ip_address}:leads"

    def capture(self, body: Dict[str, Any], ip_address: str) -> Tuple[Lead, bool]:
        """
        Store a lead unless its email is already known.

        Returns:
            (lead, created) where created is False for a known email

        Raises:
            RateLimitError: too many captures from this IP
            pydantic.ValidationError: body failed shape validation
        """
        key = self.rate_limit_key(ip_address)
        if not self._limiter.is_allowed(key):
            raise RateLimitError(RATE_LIMIT_MESSAGE)

        request = CreateLeadRequest.model_validate(body)
        # Concurrent requests may have filled the window since the check above
        if not self._limiter.try_acquire(key):
            raise RateLimitError(RATE_LIMIT_MESSAGE)

        email = request.email.strip().lower()
        existing = self._repo.get_by_email(email)
        if existing is not None:
            logger.info(f"Lead for {email} already exists ({existing.id})")
            return existing, False

        lead = Lead(
            email=email,
            first_name=request.first_name,
            source=request.source,
            lead_magnet=request.lead_magnet,
            utm_source=request.utm_source,
            utm_medium=request.utm_medium,
            utm_campaign=request.utm_campaign,
            referrer=request.referrer,
            locale=request.locale,
            ip_address=ip_address,
            consent_given=request.consent_given,
            email_domain=Lead.domain_of(email),
        )
        created = self._repo.create(lead)
        logger.info(f"Captured lead {created.id} from {request.source.value}")
        return created, True


__all__ = ["LeadService", "RATE_LIMIT_MESSAGE"]
