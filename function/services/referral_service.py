# ============================================================================
# REFERRAL SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Referral program
# PURPOSE: Referral code issuance and per-referrer stats
# CREATED: 17 OCT 2026
# ============================================================================
"""
Referral Service

Codes are 8 characters from A-Z0-9 drawn with `secrets`. Uniqueness is
checked against the container; after MAX_CODE_ATTEMPTS collisions the
request fails with a 500.
"""

import logging
import secrets
import string
from typing import Optional

from core.contracts import ReferralStatus
from core.errors import ConflictError, ServiceError
from core.models import Referral
from function.config import FunctionConfig, get_config
from function.models.requests import CreateReferralRequest
from function.models.responses import ReferralCreatedResponse, ReferralStatsResponse
from function.repositories.referral_repo import ReferralRepository

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8
MAX_CODE_ATTEMPTS = 5


def generate_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class ReferralService:
    """Referral operations."""

    def __init__(self, repo: Optional[ReferralRepository] = None, config: Optional[FunctionConfig] = None):
        self._repo = repo or ReferralRepository()
        self._config = config or get_config()

    def referral_url(self, code: str) -> str:
        return f"{self._config.referral_base_url.rstrip('/')}/signup?ref={code}"

    def _unique_code(self) -> str:
        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = generate_code()
            if not self._repo.code_exists(code):
                return code
            logger.warning(f"Referral code collision on attempt {attempt}")
        raise ServiceError("Failed to generate a unique referral code", f"{MAX_CODE_ATTEMPTS} attempts collided")

    def create(self, request: CreateReferralRequest) -> ReferralCreatedResponse:
        """
        Raises:
            ConflictError: this referrer already invited this email
            ServiceError: no unique code after MAX_CODE_ATTEMPTS
        """
        email = request.referred_email.strip().lower()
        if self._repo.exists(request.referrer_id, email):
            raise ConflictError("Referral already exists for this email", f"{request.referrer_id} -> {email}")

        referral = Referral(
            referrer_id=request.referrer_id,
            referred_email=email,
            referral_code=self._unique_code(),
            status=ReferralStatus.PENDING,
        )
        created = self._repo.create(referral)
        logger.info(f"Created referral {created.id} for referrer {created.referrer_id}")
        return ReferralCreatedResponse(
            referral_code=created.referral_code,
            referral_url=self.referral_url(created.referral_code),
        )

    def stats(self, user_id: str) -> ReferralStatsResponse:
        total = self._repo.count_by_status(user_id)
        successful = self._repo.count_by_status(user_id, ReferralStatus.CONVERTED)
        # Credits are issued per conversion; redemption is not tracked yet
        return ReferralStatsResponse(
            user_id=user_id,
            total_referrals=total,
            successful_referrals=successful,
            pending_credits=successful,
            redeemed_credits=0,
        )


__all__ = ["ReferralService", "generate_code", "CODE_ALPHABET", "CODE_LENGTH", "MAX_CODE_ATTEMPTS"]
