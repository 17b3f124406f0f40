# ============================================================================
# REFERRAL REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Referrals container access
# PURPOSE: Referral creation, code uniqueness and per-referrer stats
# CREATED: 15 OCT 2026
# ============================================================================

from typing import List, Optional

from core.contracts import ReferralStatus
from core.models import Referral
from function.repositories.base import CosmosRepository, params


class ReferralRepository(CosmosRepository[Referral]):
    """Referrals container (partition key /referrerId)."""

    model = Referral

    def get_by_code(self, code: str) -> Optional[Referral]:
        return self.first("SELECT * FROM c WHERE c.referralCode = @code", params(code=code))

    def code_exists(self, code: str) -> bool:
        return self.get_by_code(code) is not None

    def exists(self, referrer_id: str, referred_email: str) -> bool:
        """True if this referrer already invited this email (case-insensitive)."""
        found = self.query_raw(
            "SELECT VALUE COUNT(1) FROM c WHERE c.referrerId = @referrerId "
            "AND LOWER(c.referredEmail) = @email",
            params(referrerId=referrer_id, email=referred_email.strip().lower()),
            partition_key=referrer_id,
        )
        return bool(found and found[0])

    def count_by_status(self, referrer_id: str, status: Optional[ReferralStatus] = None) -> int:
        if status is None:
            rows = self.query_raw(
                "SELECT VALUE COUNT(1) FROM c WHERE c.referrerId = @referrerId",
                params(referrerId=referrer_id),
                partition_key=referrer_id,
            )
        else:
            rows = self.query_raw(
                "SELECT VALUE COUNT(1) FROM c WHERE c.referrerId = @referrerId AND c.status = @status",
                params(referrerId=referrer_id, status=status.value),
                partition_key=referrer_id,
            )
        return int(rows[0]) if rows else 0


__all__ = ["ReferralRepository"]
