# ============================================================================
# REFERRAL MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Referral program
# PURPOSE: Track invitations sent by users and their conversion
# LAST_REVIEWED: 15 OCT 2026
# ============================================================================

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field

from core.contracts import ReferralStatus
from core.models.base import CosmosDocument, utc_now


class Referral(CosmosDocument):
    """
    One invitation from a referrer to an email address.

    Container: Referrals, partition key /referrerId
    """

    __container__: ClassVar[str] = "Referrals"
    __partition_key__: ClassVar[str] = "referrer_id"

    referrer_id: str
    referred_email: str
    referral_code: str = Field(..., min_length=8, max_length=8)
    status: ReferralStatus = ReferralStatus.PENDING
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    referred_user_id: Optional[str] = None
    converted_at: Optional[datetime] = None


__all__ = ["Referral"]
