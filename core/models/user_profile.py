# ============================================================================
# USER PROFILE MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Authenticated user record
# PURPOSE: Link an identity-provider user to billing (Stripe customer)
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================

from typing import ClassVar, Optional

from core.models.base import CosmosDocument


class UserProfile(CosmosDocument):
    """
    Platform user, created on first authenticated request.

    Container: UserProfiles, partition key /upn
    """

    __container__: ClassVar[str] = "UserProfiles"
    __partition_key__: ClassVar[str] = "upn"

    upn: str
    oid: Optional[str] = None
    stripe_customer_id: Optional[str] = None


__all__ = ["UserProfile"]
