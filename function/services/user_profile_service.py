# ============================================================================
# USER PROFILE SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - User profile bootstrap
# PURPOSE: Ensure every authenticated caller has a UserProfiles document
# CREATED: 16 OCT 2026
# ============================================================================

import logging
from typing import TYPE_CHECKING, Optional

from core.errors import AuthenticationError
from core.models import UserProfile
from function.repositories.user_profile_repo import UserProfileRepository

if TYPE_CHECKING:
    from function.auth.identity import AuthenticatedUser

logger = logging.getLogger(__name__)


class UserProfileService:
    """Creates and updates user profiles."""

    def __init__(self, repo: Optional[UserProfileRepository] = None):
        self._repo = repo or UserProfileRepository()

    def ensure_profile(self, user: "AuthenticatedUser") -> UserProfile:
        """
        Return the caller's profile, creating it on first use.

        Raises:
            AuthenticationError: the token carries no profile key claim
        """
        key = user.profile_key
        if not key:
            raise AuthenticationError("User profile key not found in token")

        profile = self._repo.get_by_upn(key)
        if profile is not None:
            return profile

        logger.info(f"Creating user profile for {key}")
        return self._repo.create(UserProfile(upn=key, oid=user.oid))

    def link_stripe_customer(self, profile: UserProfile, customer_id: str) -> UserProfile:
        profile.stripe_customer_id = customer_id
        logger.info(f"Linked Stripe customer {customer_id} to {profile.upn}")
        return self._repo.upsert(profile)


__all__ = ["UserProfileService"]
