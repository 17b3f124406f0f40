# ============================================================================
# USER PROFILE REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - UserProfiles container access
# PURPOSE: Profile lookup by upn
# CREATED: 16 OCT 2026
# ============================================================================

from typing import Optional

from core.models import UserProfile
from function.repositories.base import CosmosRepository, params


class UserProfileRepository(CosmosRepository[UserProfile]):
    """UserProfiles container (partition key /upn)."""

    model = UserProfile

    def get_by_upn(self, upn: str) -> Optional[UserProfile]:
        return self.first("SELECT * FROM c WHERE c.upn = @upn", params(upn=upn), partition_key=upn)


__all__ = ["UserProfileRepository"]
