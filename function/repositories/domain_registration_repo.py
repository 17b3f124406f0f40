# ============================================================================
# DOMAIN REGISTRATION REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - DomainRegistrations container access
# PURPOSE: Per-user and admin lookups of domain registrations
# CREATED: 15 OCT 2026
# ============================================================================

from typing import List, Optional

from core.models import DomainRegistration
from function.repositories.base import CosmosRepository, params


class DomainRegistrationRepository(CosmosRepository[DomainRegistration]):
    """DomainRegistrations container (partition key /upn)."""

    model = DomainRegistration

    def list_by_user(self, upn: str) -> List[DomainRegistration]:
        """All registrations for a user, newest first."""
        return self.query(
            "SELECT * FROM c WHERE c.upn = @upn ORDER BY c.createdAt DESC",
            params(upn=upn),
            partition_key=upn,
        )

    def get_for_user(self, registration_id: str, upn: str) -> Optional[DomainRegistration]:
        return self.get(registration_id, upn)

    def find_by_domain(self, top_level_domain: str, second_level_domain: str) -> Optional[DomainRegistration]:
        """Any registration for the domain, across users."""
        return self.first(
            "SELECT * FROM c WHERE LOWER(c.domain.topLevelDomain) = @tld "
            "AND LOWER(c.domain.secondLevelDomain) = @sld",
            params(tld=top_level_domain.lower(), sld=second_level_domain.lower()),
        )


__all__ = ["DomainRegistrationRepository"]
