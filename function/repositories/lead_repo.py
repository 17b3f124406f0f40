# ============================================================================
# LEAD REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Leads container access
# PURPOSE: Lead creation and duplicate-email detection
# CREATED: 15 OCT 2026
# ============================================================================

from typing import Optional

from core.models import Lead
from function.repositories.base import CosmosRepository, params


class LeadRepository(CosmosRepository[Lead]):
    """Leads container (partition key /emailDomain)."""

    model = Lead

    def get_by_email(self, email: str) -> Optional[Lead]:
        """Lead with this (lowercase) email, searched in its domain partition."""
        email = email.strip().lower()
        return self.first(
            "SELECT * FROM c WHERE c.email = @email",
            params(email=email),
            partition_key=Lead.domain_of(email),
        )


__all__ = ["LeadRepository"]
