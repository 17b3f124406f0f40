# ============================================================================
# AUTHOR INVITATION REPOSITORY
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - AuthorInvitations container access
# PURPOSE: Invitation creation and lookup by invited email
# CREATED: 19 OCT 2026
# ============================================================================

from typing import List, Optional

from core.contracts import InvitationStatus
from core.models import AuthorInvitation
from function.repositories.base import CosmosRepository, params


class AuthorInvitationRepository(CosmosRepository[AuthorInvitation]):
    """AuthorInvitations container (partition key /emailAddress)."""

    model = AuthorInvitation

    def get_by_email(self, email_address: str) -> Optional[AuthorInvitation]:
        """Most recent invitation for this email, read from its partition."""
        return self.first(
            "SELECT * FROM c WHERE c.emailAddress = @email ORDER BY c.createdAt DESC",
            params(email=email_address),
            partition_key=email_address,
        )

    def list_pending(self) -> List[AuthorInvitation]:
        return self.query(
            "SELECT * FROM c WHERE c.status = @status",
            params(status=InvitationStatus.PENDING.value),
        )


__all__ = ["AuthorInvitationRepository"]
