# ============================================================================
# AUTHOR INVITATION MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Author onboarding
# PURPOSE: Invitations linking an author's email to the domains they will own
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Author Invitation Model

An admin invites an author by email and names the domain(s) their account
will be linked to. Invitations expire INVITATION_TTL_DAYS after creation.

domainName is the first entry of domainNames; it is kept because older
documents and clients only know the single-domain field.
"""

from datetime import datetime, timedelta
from typing import ClassVar, List, Optional

from pydantic import Field, model_validator

from core.contracts import InvitationStatus
from core.models.base import CosmosDocument, utc_now

INVITATION_TTL_DAYS = 30


def _expiry() -> datetime:
    return utc_now() + timedelta(days=INVITATION_TTL_DAYS)


class AuthorInvitation(CosmosDocument):
    """
    Invitation for one email address.

    Container: AuthorInvitations, partition key /emailAddress
    """

    __container__: ClassVar[str] = "AuthorInvitations"
    __partition_key__: ClassVar[str] = "email_address"

    email_address: str
    domain_name: str = ""
    domain_names: List[str] = Field(default_factory=list)
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime = Field(default_factory=_expiry)
    accepted_at: Optional[datetime] = None
    user_oid: Optional[str] = None
    notes: Optional[str] = None
    invited_by: Optional[str] = None
    last_updated_at: Optional[datetime] = None
    last_email_sent_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _sync_domain_fields(self):
        # Legacy documents carry only domainName
        if not self.domain_names and self.domain_name:
            self.domain_names = [self.domain_name]
        elif self.domain_names and not self.domain_name:
            self.domain_name = self.domain_names[0]
        return self

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) >= self.expires_at


__all__ = ["AuthorInvitation", "INVITATION_TTL_DAYS"]
