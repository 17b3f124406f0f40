# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Foundation - Core enums shared by models, services and blueprints
# PURPOSE: Status and classification enums for platform entities
# LAST_REVIEWED: 14 OCT 2026
# EXPORTS: DomainRegistrationStatus, InvitationStatus, ReferralStatus, LeadSource, EmailServiceStatus, UserRole
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the author platform.

These enums cross every boundary:
- Cosmos DB documents (stored by value)
- HTTP payloads (camelCase JSON)
- Python (internal processing)
"""

from enum import Enum


# ============================================================================
# STATUS ENUMS
# ============================================================================

class DomainRegistrationStatus(str, Enum):
    """
    Domain registration lifecycle states.

    State transitions:
        PENDING -> IN_PROGRESS -> COMPLETED
                              -> FAILED
                -> CANCELLED

    Older documents stored the status as a number (0-4); those are
    accepted on read and rewritten by value on the next save.
    """
    PENDING = "Pending"            # Created, provisioning not started
    IN_PROGRESS = "InProgress"     # Provisioning started, at least one step outstanding
    COMPLETED = "Completed"        # Registrar, DNS and Front Door all done
    FAILED = "Failed"              # Provisioning abandoned
    CANCELLED = "Cancelled"        # Cancelled by user or admin

    @classmethod
    def _missing_(cls, value):
        legacy = {
            0: cls.PENDING,
            1: cls.IN_PROGRESS,
            2: cls.COMPLETED,
            3: cls.FAILED,
            4: cls.CANCELLED,
        }
        if isinstance(value, str):
            if value.isdigit():
                return legacy.get(int(value))
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
            return None
        if isinstance(value, int):
            return legacy.get(value)
        return None

    def is_closed(self) -> bool:
        """Closed registrations cannot be completed again."""
        return self in (DomainRegistrationStatus.COMPLETED, DomainRegistrationStatus.CANCELLED)


class InvitationStatus(str, Enum):
    """Author invitation lifecycle: PENDING -> ACCEPTED, or EXPIRED once past expiresAt."""
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    EXPIRED = "Expired"


class ReferralStatus(str, Enum):
    """Referral lifecycle: PENDING -> CONVERTED once the referred user signs up."""
    PENDING = "Pending"
    CONVERTED = "Converted"


class EmailServiceStatus(str, Enum):
    """Sync state of a lead with the mailing-list provider."""
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


# ============================================================================
# CLASSIFICATION ENUMS
# ============================================================================

class LeadSource(str, Enum):
    """Where a lead was captured."""
    LANDING_PAGE = "landing_page"
    BLOG = "blog"
    EXIT_INTENT = "exit_intent"
    NEWSLETTER = "newsletter"


class UserRole(str, Enum):
    """Role claims recognised in access tokens."""
    ADMIN = "Admin"


__all__ = [
    "DomainRegistrationStatus",
    "InvitationStatus",
    "ReferralStatus",
    "EmailServiceStatus",
    "LeadSource",
    "UserRole",
]
