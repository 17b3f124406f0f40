# ============================================================================
# AUTHENTICATED USER
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Auth - Caller identity from validated claims
# PURPOSE: Resolve upn, oid and roles from token claims
# CREATED: 16 OCT 2026
# ============================================================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.contracts import UserRole
from core.errors import AuthenticationError

NAME_CLAIM = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name"
EMAIL_CLAIM = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress"

# First present claim wins
UPN_CLAIMS = ("upn", "email", NAME_CLAIM, EMAIL_CLAIM, "preferred_username")


@dataclass
class AuthenticatedUser:
    """Caller identity for one request."""

    upn: str
    oid: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    claims: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "AuthenticatedUser":
        """
        Build from validated claims.

        Raises:
            AuthenticationError: no usable upn claim
        """
        upn = next((claims[c] for c in UPN_CLAIMS if claims.get(c)), None)
        if not upn:
            raise AuthenticationError("User UPN not found")

        roles = claims.get("roles") or []
        if isinstance(roles, str):
            roles = [roles]

        return cls(
            upn=upn,
            oid=claims.get("oid") or claims.get("sub"),
            roles=list(roles),
            claims=dict(claims),
        )

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(UserRole.ADMIN.value)

    @property
    def profile_key(self) -> Optional[str]:
        """Key a user profile is stored under: preferred_username, upn or email."""
        for claim in ("preferred_username", "upn", "email"):
            if self.claims.get(claim):
                return self.claims[claim]
        return None


__all__ = ["AuthenticatedUser", "UPN_CLAIMS"]
