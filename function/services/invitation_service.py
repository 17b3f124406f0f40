# ============================================================================
# INVITATION SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Author onboarding
# PURPOSE: Validate and record author invitations
# CREATED: 19 OCT 2026
# ============================================================================
"""
Invitation Service

Emails and domain names are trimmed and lowercased before they are checked
or stored, so the /emailAddress partition holds every invitation for one
address.

Inviting an address that already has an invitation logs a warning and
creates a new one; the newest invitation is the one that counts.

No mail provider is wired to this app, so emailSent is always false and the
invitation link is sent out of band.
"""

import logging
from typing import List, Optional

from core.errors import ValidationError
from core.models import AuthorInvitation
from function.models.requests import CreateAuthorInvitationRequest
from function.models.responses import AuthorInvitationResponse
from function.repositories.author_invitation_repo import AuthorInvitationRepository
from function.services.domain_validation import CONTROL_CHARS_RE, DOMAIN_LABEL_RE, is_valid_email

logger = logging.getLogger(__name__)

MAX_DOMAIN_LENGTH = 253


def is_valid_invitation_domain(name: str) -> bool:
    """Fully qualified name: two or more labels, alphabetic last label."""
    if not name or len(name) > MAX_DOMAIN_LENGTH or CONTROL_CHARS_RE.search(name):
        return False
    labels = name.split(".")
    if len(labels) < 2:
        return False
    if not all(len(label) <= 63 and DOMAIN_LABEL_RE.fullmatch(label) for label in labels):
        return False
    return labels[-1].isalpha() and len(labels[-1]) >= 2


def _domain_names(request: CreateAuthorInvitationRequest) -> List[str]:
    """domainName then domainNames, normalized, blanks and repeats dropped."""
    names: List[str] = []
    for raw in [request.domain_name, *(request.domain_names or [])]:
        name = (raw or "").strip().lower()
        if name and name not in names:
            names.append(name)
    return names


class InvitationService:
    """Author invitation operations."""

    def __init__(self, repo: Optional[AuthorInvitationRepository] = None):
        self._repo = repo or AuthorInvitationRepository()

    def create(self, request: CreateAuthorInvitationRequest, invited_by: Optional[str] = None) -> AuthorInvitationResponse:
        """
        Raises:
            ValidationError: email or domain missing or malformed
        """
        email = (request.email_address or "").strip().lower()
        if not email:
            raise ValidationError("Email address is required", field="emailAddress")
        if CONTROL_CHARS_RE.search(email) or not is_valid_email(email):
            raise ValidationError(f"Invalid email address format: {email}", field="emailAddress", value=email)

        domains = _domain_names(request)
        if not domains:
            raise ValidationError("Domain name is required", field="domainName")
        invalid = [d for d in domains if not is_valid_invitation_domain(d)]
        if invalid:
            raise ValidationError(
                f"Invalid domain name format: {invalid[0]}",
                errors=[f"Invalid domain name format: {d}" for d in invalid],
                field="domainNames",
            )

        existing = self._repo.get_by_email(email)
        if existing is not None:
            logger.warning(f"Invitation already exists for {email} (status {existing.status.value}); creating another")

        invitation = AuthorInvitation(
            email_address=email,
            domain_names=domains,
            notes=request.notes,
            invited_by=invited_by,
        )
        created = self._repo.create(invitation)
        logger.info(f"Created invitation {created.id} for {email} ({', '.join(domains)})")
        logger.warning(f"No email provider configured; invitation {created.id} was not emailed")
        return AuthorInvitationResponse.from_entity(created, email_sent=False)


__all__ = ["InvitationService", "is_valid_invitation_domain", "MAX_DOMAIN_LENGTH"]
