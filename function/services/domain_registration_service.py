# ============================================================================
# DOMAIN REGISTRATION SERVICE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Domain registration lifecycle
# PURPOSE: User CRUD, admin completion workflow and change-feed provisioning
# CREATED: 17 OCT 2026
# ============================================================================
"""
Domain Registration Service

User operations:
    create / list / get / update (update requires an active subscription)

Admin completion workflow (best-effort, sequential):
    1. WHMCS DomainRegister
    2. Azure DNS zone            (only after step 1 succeeded)
    3. WHMCS name server update  (only after step 1 succeeded)
    4. Front Door custom domain  (always attempted)

Each step is wrapped on its own: an exception or False result marks the
step failed and the workflow moves on. The registration ends Completed
only if every step succeeded, otherwise InProgress so it can be retried
by running the workflow again. There is no rollback of completed steps.

Change-feed provisioning:
    Pending registrations written to the DomainRegistrations container are
    pushed to Front Door and (separately) submitted to Google Cloud Domains.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.contracts import DomainRegistrationStatus
from core.errors import ConflictError, ForbiddenError, NotFoundError, ServiceError, ValidationError
from core.logging import log_checkpoint, log_context
from core.models import ContactInformation, Domain, DomainRegistration, utc_now
from function.clients.arm_client import DnsZoneClient, FrontDoorClient
from function.clients.google_domains_client import GoogleDomainsClient
from function.clients.stripe_client import StripeClient
from function.clients.whmcs_client import MAX_NAME_SERVERS, MIN_NAME_SERVERS, WhmcsClient
from function.models.requests import CreateDomainRegistrationRequest, UpdateDomainRegistrationRequest
from function.repositories.domain_registration_repo import DomainRegistrationRepository
from function.repositories.user_profile_repo import UserProfileRepository
from function.services.domain_validation import ensure_valid_contact, ensure_valid_domain

logger = logging.getLogger(__name__)

NO_UPDATE_FIELDS_MESSAGE = (
    "At least one field must be provided for update (Domain, ContactInformation, or Status)."
)
NO_SUBSCRIPTION_MESSAGE = (
    "User does not have an active subscription. Please subscribe to update domain registrations."
)


@dataclass
class CompletionResult:
    """Outcome of one completion workflow run."""

    registration: DomainRegistration
    whmcs_registered: bool
    dns_configured: bool
    front_door_configured: bool

    @property
    def completed(self) -> bool:
        return self.whmcs_registered and self.dns_configured and self.front_door_configured

    def steps(self) -> Dict[str, bool]:
        return {
            "whmcs_registration": self.whmcs_registered,
            "dns_configuration": self.dns_configured,
            "front_door": self.front_door_configured,
        }


class DomainRegistrationService:
    """Domain registration operations."""

    def __init__(
        self,
        repo: Optional[DomainRegistrationRepository] = None,
        profile_repo: Optional[UserProfileRepository] = None,
        stripe: Optional[StripeClient] = None,
        whmcs: Optional[WhmcsClient] = None,
        dns: Optional[DnsZoneClient] = None,
        front_door: Optional[FrontDoorClient] = None,
        google_domains: Optional[GoogleDomainsClient] = None,
    ):
        self._repo = repo or DomainRegistrationRepository()
        self._profile_repo = profile_repo
        self._stripe = stripe
        self._whmcs = whmcs
        self._dns = dns
        self._front_door = front_door
        self._google_domains = google_domains

    # Clients are built on first use: most operations need none of them

    @property
    def profile_repo(self) -> UserProfileRepository:
        if self._profile_repo is None:
            self._profile_repo = UserProfileRepository()
        return self._profile_repo

    @property
    def stripe(self) -> StripeClient:
        if self._stripe is None:
            self._stripe = StripeClient()
        return self._stripe

    @property
    def whmcs(self) -> WhmcsClient:
        if self._whmcs is None:
            self._whmcs = WhmcsClient()
        return self._whmcs

    @property
    def dns(self) -> DnsZoneClient:
        if self._dns is None:
            self._dns = DnsZoneClient()
        return self._dns

    @property
    def front_door(self) -> FrontDoorClient:
        if self._front_door is None:
            self._front_door = FrontDoorClient()
        return self._front_door

    @property
    def google_domains(self) -> GoogleDomainsClient:
        if self._google_domains is None:
            self._google_domains = GoogleDomainsClient()
        return self._google_domains

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------

    def create(self, upn: str, request: CreateDomainRegistrationRequest) -> DomainRegistration:
        """
        Validate and store a new Pending registration.

        Raises:
            ValidationError: domain or contact rules violated
        """
        domain = Domain.model_validate(request.domain.model_dump())
        contact = ContactInformation.model_validate(request.contact_information.model_dump())
        ensure_valid_domain(domain)
        ensure_valid_contact(contact)

        logger.info(f"Creating domain registration for {upn}: {domain.full_domain_name}")
        registration = DomainRegistration(
            upn=upn,
            domain=domain,
            contact_information=contact,
            status=DomainRegistrationStatus.PENDING,
        )
        return self._repo.create(registration)

    def list_for_user(self, upn: str) -> List[DomainRegistration]:
        return self._repo.list_by_user(upn)

    def get_for_user(self, upn: str, registration_id: str) -> DomainRegistration:
        """Raises NotFoundError unless the user owns a registration with this id."""
        registration = self._repo.get_for_user(registration_id, upn)
        if registration is None:
            raise NotFoundError("Domain registration not found", f"No registration '{registration_id}' for this user")
        return registration

    def ensure_active_subscription(self, upn: str) -> None:
        """
        Raises:
            ForbiddenError: no linked Stripe customer, or no active/trialing subscription
        """
        profile = self.profile_repo.get_by_upn(upn)
        if profile is None or not profile.stripe_customer_id:
            logger.warning(f"User {upn} has no Stripe customer")
            raise ForbiddenError(NO_SUBSCRIPTION_MESSAGE)
        if not self.stripe.has_active_subscription(profile.stripe_customer_id):
            logger.warning(f"User {upn} has no active subscription")
            raise ForbiddenError(NO_SUBSCRIPTION_MESSAGE)

    def update(
        self,
        upn: str,
        registration_id: str,
        request: UpdateDomainRegistrationRequest,
    ) -> DomainRegistration:
        """
        Apply a partial update.

        Raises:
            ValidationError: nothing to update, or domain/contact rules violated
            ForbiddenError: caller has no active subscription
            NotFoundError: registration does not exist for this user
        """
        if not request.has_updates:
            raise ValidationError(NO_UPDATE_FIELDS_MESSAGE)

        self.ensure_active_subscription(upn)
        registration = self.get_for_user(upn, registration_id)

        if request.domain is not None:
            domain = Domain.model_validate(request.domain.model_dump())
            ensure_valid_domain(domain)
            registration.domain = domain
        if request.contact_information is not None:
            contact = ContactInformation.model_validate(request.contact_information.model_dump())
            ensure_valid_contact(contact)
            registration.contact_information = contact
        if request.status is not None:
            registration.status = request.status

        registration.last_updated_at = utc_now()
        logger.info(f"Updating domain registration {registration_id} for {upn}")
        return self._repo.replace(registration)

    # ------------------------------------------------------------------
    # Admin completion workflow
    # ------------------------------------------------------------------

    def _run_step(self, name: str, step: Callable[[], bool]) -> bool:
        """Run one workflow step; any exception counts as failure."""
        try:
            ok = bool(step())
        except Exception as e:
            logger.exception(f"Step {name} raised: {e}")
            ok = False
        log_checkpoint(name, {"success": ok}, logger)
        return ok

    def _configure_dns(self, domain_name: str) -> bool:
        """Zone exists, it has 2-5 name servers, and WHMCS points the domain at them."""
        if not self.dns.ensure_zone(domain_name):
            logger.warning(f"DNS zone for {domain_name} could not be ensured")
            return False

        name_servers = self.dns.get_name_servers(domain_name)
        if not name_servers or not MIN_NAME_SERVERS <= len(name_servers) <= MAX_NAME_SERVERS:
            logger.warning(f"DNS zone for {domain_name} returned unusable name servers: {name_servers}")
            return False

        return self.whmcs.update_name_servers(domain_name, name_servers)

    def complete_registration(self, registration_id: str) -> CompletionResult:
        """
        Run the completion workflow for any user's registration.

        Raises:
            NotFoundError: no registration with this id
            ConflictError: registration already Completed or Cancelled
            ValidationError: registration has no domain
            ServiceError: the outcome could not be saved (details list the step results)
        """
        registration = self._repo.find_by_id(registration_id)
        if registration is None:
            raise NotFoundError("Domain registration not found", f"No registration '{registration_id}'")
        if registration.status.is_closed():
            raise ConflictError(
                f"Domain registration is already {registration.status.value}",
                f"Registration '{registration_id}' cannot be completed again",
            )
        if registration.domain is None:
            raise ValidationError("Domain registration has no domain")

        domain_name = registration.full_domain_name
        with log_context(registration_id=registration_id, upn=registration.upn, operation="complete_registration"):
            logger.info(f"Completing domain registration {registration_id} ({domain_name})")

            whmcs_ok = self._run_step("whmcs_registration", lambda: self.whmcs.register_domain(registration))

            if whmcs_ok:
                dns_ok = self._run_step("dns_configuration", lambda: self._configure_dns(domain_name))
            else:
                dns_ok = False
                log_checkpoint("dns_configuration", {"success": False, "skipped": True}, logger)

            front_door_ok = self._run_step("front_door", lambda: self.front_door.add_domain(registration))

            all_ok = whmcs_ok and dns_ok and front_door_ok
            registration.status = DomainRegistrationStatus.COMPLETED if all_ok else DomainRegistrationStatus.IN_PROGRESS
            registration.last_updated_at = utc_now()
            steps = {"whmcs_registration": whmcs_ok, "dns_configuration": dns_ok, "front_door": front_door_ok}
            try:
                saved = self._repo.replace(registration)
            except Exception as e:
                # Side effects already happened upstream; keep their outcome in the log and the error
                outcome = ", ".join(f"{name}={ok}" for name, ok in steps.items())
                log_checkpoint("registration_saved", {"success": False, "steps": steps}, logger)
                logger.exception(f"Could not save registration {registration_id} after workflow ({outcome}): {e}")
                raise ServiceError(
                    "Failed to save domain registration",
                    f"Workflow steps: {outcome}",
                ) from e

            logger.info(
                f"Registration {registration_id} -> {saved.status.value} "
                f"(whmcs={whmcs_ok}, dns={dns_ok}, front_door={front_door_ok})"
            )

        return CompletionResult(
            registration=saved,
            whmcs_registered=whmcs_ok,
            dns_configured=dns_ok,
            front_door_configured=front_door_ok,
        )

    # ------------------------------------------------------------------
    # Change-feed provisioning
    # ------------------------------------------------------------------

    def _process_changes(
        self,
        documents: Iterable[Dict[str, Any]],
        action: Callable[[DomainRegistration], bool],
        label: str,
    ) -> int:
        """
        Apply action to each Pending registration with a domain.

        Returns:
            Number of registrations the action succeeded for
        """
        succeeded = 0
        for doc in documents:
            doc_id = doc.get("id", "<unknown>")
            try:
                registration = DomainRegistration.from_document(doc)
                if registration.domain is None:
                    logger.info(f"{label}: skipping {doc_id} (no domain)")
                    continue
                if registration.status != DomainRegistrationStatus.PENDING:
                    logger.info(f"{label}: skipping {doc_id} (status {registration.status.value})")
                    continue

                with log_context(registration_id=registration.id, upn=registration.upn, operation=label):
                    if action(registration):
                        succeeded += 1
                        logger.info(f"{label}: provisioned {registration.full_domain_name}")
                    else:
                        logger.warning(f"{label}: failed for {registration.full_domain_name}")
            except Exception as e:
                logger.exception(f"{label}: error processing {doc_id}: {e}")
        return succeeded

    def provision_front_door(self, documents: Iterable[Dict[str, Any]]) -> int:
        return self._process_changes(documents, self.front_door.add_domain, "front_door_provisioning")

    def provision_google_domains(self, documents: Iterable[Dict[str, Any]]) -> int:
        return self._process_changes(documents, self.google_domains.register_domain, "google_domains_registration")


__all__ = [
    "DomainRegistrationService",
    "CompletionResult",
    "NO_UPDATE_FIELDS_MESSAGE",
    "NO_SUBSCRIPTION_MESSAGE",
]
