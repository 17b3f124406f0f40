# ============================================================================
# WHMCS CLIENT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Registrar control panel API
# PURPOSE: Domain registration, name server updates and TLD pricing
# CREATED: 16 OCT 2026
# ============================================================================
"""
WHMCS Client

WHMCS exposes a single form-POST endpoint; the operation is the `action`
field and credentials travel as `identifier` / `secret` on every call.

register_domain and update_name_servers are workflow steps: they return
False on any failure instead of raising. get_tld_pricing backs an HTTP
endpoint and raises UpstreamError so the caller can answer 502.
"""

import logging
from typing import Any, Dict, List, Optional

from core.errors import UpstreamError
from core.models import DomainRegistration
from function.clients.base import UpstreamClient
from function.config import FunctionConfig, get_config

logger = logging.getLogger(__name__)

MIN_NAME_SERVERS = 2
MAX_NAME_SERVERS = 5

# ContactInformation attribute -> WHMCS field
CONTACT_FIELDS = (
    ("first_name", "firstname"),
    ("last_name", "lastname"),
    ("email_address", "email"),
    ("address", "address1"),
    ("address2", "address2"),
    ("city", "city"),
    ("state", "state"),
    ("zip_code", "postcode"),
    ("country", "country"),
    ("telephone_number", "phonenumber"),
)


class WhmcsClient(UpstreamClient):
    """Sync client for the WHMCS API."""

    service_name = "WHMCS"

    def __init__(self, config: Optional[FunctionConfig] = None, **kwargs):
        super().__init__(**kwargs)
        self._config = config or get_config()

    def _call(self, action: str, fields: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        POST one action.

        Raises:
            ConfigurationError: WHMCS settings missing
            UpstreamError: transport failure, non-2xx, or non-JSON body
        """
        self._require(self._config.has_whmcs_config, "WHMCS_API_URL, WHMCS_API_IDENTIFIER, WHMCS_API_SECRET")
        form = {
            "action": action,
            "identifier": self._config.whmcs_api_identifier,
            "secret": self._config.whmcs_api_secret,
            "responsetype": "json",
            **(fields or {}),
        }
        resp = self._request("POST", self._config.whmcs_api_url, data=form)
        if not resp.is_success:
            logger.error(f"WHMCS {action} returned HTTP {resp.status_code}: {resp.text[:500]}")
            raise UpstreamError("WHMCS error", f"{action} returned HTTP {resp.status_code}", self.service_name)
        try:
            body = resp.json()
        except ValueError:
            raise UpstreamError("WHMCS error", f"{action} returned a non-JSON body", self.service_name)
        if not isinstance(body, dict):
            raise UpstreamError("WHMCS error", f"{action} returned an unexpected body", self.service_name)
        return body

    # ------------------------------------------------------------------
    # Workflow steps
    # ------------------------------------------------------------------

    def register_domain(self, registration: DomainRegistration) -> bool:
        """DomainRegister; True iff WHMCS answers result == 'success'."""
        if registration.domain is None:
            logger.warning(f"Registration {registration.id} has no domain")
            return False

        domain_name = registration.full_domain_name
        fields = {"domain": domain_name}
        contact = registration.contact_information
        if contact is not None:
            for attr, whmcs_field in CONTACT_FIELDS:
                value = getattr(contact, attr)
                if value and value.strip():
                    fields[whmcs_field] = value

        logger.info(f"Registering domain {domain_name} via WHMCS")
        try:
            body = self._call("DomainRegister", fields)
        except UpstreamError as e:
            logger.error(f"WHMCS registration of {domain_name} failed: {e.message} ({e.details})")
            return False

        if body.get("result") == "success":
            logger.info(f"Registered domain {domain_name} via WHMCS")
            return True
        logger.warning(f"WHMCS returned non-success for {domain_name}: {body.get('message', 'Unknown error')}")
        return False

    def update_name_servers(self, domain_name: str, name_servers: List[str]) -> bool:
        """DomainUpdateNameservers with ns1..ns5; requires 2-5 servers."""
        servers = [ns for ns in (name_servers or []) if ns and ns.strip()]
        if not MIN_NAME_SERVERS <= len(servers) <= MAX_NAME_SERVERS:
            logger.warning(
                f"Cannot update name servers for {domain_name}: "
                f"{len(servers)} given, {MIN_NAME_SERVERS}-{MAX_NAME_SERVERS} required"
            )
            return False

        fields = {"domain": domain_name}
        for i, ns in enumerate(servers, start=1):
            fields[f"ns{i}"] = ns.strip().rstrip(".")

        try:
            body = self._call("DomainUpdateNameservers", fields)
        except UpstreamError as e:
            logger.error(f"WHMCS name server update for {domain_name} failed: {e.message} ({e.details})")
            return False

        if body.get("result") == "success":
            logger.info(f"Updated name servers for {domain_name}: {', '.join(servers)}")
            return True
        logger.warning(f"WHMCS name server update for {domain_name} non-success: {body.get('message')}")
        return False

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def get_tld_pricing(self, client_id: Optional[str] = None, currency_id: Optional[int] = None) -> Dict[str, Any]:
        """
        GetTLDPricing.

        Raises:
            UpstreamError: not configured, transport/HTTP failure, or result != success
        """
        fields: Dict[str, Any] = {}
        if client_id:
            fields["clientid"] = client_id
        if currency_id is not None:
            fields["currencyid"] = currency_id

        body = self._call("GetTLDPricing", fields)
        if body.get("result") != "success":
            raise UpstreamError("WHMCS error", body.get("message") or "GetTLDPricing failed", self.service_name)
        return body


__all__ = ["WhmcsClient", "MIN_NAME_SERVERS", "MAX_NAME_SERVERS"]
