# ============================================================================
# GOOGLE CLOUD DOMAINS CLIENT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Google Cloud Domains registrar
# PURPOSE: Submit domain registrations to Cloud Domains
# CREATED: 17 OCT 2026
# ============================================================================
"""
Google Cloud Domains Client

REST client for https://domains.googleapis.com/v1 authenticated with
google-auth application-default credentials.

Registration is a long-running operation on Google's side; this client
only submits it and reports whether the submission was accepted.

Contact privacy:
    GOOGLE_DOMAINS_CONTACT_PRIVACY selects private / redacted / public
    (default redacted). Some TLDs reject a privacy type; the request is
    retried with redacted, then public.

DNS:
    GOOGLE_DOMAINS_DNS_PROVIDER=custom uses GOOGLE_DOMAINS_CUSTOM_NAMESERVERS;
    anything else uses Google Domains DNS.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import google.auth
import google.auth.exceptions
import google.auth.transport.requests

from core.errors import ConfigurationError, UpstreamError
from core.models import DomainRegistration
from function.clients.base import UpstreamClient
from function.clients.us_states import normalize_us_state
from function.config import FunctionConfig, get_config

logger = logging.getLogger(__name__)

CLOUD_DOMAINS_BASE_URL = "https://domains.googleapis.com/v1"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
DOMAINS_LOCATION = "global"

PRIVATE = "PRIVATE_CONTACT_DATA"
REDACTED = "REDACTED_CONTACT_DATA"
PUBLIC = "PUBLIC_CONTACT_DATA"
PRIVACY_SETTINGS = {"private": PRIVATE, "redacted": REDACTED, "public": PUBLIC}
PRIVACY_REJECTED_MARKER = "does not support contact privacy type"

_REGION_ALIASES = {
    "united states": "US",
    "united states of america": "US",
    "usa": "US",
    "us": "US",
    "canada": "CA",
    "ca": "CA",
    "mexico": "MX",
    "mx": "MX",
}

# Application-default credentials, shared per process
_credentials = None
_credentials_lock = threading.Lock()


def get_google_token() -> str:
    """Access token from application-default credentials (refreshed when expired)."""
    global _credentials
    with _credentials_lock:
        if _credentials is None:
            _credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        if not _credentials.valid:
            _credentials.refresh(google.auth.transport.requests.Request())
        return _credentials.token


def normalize_location(location: Optional[str]) -> str:
    """Cloud Domains only serves 'global'; anything else is replaced."""
    value = (location or "").strip()
    if value and value.lower() != DOMAINS_LOCATION:
        logger.warning(f"Unsupported Google Domains location '{value}'; using '{DOMAINS_LOCATION}'")
    return DOMAINS_LOCATION


def normalize_region_code(country: Optional[str]) -> str:
    """CLDR region code: US/CA/MX aliases, else upper-cased two-letter codes, else as given."""
    value = (country or "").strip()
    if not value:
        return ""
    alias = _REGION_ALIASES.get(value.lower())
    if alias:
        return alias
    if len(value) == 2:
        return value.upper()
    return value


def normalize_phone_number(phone: Optional[str]) -> str:
    """Digits only, keeping a leading '+'."""
    value = (phone or "").strip()
    if not value:
        return ""
    digits = "".join(ch for ch in value if ch.isdigit())
    return f"+{digits}" if value.startswith("+") else digits


class GoogleDomainsClient(UpstreamClient):
    """Sync client for the Cloud Domains REST API."""

    service_name = "Google Domains"

    def __init__(
        self,
        config: Optional[FunctionConfig] = None,
        token_provider: Optional[Callable[[], str]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._config = config or get_config()
        self._token_provider = token_provider or get_google_token
        self._location = normalize_location(self._config.google_domains_location)

    @property
    def parent(self) -> str:
        self._require(self._config.has_google_domains_config, "GOOGLE_CLOUD_PROJECT_ID")
        return f"projects/{self._config.google_project_id}/locations/{self._location}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._token_provider()}"}

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def preferred_privacy(self) -> str:
        configured = (self._config.google_domains_contact_privacy or "").strip().lower()
        return PRIVACY_SETTINGS.get(configured, REDACTED)

    def dns_settings(self, domain_name: str) -> Dict[str, Any]:
        provider = (self._config.google_domains_dns_provider or "").strip().lower()
        if provider == "custom":
            servers = list(self._config.google_domains_custom_nameservers)
            if not servers:
                raise ConfigurationError(
                    "GOOGLE_DOMAINS_CUSTOM_NAMESERVERS must be set when GOOGLE_DOMAINS_DNS_PROVIDER=custom",
                    service=self.service_name,
                )
            logger.info(f"Using custom DNS for {domain_name} with {len(servers)} name servers")
            return {"customDns": {"nameServers": servers}}
        return {"googleDomainsDns": {"dsState": "DS_RECORDS_UNPUBLISHED"}}

    @staticmethod
    def build_contact(registration: DomainRegistration) -> Optional[Dict[str, Any]]:
        """Registrant contact in Cloud Domains shape; None when the name is missing."""
        contact = registration.contact_information
        if contact is None:
            return None
        name = f"{contact.first_name} {contact.last_name}".strip()
        if not name:
            return None

        region = normalize_region_code(contact.country)
        state = normalize_us_state(contact.state) if region == "US" else (contact.state or "").strip()
        address_lines = [contact.address]
        if contact.address2 and contact.address2.strip():
            address_lines.append(contact.address2.strip())

        return {
            "postalAddress": {
                "regionCode": region,
                "postalCode": contact.zip_code,
                "administrativeArea": state,
                "locality": contact.city,
                "recipients": [name],
                "addressLines": address_lines,
            },
            "email": contact.email_address,
            "phoneNumber": normalize_phone_number(contact.telephone_number),
        }

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _submit(self, body: Dict[str, Any]):
        return self._request(
            "POST",
            f"{CLOUD_DOMAINS_BASE_URL}/{self.parent}/registrations:register",
            json_body=body,
            headers=self._headers(),
        )

    def register_domain(self, registration: DomainRegistration) -> bool:
        """Submit a registration. True when Google accepted the long-running operation."""
        if registration.domain is None:
            logger.warning(f"Registration {registration.id} has no domain")
            return False
        domain_name = registration.full_domain_name

        contact = self.build_contact(registration)
        if contact is None:
            logger.warning(f"Contact first/last name required for Google Domains registration of {domain_name}")
            return False

        try:
            contact_settings = {
                "registrantContact": contact,
                "adminContact": contact,
                "technicalContact": contact,
            }
            body = {
                "registration": {
                    "domainName": domain_name,
                    "contactSettings": contact_settings,
                    "dnsSettings": self.dns_settings(domain_name),
                },
                "yearlyPrice": {"currencyCode": "USD", "units": "12"},
            }

            attempts: List[str] = []
            for privacy in (self.preferred_privacy(), REDACTED, PUBLIC):
                if privacy not in attempts:
                    attempts.append(privacy)

            for privacy in attempts:
                contact_settings["privacy"] = privacy
                resp = self._submit(body)
                if resp.is_success:
                    operation = self._json(resp).get("name")
                    logger.info(f"Google Domains registration started for {domain_name}: {operation}")
                    return True

                detail = resp.text
                if resp.status_code == 400 and PRIVACY_REJECTED_MARKER in detail.lower():
                    logger.warning(f"Privacy {privacy} rejected for {domain_name}; retrying with the next option")
                    continue
                if resp.status_code == 403:
                    logger.error(
                        f"Permission denied registering {domain_name}. Verify the Cloud Domains API is enabled "
                        f"for project {self._config.google_project_id} and the credentials are authorized."
                    )
                else:
                    logger.error(f"Google Domains register {domain_name} failed: HTTP {resp.status_code}: {detail[:500]}")
                return False

            logger.error(f"Every contact privacy option was rejected for {domain_name}")
            return False
        except UpstreamError as e:
            logger.error(f"Google Domains registration of {domain_name} failed: {e.message} ({e.details})")
            return False
        except google.auth.exceptions.GoogleAuthError as e:
            logger.error(f"Google credentials unavailable: {e}")
            return False


__all__ = [
    "GoogleDomainsClient",
    "get_google_token",
    "normalize_location",
    "normalize_region_code",
    "normalize_phone_number",
]
