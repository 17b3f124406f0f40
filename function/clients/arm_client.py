# ============================================================================
# AZURE RESOURCE MANAGER CLIENTS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Azure DNS zones and Front Door custom domains
# PURPOSE: ARM REST calls authenticated with Managed Identity tokens
# CREATED: 16 OCT 2026
# ============================================================================
"""
Azure Resource Manager Clients

Plain REST against https://management.azure.com with bearer tokens from
infrastructure.auth.get_arm_token (azure-identity, cached).

    DnsZoneClient    Microsoft.Network/dnsZones          api-version 2018-05-01
    FrontDoorClient  Microsoft.Cdn/profiles/customDomains api-version 2023-05-01

Workflow-facing methods return bool and log failures; they never raise.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from azure.core.exceptions import ClientAuthenticationError

from core.errors import UpstreamError
from core.models import DomainRegistration
from function.clients.base import UpstreamClient
from function.config import FunctionConfig, get_config
from infrastructure.auth import get_arm_token

logger = logging.getLogger(__name__)

ARM_BASE_URL = "https://management.azure.com"
DNS_API_VERSION = "2018-05-01"
FRONT_DOOR_API_VERSION = "2023-05-01"


class ArmClient(UpstreamClient):
    """Base for ARM REST clients."""

    service_name = "Azure Resource Manager"

    def __init__(
        self,
        config: Optional[FunctionConfig] = None,
        token_provider: Optional[Callable[[], str]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._config = config or get_config()
        self._token_provider = token_provider or get_arm_token

    def _arm(self, method: str, path_or_url: str, api_version: str, json_body: Optional[Any] = None) -> httpx.Response:
        """Call ARM; path_or_url is a resource path or an absolute nextLink."""
        try:
            token = self._token_provider()
        except ClientAuthenticationError as e:
            raise UpstreamError("Azure authentication failed", str(e), self.service_name)

        headers = {"Authorization": f"Bearer {token}"}
        if path_or_url.startswith("https://"):
            return self._request(method, path_or_url, json_body=json_body, headers=headers)
        return self._request(
            method,
            f"{ARM_BASE_URL}{path_or_url}",
            json_body=json_body,
            params={"api-version": api_version},
            headers=headers,
        )


# ============================================================================
# AZURE DNS
# ============================================================================

class DnsZoneClient(ArmClient):
    """Azure DNS zones in AZURE_DNS_RESOURCE_GROUP."""

    service_name = "Azure DNS"

    def _zone_path(self, domain_name: str) -> str:
        self._require(self._config.has_dns_config, "AZURE_SUBSCRIPTION_ID, AZURE_DNS_RESOURCE_GROUP")
        return (
            f"/subscriptions/{self._config.azure_subscription_id}"
            f"/resourceGroups/{self._config.azure_dns_resource_group}"
            f"/providers/Microsoft.Network/dnsZones/{domain_name}"
        )

    def _get_zone(self, domain_name: str) -> Optional[Dict[str, Any]]:
        """Zone resource, or None if it does not exist."""
        resp = self._arm("GET", self._zone_path(domain_name), DNS_API_VERSION)
        if resp.status_code == 404:
            return None
        return self._expect_success(resp, f"GET dnsZones/{domain_name}")

    def ensure_zone(self, domain_name: str) -> bool:
        """Create the zone unless it already exists. True when the zone exists afterwards."""
        try:
            if self._get_zone(domain_name) is not None:
                logger.info(f"DNS zone {domain_name} already exists")
                return True

            logger.info(f"Creating DNS zone {domain_name}")
            resp = self._arm("PUT", self._zone_path(domain_name), DNS_API_VERSION, json_body={"location": "global"})
            self._expect_success(resp, f"PUT dnsZones/{domain_name}")
            logger.info(f"Created DNS zone {domain_name}")
            return True
        except UpstreamError as e:
            logger.error(f"Could not ensure DNS zone {domain_name}: {e.message} ({e.details})")
            return False

    def get_name_servers(self, domain_name: str) -> Optional[List[str]]:
        """Azure-assigned name servers of the zone, or None."""
        try:
            zone = self._get_zone(domain_name)
        except UpstreamError as e:
            logger.error(f"Could not read DNS zone {domain_name}: {e.message} ({e.details})")
            return None
        if zone is None:
            logger.warning(f"DNS zone {domain_name} not found")
            return None
        servers = (zone.get("properties") or {}).get("nameServers")
        return list(servers) if servers else None


# ============================================================================
# FRONT DOOR
# ============================================================================

class FrontDoorClient(ArmClient):
    """Custom domains on the Front Door (Standard/Premium) profile."""

    service_name = "Azure Front Door"

    def _custom_domains_path(self) -> str:
        self._require(
            self._config.has_frontdoor_config,
            "AZURE_SUBSCRIPTION_ID, AZURE_RESOURCE_GROUP_NAME, AZURE_FRONTDOOR_PROFILE_NAME",
        )
        return (
            f"/subscriptions/{self._config.azure_subscription_id}"
            f"/resourceGroups/{self._config.azure_resource_group}"
            f"/providers/Microsoft.Cdn/profiles/{self._config.azure_frontdoor_profile}/customDomains"
        )

    @staticmethod
    def resource_name(domain_name: str) -> str:
        """ARM resource name for a custom domain (dots are not allowed)."""
        return domain_name.replace(".", "-")

    def domain_exists(self, domain_name: str) -> bool:
        """
        True if any custom domain on the profile has this host name.

        Raises:
            UpstreamError: listing failed
        """
        url: Optional[str] = self._custom_domains_path()
        wanted = domain_name.lower()
        while url:
            body = self._expect_success(self._arm("GET", url, FRONT_DOOR_API_VERSION), "GET customDomains")
            for item in body.get("value", []):
                host = ((item.get("properties") or {}).get("hostName") or "").lower()
                if host == wanted:
                    logger.info(f"Domain {domain_name} already exists in Front Door")
                    return True
            url = body.get("nextLink")
        return False

    def add_domain(self, registration: DomainRegistration) -> bool:
        """Add the registration's domain as a custom domain with a managed TLS certificate."""
        if registration.domain is None:
            logger.warning(f"Registration {registration.id} has no domain")
            return False

        domain_name = registration.full_domain_name
        try:
            if self.domain_exists(domain_name):
                return True

            name = self.resource_name(domain_name)
            body = {
                "properties": {
                    "hostName": domain_name,
                    "tlsSettings": {
                        "certificateType": "ManagedCertificate",
                        "minimumTlsVersion": "TLS12",
                    },
                }
            }
            logger.info(f"Creating Front Door custom domain {domain_name} as {name}")
            resp = self._arm("PUT", f"{self._custom_domains_path()}/{name}", FRONT_DOOR_API_VERSION, json_body=body)
            self._expect_success(resp, f"PUT customDomains/{name}")
            logger.info(f"Initiated Front Door custom domain creation for {domain_name}")
            return True
        except UpstreamError as e:
            logger.error(f"Could not add {domain_name} to Front Door: {e.message} ({e.details})")
            return False


__all__ = [
    "ArmClient",
    "DnsZoneClient",
    "FrontDoorClient",
    "ARM_BASE_URL",
    "DNS_API_VERSION",
    "FRONT_DOOR_API_VERSION",
]
