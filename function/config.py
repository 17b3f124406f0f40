# ============================================================================
# FUNCTION APP CONFIGURATION
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Configuration management
# PURPOSE: Environment-based configuration for function app
# CREATED: 14 OCT 2026
# ============================================================================
"""
Function App Configuration

Loads configuration from environment variables (app settings in Azure,
local.settings.json locally) with sensible defaults.

Required for startup:
- Cosmos DB: COSMOSDB_CONNECTION_STRING, or COSMOSDB_ENDPOINT_URI with
  COSMOSDB_PRIMARY_KEY or USE_MANAGED_IDENTITY=true
- Token validation: AAD_TENANT_ID or OPEN_ID_CONNECT_METADATA_URL, plus
  AAD_AUDIENCE or AAD_CLIENT_ID

Everything else is an optional integration; the matching client raises
ConfigurationError when it is used without its settings.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_REFERRAL_BASE_URL = "https://inkstainedwretches.com"


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Environment variable with empty strings treated as unset."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_list(key: str) -> List[str]:
    """Comma-separated environment variable as a list."""
    raw = _env(key, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class FunctionConfig:
    """Configuration for the function app."""

    # Cosmos DB
    cosmos_connection_string: Optional[str] = None
    cosmos_endpoint: Optional[str] = None
    cosmos_key: Optional[str] = None
    cosmos_database_id: str = "OnePageAuthorDb"
    cosmos_ensure_containers: bool = False
    use_managed_identity: bool = False

    # Token validation
    aad_tenant_id: Optional[str] = None
    aad_audience: Optional[str] = None
    aad_client_id: Optional[str] = None
    openid_metadata_url: Optional[str] = None
    aad_valid_issuers: List[str] = field(default_factory=list)

    # WHMCS
    whmcs_api_url: Optional[str] = None
    whmcs_api_identifier: Optional[str] = None
    whmcs_api_secret: Optional[str] = None
    whmcs_client_id: Optional[str] = None

    # Azure Resource Manager (DNS zones, Front Door)
    azure_subscription_id: Optional[str] = None
    azure_dns_resource_group: Optional[str] = None
    azure_resource_group: Optional[str] = None
    azure_frontdoor_profile: Optional[str] = None
    azure_client_id: Optional[str] = None

    # Google Cloud Domains
    google_project_id: Optional[str] = None
    google_domains_location: Optional[str] = None
    google_domains_contact_privacy: Optional[str] = None
    google_domains_dns_provider: Optional[str] = None
    google_domains_custom_nameservers: List[str] = field(default_factory=list)

    # Stripe
    stripe_api_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None

    # Penguin Random House
    prh_api_url: Optional[str] = None
    prh_api_key: Optional[str] = None
    prh_domain: Optional[str] = None
    prh_search_endpoint: Optional[str] = None
    prh_titles_endpoint: Optional[str] = None

    # Amazon Product Advertising API
    amazon_access_key: Optional[str] = None
    amazon_secret_key: Optional[str] = None
    amazon_partner_tag: Optional[str] = None
    amazon_region: Optional[str] = None
    amazon_marketplace: Optional[str] = None
    amazon_api_endpoint: Optional[str] = None

    # Referrals
    referral_base_url: str = DEFAULT_REFERRAL_BASE_URL

    # App Info
    version: str = "1.0.0"
    service_name: str = "author-platform-functions"

    @classmethod
    def from_env(cls) -> "FunctionConfig":
        """Load configuration from environment variables."""
        return cls(
            # Cosmos DB
            cosmos_connection_string=_env("COSMOSDB_CONNECTION_STRING"),
            cosmos_endpoint=_env("COSMOSDB_ENDPOINT_URI"),
            cosmos_key=_env("COSMOSDB_PRIMARY_KEY"),
            cosmos_database_id=_env("COSMOSDB_DATABASE_ID", "OnePageAuthorDb"),
            cosmos_ensure_containers=_env("COSMOSDB_ENSURE_CONTAINERS", "false").lower() == "true",
            use_managed_identity=_env("USE_MANAGED_IDENTITY", "false").lower() == "true",
            # Token validation
            aad_tenant_id=_env("AAD_TENANT_ID"),
            aad_audience=_env("AAD_AUDIENCE"),
            aad_client_id=_env("AAD_CLIENT_ID"),
            openid_metadata_url=_env("OPEN_ID_CONNECT_METADATA_URL"),
            aad_valid_issuers=_env_list("AAD_VALID_ISSUERS"),
            # WHMCS
            whmcs_api_url=_env("WHMCS_API_URL"),
            whmcs_api_identifier=_env("WHMCS_API_IDENTIFIER"),
            whmcs_api_secret=_env("WHMCS_API_SECRET"),
            whmcs_client_id=_env("WHMCS_CLIENT_ID"),
            # Azure Resource Manager
            azure_subscription_id=_env("AZURE_SUBSCRIPTION_ID"),
            azure_dns_resource_group=_env("AZURE_DNS_RESOURCE_GROUP"),
            azure_resource_group=_env("AZURE_RESOURCE_GROUP_NAME"),
            azure_frontdoor_profile=_env("AZURE_FRONTDOOR_PROFILE_NAME"),
            azure_client_id=_env("AZURE_CLIENT_ID"),
            # Google Cloud Domains
            google_project_id=_env("GOOGLE_CLOUD_PROJECT_ID"),
            google_domains_location=_env("GOOGLE_DOMAINS_LOCATION"),
            google_domains_contact_privacy=_env("GOOGLE_DOMAINS_CONTACT_PRIVACY"),
            google_domains_dns_provider=_env("GOOGLE_DOMAINS_DNS_PROVIDER"),
            google_domains_custom_nameservers=_env_list("GOOGLE_DOMAINS_CUSTOM_NAMESERVERS"),
            # Stripe
            stripe_api_key=_env("STRIPE_API_KEY"),
            stripe_webhook_secret=_env("STRIPE_WEBHOOK_SECRET"),
            # Penguin Random House
            prh_api_url=_env("PENGUIN_RANDOM_HOUSE_API_URL"),
            prh_api_key=_env("PENGUIN_RANDOM_HOUSE_API_KEY"),
            prh_domain=_env("PENGUIN_RANDOM_HOUSE_API_DOMAIN"),
            prh_search_endpoint=_env("PENGUIN_RANDOM_HOUSE_SEARCH_API"),
            prh_titles_endpoint=_env("PENGUIN_RANDOM_HOUSE_LIST_TITLES_BY_AUTHOR_API"),
            # Amazon
            amazon_access_key=_env("AMAZON_PRODUCT_ACCESS_KEY"),
            amazon_secret_key=_env("AMAZON_PRODUCT_SECRET_KEY"),
            amazon_partner_tag=_env("AMAZON_PRODUCT_PARTNER_TAG"),
            amazon_region=_env("AMAZON_PRODUCT_REGION"),
            amazon_marketplace=_env("AMAZON_PRODUCT_MARKETPLACE"),
            amazon_api_endpoint=_env("AMAZON_PRODUCT_API_ENDPOINT"),
            # Referrals
            referral_base_url=_env("REFERRAL_BASE_URL", DEFAULT_REFERRAL_BASE_URL).rstrip("/"),
            # App Info
            version=_env("APP_VERSION", "1.0.0"),
            service_name=_env("SERVICE_NAME", "author-platform-functions"),
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def openid_metadata_address(self) -> Optional[str]:
        """OIDC discovery document URL (explicit, or derived from the tenant)."""
        if self.openid_metadata_url:
            return self.openid_metadata_url
        if self.aad_tenant_id:
            return f"https://login.microsoftonline.com/{self.aad_tenant_id}/v2.0/.well-known/openid-configuration"
        return None

    @property
    def token_audience(self) -> Optional[str]:
        return self.aad_audience or self.aad_client_id

    # ------------------------------------------------------------------
    # Feature checks
    # ------------------------------------------------------------------

    @property
    def has_cosmos_config(self) -> bool:
        """Check if Cosmos DB is configured."""
        if self.cosmos_connection_string:
            return True
        return bool(self.cosmos_endpoint and (self.cosmos_key or self.use_managed_identity))

    @property
    def has_auth_config(self) -> bool:
        """Check if token validation is configured."""
        return bool(self.openid_metadata_address and self.token_audience)

    @property
    def has_whmcs_config(self) -> bool:
        return bool(self.whmcs_api_url and self.whmcs_api_identifier and self.whmcs_api_secret)

    @property
    def has_dns_config(self) -> bool:
        return bool(self.azure_subscription_id and self.azure_dns_resource_group)

    @property
    def has_frontdoor_config(self) -> bool:
        return bool(self.azure_subscription_id and self.azure_resource_group and self.azure_frontdoor_profile)

    @property
    def has_google_domains_config(self) -> bool:
        return bool(self.google_project_id)

    @property
    def has_stripe_config(self) -> bool:
        return bool(self.stripe_api_key)

    @property
    def stripe_mode(self) -> str:
        """Stripe key mode from its prefix: test, live, or unknown."""
        key = self.stripe_api_key or ""
        if key.startswith("sk_test_"):
            return "test"
        if key.startswith("sk_live_"):
            return "live"
        return "unknown"

    @property
    def has_penguin_config(self) -> bool:
        return all([
            self.prh_api_url, self.prh_api_key, self.prh_domain,
            self.prh_search_endpoint, self.prh_titles_endpoint,
        ])

    @property
    def has_amazon_config(self) -> bool:
        return all([
            self.amazon_access_key, self.amazon_secret_key, self.amazon_partner_tag,
            self.amazon_region, self.amazon_api_endpoint,
        ])

    def integration_summary(self) -> dict:
        """Which optional integrations are configured (no secrets)."""
        return {
            "whmcs": self.has_whmcs_config,
            "azure_dns": self.has_dns_config,
            "front_door": self.has_frontdoor_config,
            "google_domains": self.has_google_domains_config,
            "stripe": self.has_stripe_config,
            "penguin_random_house": self.has_penguin_config,
            "amazon": self.has_amazon_config,
        }


# Global config singleton
_config: Optional[FunctionConfig] = None


def get_config() -> FunctionConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = FunctionConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration (tests, settings reload)."""
    global _config
    _config = None


__all__ = ["FunctionConfig", "get_config", "reset_config"]
