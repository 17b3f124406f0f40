# ============================================================================
# THIRD-PARTY CLIENTS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Exports
# PURPOSE: Sync httpx clients for every external integration
# CREATED: 16 OCT 2026
# ============================================================================
"""
Third-Party Clients

Each client reads its settings from FunctionConfig and raises
ConfigurationError when used without them.
"""

from function.clients.base import UpstreamClient
from function.clients.amazon_client import AmazonProductClient
from function.clients.arm_client import DnsZoneClient, FrontDoorClient
from function.clients.google_domains_client import GoogleDomainsClient
from function.clients.penguin_client import PenguinRandomHouseClient
from function.clients.stripe_client import StripeClient
from function.clients.whmcs_client import WhmcsClient
from function.clients.wikipedia_client import WikipediaClient

__all__ = [
    "UpstreamClient",
    "AmazonProductClient",
    "DnsZoneClient",
    "FrontDoorClient",
    "GoogleDomainsClient",
    "PenguinRandomHouseClient",
    "StripeClient",
    "WhmcsClient",
    "WikipediaClient",
]
