# ============================================================================
# AZURE RESOURCE MANAGER AUTHENTICATION
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# PURPOSE: Managed Identity bearer tokens for Azure Resource Manager calls
# CREATED: 15 OCT 2026
# ============================================================================
"""
Azure Resource Manager OAuth authentication.

Acquires bearer tokens for https://management.azure.com using
azure-identity. DNS zone and Front Door clients call ARM over httpx and
attach the token themselves.

Authentication Flow:
-------------------
1. Client needs to call ARM -> get_arm_token() called
2. ManagedIdentityCredential (AZURE_CLIENT_ID set) or
   DefaultAzureCredential acquires token for the ARM scope
3. Token cached with expiry time
4. Token refreshed when within 5 minutes of expiry

Environment Variables:
---------------------
AZURE_CLIENT_ID=<guid>  # Optional user-assigned MI client ID
AZURE_SUBSCRIPTION_ID=<guid>

Usage:
------
```python
from infrastructure.auth import get_arm_token

headers = {"Authorization": f"Bearer {get_arm_token()}"}
```
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

# OAuth scope for Azure Resource Manager
ARM_SCOPE = "https://management.azure.com/.default"

# Refresh tokens when less than 5 minutes until expiry
TOKEN_REFRESH_BUFFER_SECS = 300


@dataclass
class TokenCache:
    """Simple in-memory token cache."""
    token: Optional[str] = None
    expires_at: Optional[datetime] = None

    def get_if_valid(self, min_ttl_seconds: int = 0) -> Optional[str]:
        """Get token if valid and has sufficient TTL."""
        if not self.token or not self.expires_at:
            return None

        remaining = (self.expires_at - datetime.now(timezone.utc)).total_seconds()
        if remaining <= min_ttl_seconds:
            return None

        return self.token

    def set(self, token: str, expires_at: datetime) -> None:
        """Cache a new token."""
        self.token = token
        self.expires_at = expires_at

    def invalidate(self) -> None:
        """Clear the cache."""
        self.token = None
        self.expires_at = None


# Global token cache
_token_cache = TokenCache()
_credential = None
_lock = threading.Lock()


def _get_credential():
    """Create the azure-identity credential once per process."""
    global _credential
    if _credential is None:
        from azure.identity import DefaultAzureCredential, ManagedIdentityCredential
        from function.config import get_config

        client_id = get_config().azure_client_id
        if client_id:
            logger.info(f"ARM auth using user-assigned Managed Identity: {client_id[:8]}...")
            _credential = ManagedIdentityCredential(client_id=client_id)
        else:
            logger.info("ARM auth using DefaultAzureCredential (system MI or az login)")
            _credential = DefaultAzureCredential()
    return _credential


def get_arm_token() -> str:
    """
    Get an Azure Resource Manager bearer token.

    Raises:
        azure.core.exceptions.ClientAuthenticationError: token acquisition failed.
    """
    cached = _token_cache.get_if_valid(min_ttl_seconds=TOKEN_REFRESH_BUFFER_SECS)
    if cached:
        return cached

    with _lock:
        cached = _token_cache.get_if_valid(min_ttl_seconds=TOKEN_REFRESH_BUFFER_SECS)
        if cached:
            return cached

        from azure.core.exceptions import ClientAuthenticationError

        try:
            token_response = _get_credential().get_token(ARM_SCOPE)
        except ClientAuthenticationError as e:
            logger.error("=" * 60)
            logger.error("FAILED TO GET AZURE RESOURCE MANAGER TOKEN")
            logger.error("=" * 60)
            logger.error(f"Error: {e}")
            logger.error("Troubleshooting:")
            logger.error("  - Verify a Managed Identity is assigned to the Function App")
            logger.error("  - Verify the identity has DNS Zone / CDN Profile Contributor roles")
            logger.error("=" * 60)
            raise

        expires_at = datetime.fromtimestamp(token_response.expires_on, tz=timezone.utc)
        _token_cache.set(token_response.token, expires_at)
        logger.info(f"ARM token acquired, expires: {expires_at.isoformat()}")
        return token_response.token


def reset_arm_auth() -> None:
    """Forget cached token and credential."""
    global _credential
    with _lock:
        _token_cache.invalidate()
        _credential = None


__all__ = ["ARM_SCOPE", "TokenCache", "get_arm_token", "reset_arm_auth"]
