# ============================================================================
# AUTHENTICATION MODULE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# PURPOSE: Azure authentication for Resource Manager calls
# CREATED: 15 OCT 2026
# ============================================================================
"""
Authentication module for outbound Azure calls.

Provides Managed Identity bearer tokens for:
- Azure DNS zones (Microsoft.Network/dnsZones)
- Azure Front Door Standard/Premium (Microsoft.Cdn/profiles)

Usage:
    from infrastructure.auth import get_arm_token
"""

from infrastructure.auth.arm_auth import ARM_SCOPE, get_arm_token, reset_arm_auth

__all__ = [
    "ARM_SCOPE",
    "get_arm_token",
    "reset_arm_auth",
]
