# ============================================================================
# TEST FIXTURES
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Tests - Shared fixtures
# PURPOSE: Auth stubs and process-state resets
# CREATED: 18 OCT 2026
# ============================================================================
"""
Shared Test Fixtures

Auth is stubbed at the guard: get_jwt_validator() returns a mock whose
validate() yields the claims of the `user` or `admin` fixtures, and
UserProfileService is replaced so no Cosmos container is touched.
"""

from typing import Any, Dict
from unittest.mock import MagicMock, patch

import pytest

from core.models import UserProfile
from function.auth.jwt_validation import reset_jwt_validator
from function.config import reset_config
from function.services.platform_stats_service import reset_stats_cache
from function.services.rate_limiter import get_lead_rate_limiter
from tests.helpers import ADMIN_UPN, USER_UPN


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch):
    """Each test starts with fresh config, caches and rate limits."""
    for key in ("COSMOSDB_ENSURE_CONTAINERS", "REFERRAL_BASE_URL", "STRIPE_API_KEY", "STRIPE_WEBHOOK_SECRET", "WHMCS_API_URL"):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    reset_jwt_validator()
    reset_stats_cache()
    get_lead_rate_limiter().reset()
    yield
    reset_config()
    reset_jwt_validator()
    reset_stats_cache()


def _auth_patches(claims: Dict[str, Any], profile: UserProfile):
    validator = MagicMock()
    validator.validate.return_value = claims
    profile_service = MagicMock()
    profile_service.return_value.ensure_profile.return_value = profile
    return (
        patch("function.auth.guard.get_jwt_validator", return_value=validator),
        patch("function.auth.guard.UserProfileService", profile_service),
    )


@pytest.fixture
def user_profile():
    return UserProfile(upn=USER_UPN, oid="oid-user")


@pytest.fixture
def user(user_profile):
    """Authenticated non-admin caller; yields the bearer token to send."""
    claims = {"upn": USER_UPN, "oid": "oid-user", "roles": []}
    validator_patch, profile_patch = _auth_patches(claims, user_profile)
    with validator_patch, profile_patch:
        yield "user-token.payload.signature"


@pytest.fixture
def admin():
    """Authenticated caller holding the Admin role."""
    claims = {"upn": ADMIN_UPN, "oid": "oid-admin", "roles": ["Admin"]}
    validator_patch, profile_patch = _auth_patches(claims, UserProfile(upn=ADMIN_UPN))
    with validator_patch, profile_patch:
        yield "admin-token.payload.signature"
