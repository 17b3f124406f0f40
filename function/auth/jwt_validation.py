# ============================================================================
# JWT VALIDATION
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Auth - Bearer token validation against Entra ID
# PURPOSE: Validate JWTs via OIDC metadata + JWKS; introspect opaque tokens
# CREATED: 16 OCT 2026
# ============================================================================
"""
JWT Validation

Validates bearer tokens issued by Microsoft Entra ID (Azure AD).

Flow:
    1. Opaque (single segment) tokens are introspected via Microsoft Graph
       GET /v1.0/me; a 2xx response yields minimal claims.
    2. Three-segment JWTs are verified with PyJWT: RS256 signature against
       the JWKS advertised in the OIDC discovery document, exp, aud, iss,
       with 5 minutes of clock skew.
    3. An unknown signing key triggers one JWKS refresh and retry.

OIDC metadata and the JWKS client are cached per process and refreshed
every 6 hours.

validate() never raises for a bad token: it returns None and logs why.
"""

import logging
import threading
import time
from typing import Any, Dict, List, Optional

import httpx
import jwt
from jwt import PyJWKClient

from function.config import FunctionConfig, get_config

logger = logging.getLogger(__name__)

GRAPH_ME_URL = "https://graph.microsoft.com/v1.0/me"
WELL_KNOWN_SUFFIX = "/.well-known/openid-configuration"
METADATA_REFRESH_SECONDS = 6 * 60 * 60
CLOCK_SKEW_SECONDS = 300
ALGORITHMS = ["RS256"]

DEFAULT_TIMEOUT = httpx.Timeout(connect=10.0, read=15.0, write=10.0, pool=10.0)


class JwtValidator:
    """
    Bearer token validator.

    One instance per process (see get_jwt_validator) so the metadata cache
    survives across invocations.
    """

    def __init__(self, config: Optional[FunctionConfig] = None, timeout: Optional[httpx.Timeout] = None):
        self._config = config or get_config()
        self._timeout = timeout or DEFAULT_TIMEOUT
        self._lock = threading.Lock()
        self._metadata: Optional[Dict[str, Any]] = None
        self._metadata_fetched_at: float = 0.0
        self._jwks_client: Optional[PyJWKClient] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def metadata_url(self) -> Optional[str]:
        return self._config.openid_metadata_address

    @property
    def authority(self) -> Optional[str]:
        url = self.metadata_url
        if not url:
            return None
        if url.endswith(WELL_KNOWN_SUFFIX):
            url = url[: -len(WELL_KNOWN_SUFFIX)]
        return url.rstrip("/")

    @property
    def audience(self) -> Optional[str]:
        return self._config.token_audience

    def valid_issuers(self) -> List[str]:
        if self._config.aad_valid_issuers:
            return list(self._config.aad_valid_issuers)
        return [self.authority] if self.authority else []

    # ------------------------------------------------------------------
    # Metadata / JWKS
    # ------------------------------------------------------------------

    def _get_metadata(self, force_refresh: bool = False) -> Dict[str, Any]:
        """OIDC discovery document, cached for METADATA_REFRESH_SECONDS."""
        with self._lock:
            stale = time.monotonic() - self._metadata_fetched_at > METADATA_REFRESH_SECONDS
            if self._metadata is None or stale or force_refresh:
                logger.info(f"Fetching OIDC metadata from {self.metadata_url}")
                with httpx.Client(timeout=self._timeout) as client:
                    resp = client.get(self.metadata_url)
                resp.raise_for_status()
                self._metadata = resp.json()
                self._metadata_fetched_at = time.monotonic()
                self._jwks_client = None
            return self._metadata

    def _get_jwks_client(self, force_refresh: bool = False) -> PyJWKClient:
        metadata = self._get_metadata(force_refresh=force_refresh)
        if self._jwks_client is None:
            jwks_uri = metadata.get("jwks_uri")
            if not jwks_uri:
                raise jwt.InvalidTokenError("OIDC metadata has no jwks_uri")
            self._jwks_client = PyJWKClient(jwks_uri)
        return self._jwks_client

    def _signing_key(self, token: str):
        try:
            return self._get_jwks_client().get_signing_key_from_jwt(token)
        except jwt.PyJWKClientError as e:
            logger.info(f"Signing key not found ({e}); refreshing JWKS and retrying once")
            return self._get_jwks_client(force_refresh=True).get_signing_key_from_jwt(token)

    def _decode(self, token: str, key: Any) -> Dict[str, Any]:
        issuers = self.valid_issuers()
        return jwt.decode(
            token,
            key,
            algorithms=ALGORITHMS,
            audience=self.audience,
            issuer=issuers[0] if len(issuers) == 1 else issuers,
            leeway=CLOCK_SKEW_SECONDS,
            options={"require": ["exp", "aud", "iss"]},
        )

    # ------------------------------------------------------------------
    # Opaque tokens
    # ------------------------------------------------------------------

    def introspect(self, token: str) -> Optional[Dict[str, Any]]:
        """Resolve an opaque access token via Microsoft Graph /me."""
        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.get(GRAPH_ME_URL, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            logger.warning(f"Graph introspection failed: {e}")
            return None

        if not resp.is_success:
            logger.warning(f"Graph introspection rejected token: HTTP {resp.status_code}")
            return None

        me = resp.json()
        return {
            "oid": me.get("id"),
            "upn": me.get("userPrincipalName"),
            "email": me.get("mail"),
            "name": me.get("displayName"),
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def validate(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Validate a bearer token.

        Returns:
            Claims dict when valid, None otherwise
        """
        if not token or not token.strip():
            return None
        token = token.strip()

        segments = token.split(".")
        if len(segments) == 1:
            return self.introspect(token)
        if len(segments) != 3 or any(not s for s in segments):
            logger.warning(f"Malformed token: {len(segments)} segments")
            return None

        if not self.metadata_url or not self.audience:
            logger.error("Token validation is not configured (metadata URL or audience missing)")
            return None

        try:
            signing_key = self._signing_key(token)
            return self._decode(token, signing_key.key)
        except jwt.PyJWKClientError as e:
            logger.warning(f"Token signing key not found after JWKS refresh: {e}")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token validation failed: {type(e).__name__}: {e}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"Could not load OIDC metadata: {e}")
            return None


# Process-wide validator
_validator: Optional[JwtValidator] = None
_validator_lock = threading.Lock()


def get_jwt_validator() -> JwtValidator:
    """Get the process-wide validator (metadata cache shared across invocations)."""
    global _validator
    if _validator is None:
        with _validator_lock:
            if _validator is None:
                _validator = JwtValidator()
    return _validator


def reset_jwt_validator() -> None:
    """Drop the cached validator (tests, config changes)."""
    global _validator
    _validator = None


__all__ = [
    "JwtValidator",
    "get_jwt_validator",
    "reset_jwt_validator",
    "GRAPH_ME_URL",
    "CLOCK_SKEW_SECONDS",
]
