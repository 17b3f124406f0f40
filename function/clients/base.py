# ============================================================================
# UPSTREAM HTTP CLIENT BASE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Sync httpx base for third-party APIs
# PURPOSE: One request path with uniform transport-error mapping
# CREATED: 16 OCT 2026
# ============================================================================
"""
Upstream HTTP Client Base

Sync httpx client shared by every third-party integration (WHMCS, Azure
Resource Manager, Google Cloud Domains, Stripe, Wikipedia, Penguin Random
House, Amazon PA-API).

Azure Functions are synchronous, so this uses the httpx sync client.

Transport failures become UpstreamError:
    connection errors / other transport errors -> 502
    timeouts                                   -> 504
HTTP status handling is left to the caller: some integrations treat a
non-2xx as "partial result" or "does not exist" rather than failure.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

# Timeout: 10s connect, 30s read
DEFAULT_TIMEOUT = httpx.Timeout(connect=10.0, read=30.0, write=10.0, pool=10.0)


class UpstreamClient:
    """Base class for sync third-party HTTP clients."""

    service_name: str = "upstream"

    def __init__(
        self,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._timeout = timeout or DEFAULT_TIMEOUT
        # Tests pass httpx.MockTransport here
        self._transport = transport

    def _require(self, configured: bool, settings: str) -> None:
        """Raise ConfigurationError when the integration's settings are missing."""
        if not configured:
            raise ConfigurationError(
                f"{self.service_name} is not configured",
                details=f"Missing settings: {settings}",
                service=self.service_name,
            )

    def _request(
        self,
        method: str,
        url: str,
        *,
        json_body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """
        Send one request.

        Returns the response whatever its status.
        Raises UpstreamError on transport failure.
        """
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                return client.request(
                    method,
                    url,
                    json=json_body,
                    params=params,
                    data=data,
                    content=content,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            logger.error(f"{self.service_name} timeout: {method} {url}: {e}")
            raise UpstreamError(f"{self.service_name} timeout", str(e), self.service_name, status_code=504)
        except httpx.HTTPError as e:
            logger.error(f"Cannot reach {self.service_name} at {url}: {e}")
            raise UpstreamError(f"{self.service_name} unreachable", str(e), self.service_name)

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        """Parse a JSON body; non-JSON bodies come back as {"detail": text}."""
        try:
            return resp.json()
        except ValueError:
            return {"detail": resp.text}

    def _expect_success(self, resp: httpx.Response, what: str) -> Any:
        """Return the parsed body of a 2xx response, else raise UpstreamError (502)."""
        body = self._json(resp)
        if not resp.is_success:
            logger.error(f"{self.service_name} error {resp.status_code}: {what} -> {body}")
            raise UpstreamError(
                f"{self.service_name} error",
                f"{what} returned HTTP {resp.status_code}",
                self.service_name,
            )
        return body


__all__ = ["UpstreamClient", "DEFAULT_TIMEOUT"]
