# ============================================================================
# AMAZON PRODUCT ADVERTISING CLIENT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Amazon PA-API 5.0
# PURPOSE: Book search by author with AWS Signature Version 4
# CREATED: 17 OCT 2026
# ============================================================================
"""
Amazon Product Advertising API Client

SearchItems (SearchIndex=Books) signed with AWS SigV4 for the
ProductAdvertisingAPI service. Signed headers: host, x-amz-date,
x-amz-target.
"""

import hashlib
import hmac
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from function.clients.base import UpstreamClient
from function.config import FunctionConfig, get_config

logger = logging.getLogger(__name__)

SERVICE_NAME = "ProductAdvertisingAPI"
ALGORITHM = "AWS4-HMAC-SHA256"
SEARCH_ITEMS_TARGET = "com.amazon.paapi5.v1.ProductAdvertisingAPIv1.SearchItems"
SEARCH_RESOURCES = [
    "Images.Primary.Medium",
    "ItemInfo.Title",
    "ItemInfo.ByLineInfo",
    "ItemInfo.ContentInfo",
    "ItemInfo.ProductInfo",
    "Offers.Listings.Price",
]


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def signing_key(secret_key: str, date_stamp: str, region: str, service: str = SERVICE_NAME) -> bytes:
    k_date = _hmac(f"AWS4{secret_key}".encode("utf-8"), date_stamp)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, "aws4_request")


def sign_request(
    endpoint: str,
    payload: str,
    access_key: str,
    secret_key: str,
    region: str,
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """
    SigV4 headers for a PA-API POST.

    Returns:
        Headers including Authorization, x-amz-date and x-amz-target
    """
    now = now or datetime.now(timezone.utc)
    amz_date = now.strftime("%Y%m%dT%H%M%SZ")
    date_stamp = now.strftime("%Y%m%d")

    parsed = urlparse(endpoint)
    host = parsed.netloc
    canonical_uri = parsed.path or "/"
    canonical_headers = f"host:{host}\nx-amz-date:{amz_date}\nx-amz-target:{SEARCH_ITEMS_TARGET}\n"
    signed_headers = "host;x-amz-date;x-amz-target"

    canonical_request = "\n".join([
        "POST",
        canonical_uri,
        "",
        canonical_headers,
        signed_headers,
        _sha256_hex(payload),
    ])
    credential_scope = f"{date_stamp}/{region}/{SERVICE_NAME}/aws4_request"
    string_to_sign = "\n".join([ALGORITHM, amz_date, credential_scope, _sha256_hex(canonical_request)])
    signature = hmac.new(
        signing_key(secret_key, date_stamp, region),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()

    return {
        "host": host,
        "x-amz-date": amz_date,
        "x-amz-target": SEARCH_ITEMS_TARGET,
        "content-type": "application/json; charset=utf-8",
        "content-encoding": "amz-1.0",
        "Authorization": (
            f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        ),
    }


class AmazonProductClient(UpstreamClient):
    """Sync client for PA-API SearchItems."""

    service_name = "Amazon Product API"

    def __init__(self, config: Optional[FunctionConfig] = None, **kwargs):
        super().__init__(**kwargs)
        self._config = config or get_config()

    def search_books_by_author(self, author_name: str, item_page: int = 1) -> Dict[str, Any]:
        """
        SearchItems for books by an author.

        Raises:
            ConfigurationError: PA-API settings missing
            UpstreamError: transport failure or non-2xx
        """
        self._require(
            self._config.has_amazon_config,
            "AMAZON_PRODUCT_ACCESS_KEY, _SECRET_KEY, _PARTNER_TAG, _REGION, _API_ENDPOINT",
        )
        request = {
            "PartnerType": "Associates",
            "PartnerTag": self._config.amazon_partner_tag,
            "Operation": "SearchItems",
            "SearchIndex": "Books",
            "Author": author_name,
            "ItemPage": item_page,
            "Resources": SEARCH_RESOURCES,
        }
        if self._config.amazon_marketplace:
            request["Marketplace"] = self._config.amazon_marketplace
        payload = json.dumps(request)

        headers = sign_request(
            self._config.amazon_api_endpoint,
            payload,
            self._config.amazon_access_key,
            self._config.amazon_secret_key,
            self._config.amazon_region,
        )
        logger.info(f"Searching Amazon for books by '{author_name}', page {item_page}")
        resp = self._request("POST", self._config.amazon_api_endpoint, content=payload.encode("utf-8"), headers=headers)
        return self._expect_success(resp, "SearchItems")


__all__ = ["AmazonProductClient", "sign_request", "signing_key"]
