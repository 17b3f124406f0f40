# ============================================================================
# PENGUIN RANDOM HOUSE CLIENT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - PRH catalog API
# PURPOSE: Author search and titles-by-author lookups
# CREATED: 17 OCT 2026
# ============================================================================
"""
Penguin Random House Client

Endpoints come from configuration as templates with placeholders:
    {domain} {query} {authorKey} {rows} {start} {api_key}

The raw JSON body is relayed to the caller unchanged.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from function.clients.base import UpstreamClient
from function.config import FunctionConfig, get_config

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 10
DEFAULT_START = 0


class PenguinRandomHouseClient(UpstreamClient):
    """Sync client for the PRH REST API."""

    service_name = "Penguin Random House"

    def __init__(self, config: Optional[FunctionConfig] = None, **kwargs):
        super().__init__(**kwargs)
        self._config = config or get_config()

    def _require_config(self) -> None:
        self._require(
            self._config.has_penguin_config,
            "PENGUIN_RANDOM_HOUSE_API_URL, _API_KEY, _API_DOMAIN, _SEARCH_API, _LIST_TITLES_BY_AUTHOR_API",
        )

    def build_url(self, template: str, **values: Any) -> str:
        """Substitute placeholders and join onto the API base URL."""
        endpoint = template.replace("{domain}", self._config.prh_domain).replace("{api_key}", self._config.prh_api_key)
        for key, value in values.items():
            endpoint = endpoint.replace("{" + key + "}", str(value))
        return f"{self._config.prh_api_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def search_authors(self, author_name: str) -> Dict[str, Any]:
        """Raises UpstreamError on transport failure or non-2xx."""
        self._require_config()
        url = self.build_url(self._config.prh_search_endpoint, query=quote(author_name, safe=""))
        logger.info(f"Searching Penguin Random House authors for '{author_name}'")
        return self._expect_success(self._request("GET", url), "author search")

    def get_titles_by_author(self, author_key: str, rows: int = DEFAULT_ROWS, start: int = DEFAULT_START) -> Dict[str, Any]:
        """Raises UpstreamError on transport failure or non-2xx."""
        self._require_config()
        url = self.build_url(
            self._config.prh_titles_endpoint,
            authorKey=quote(author_key, safe=""),
            rows=rows,
            start=start,
        )
        logger.info(f"Listing Penguin Random House titles for author {author_key} (rows={rows}, start={start})")
        return self._expect_success(self._request("GET", url), "titles by author")


__all__ = ["PenguinRandomHouseClient", "DEFAULT_ROWS", "DEFAULT_START"]
