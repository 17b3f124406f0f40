# ============================================================================
# WIKIPEDIA CLIENT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Wikipedia REST + MediaWiki APIs
# PURPOSE: Person facts (summary, description, lead paragraph, thumbnail)
# CREATED: 17 OCT 2026
# ============================================================================
"""
Wikipedia Client

Combines two anonymous calls:
    REST summary   https://{lang}.wikipedia.org/api/rest_v1/page/summary/{Title_With_Underscores}
    MediaWiki      https://{lang}.wikipedia.org/w/api.php?action=query&prop=extracts&exintro&explaintext

A non-2xx from either call yields partial (empty) fields; only transport
failures raise.
"""

import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from function.clients.base import UpstreamClient

logger = logging.getLogger(__name__)

USER_AGENT = "AuthorPlatformFunctions/1.0"

# Wikipedia edition subdomains: "en", "fr", "zh-yue", ...
LANGUAGE_CODE_RE = re.compile(r"[a-z]{2,3}(-[a-z]+)?")


class WikipediaClient(UpstreamClient):
    """Anonymous Wikipedia client."""

    service_name = "Wikipedia"

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None):
        return self._request("GET", url, params=params, headers={"User-Agent": USER_AGENT})

    @staticmethod
    def _base_url(language: str) -> str:
        """Edition root for a language code; the code becomes the hostname, so it is checked first."""
        if not LANGUAGE_CODE_RE.fullmatch(language or ""):
            raise ValueError(f"Invalid language code: '{language}'")
        return f"https://{language}.wikipedia.org"

    def get_summary(self, title: str, language: str) -> Dict[str, Any]:
        url = f"{self._base_url(language)}/api/rest_v1/page/summary/{quote(title.replace(' ', '_'), safe='')}"
        resp = self._get(url)
        if not resp.is_success:
            logger.warning(f"Wikipedia summary for '{title}' ({language}) returned HTTP {resp.status_code}")
            return {}
        return self._json(resp)

    def get_intro_extract(self, title: str, language: str) -> Optional[str]:
        resp = self._get(
            f"{self._base_url(language)}/w/api.php",
            params={
                "action": "query",
                "prop": "extracts",
                "exintro": "",
                "explaintext": "",
                "titles": title,
                "format": "json",
            },
        )
        if not resp.is_success:
            logger.warning(f"MediaWiki extract for '{title}' ({language}) returned HTTP {resp.status_code}")
            return None
        pages = (self._json(resp).get("query") or {}).get("pages") or {}
        for page in pages.values():
            if "extract" in page:
                return page["extract"]
        return None

    def get_person_facts(self, person_name: str, language: str = "en") -> Dict[str, Any]:
        """
        Person facts in one dict.

        Raises:
            ValueError: empty name, empty or malformed language code
            UpstreamError: transport failure
        """
        if not person_name or not person_name.strip():
            raise ValueError("Person name cannot be empty")
        if not language or not language.strip():
            raise ValueError("Language code cannot be empty")

        language = language.strip().lower()
        self._base_url(language)
        name = person_name.strip()
        logger.info(f"Fetching Wikipedia facts for '{name}' ({language})")

        summary = self.get_summary(name, language)
        extract = self.get_intro_extract(name, language)

        canonical_url = (((summary.get("content_urls") or {}).get("desktop") or {}).get("page")) or ""
        thumbnail = summary.get("thumbnail")
        if thumbnail:
            thumbnail = {
                "source": thumbnail.get("source", ""),
                "width": thumbnail.get("width", 0),
                "height": thumbnail.get("height", 0),
            }

        return {
            "title": summary.get("title") or "",
            "description": summary.get("description") or "",
            "extract": summary.get("extract") or "",
            "lead_paragraph": extract or "",
            "thumbnail": thumbnail or None,
            "canonical_url": canonical_url,
            "language": language,
        }


__all__ = ["WikipediaClient"]
