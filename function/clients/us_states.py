# ============================================================================
# US STATE CODES
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Clients - Postal address normalization
# PURPOSE: Map US state names to two-letter postal codes
# CREATED: 16 OCT 2026
# ============================================================================

import re

US_STATE_CODES = {
    "alabama": "AL",
    "alaska": "AK",
    "arizona": "AZ",
    "arkansas": "AR",
    "california": "CA",
    "colorado": "CO",
    "connecticut": "CT",
    "delaware": "DE",
    "florida": "FL",
    "georgia": "GA",
    "hawaii": "HI",
    "idaho": "ID",
    "illinois": "IL",
    "indiana": "IN",
    "iowa": "IA",
    "kansas": "KS",
    "kentucky": "KY",
    "louisiana": "LA",
    "maine": "ME",
    "maryland": "MD",
    "massachusetts": "MA",
    "michigan": "MI",
    "minnesota": "MN",
    "mississippi": "MS",
    "missouri": "MO",
    "montana": "MT",
    "nebraska": "NE",
    "nevada": "NV",
    "new hampshire": "NH",
    "new jersey": "NJ",
    "new mexico": "NM",
    "new york": "NY",
    "north carolina": "NC",
    "north dakota": "ND",
    "ohio": "OH",
    "oklahoma": "OK",
    "oregon": "OR",
    "pennsylvania": "PA",
    "rhode island": "RI",
    "south carolina": "SC",
    "south dakota": "SD",
    "tennessee": "TN",
    "texas": "TX",
    "utah": "UT",
    "vermont": "VT",
    "virginia": "VA",
    "washington": "WA",
    "west virginia": "WV",
    "wisconsin": "WI",
    "wyoming": "WY",
    "district of columbia": "DC",
    "washington dc": "DC",
    "washington d c": "DC",
    "d c": "DC",
}

_SEPARATORS = re.compile(r"[\s.,\-_/]+")


def _lookup_key(value: str) -> str:
    """Lowercase letters, separators collapsed to single spaces, other characters dropped."""
    spaced = _SEPARATORS.sub(" ", value.strip())
    return "".join(ch.lower() for ch in spaced if ch.isalpha() or ch == " ").strip()


def normalize_us_state(state: str) -> str:
    """
    Two-letter code for a US state name.

    Two-character input is upper-cased as-is; unknown names are returned
    trimmed and unchanged.
    """
    value = (state or "").strip()
    if not value:
        return ""
    if len(value) == 2:
        return value.upper()
    return US_STATE_CODES.get(_lookup_key(value), value)


__all__ = ["US_STATE_CODES", "normalize_us_state"]
