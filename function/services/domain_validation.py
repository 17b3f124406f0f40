# ============================================================================
# DOMAIN & CONTACT VALIDATION
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Service - Registration input rules
# PURPOSE: Registrar-level rules for domains and registrant contacts
# CREATED: 17 OCT 2026
# ============================================================================
"""
Domain & Contact Validation

Business rules applied after request-shape validation. Every check runs
and all messages are collected, so a caller sees every problem at once.

Domain rules:
    SLD   2-63 chars, alphanumerics and inner hyphens, not reserved
    TLD   2-6 letters, from the supported set
    full  at most 253 chars

Contact rules:
    names 2-50 chars of letters (incl. Latin-1 accents), spaces, - ' .
    email basic RFC shape, no '..', local part at most 64
    address 5-100 chars; city 2-50; state 2-50
    country from the supported set; postal code per country; phone E.164-ish
"""

import logging
import re
from typing import List, Optional

from core.errors import ValidationError
from core.models import ContactInformation, Domain

logger = logging.getLogger(__name__)

DOMAIN_LABEL_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$")
TLD_RE = re.compile(r"^[a-zA-Z]{2,6}$")

RESERVED_SECOND_LEVEL_DOMAINS = frozenset({
    "www", "ftp", "mail", "email", "smtp", "pop", "imap", "dns",
    "ns1", "ns2", "localhost", "admin", "root", "test",
})
SUPPORTED_TOP_LEVEL_DOMAINS = frozenset({
    "com", "org", "net", "edu", "gov", "mil", "int", "co",
    "io", "app", "dev", "tech", "info", "biz", "name", "me",
})

NAME_RE = re.compile(r"^[a-zA-ZÀ-ÿ \-'\.]+$")
CITY_RE = re.compile(r"^[a-zA-ZÀ-ÿ0-9 \-'\.]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{9,15}$")
US_ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")
POSTAL_CODE_RE = re.compile(r"^[A-Za-z0-9 \-]{3,10}$")
EMAIL_SHAPE_RE = re.compile(r"^[^@\s]+@[^@\s]+$")
CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")

US_COUNTRY_NAMES = frozenset({"us", "usa", "united states"})
SUPPORTED_COUNTRIES = frozenset(c.lower() for c in (
    "US", "USA", "United States", "CA", "Canada", "UK", "United Kingdom", "AU", "Australia",
    "DE", "Germany", "FR", "France", "IT", "Italy", "ES", "Spain", "NL", "Netherlands",
    "BE", "Belgium", "CH", "Switzerland", "AT", "Austria", "SE", "Sweden", "NO", "Norway",
    "DK", "Denmark", "FI", "Finland", "IE", "Ireland", "PT", "Portugal", "GR", "Greece",
    "JP", "Japan", "KR", "South Korea", "SG", "Singapore", "HK", "Hong Kong", "NZ", "New Zealand",
))

_PHONE_FORMATTING = str.maketrans("", "", " -().")


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


# ============================================================================
# DOMAIN
# ============================================================================

def validate_domain(domain: Optional[Domain]) -> List[str]:
    """All rule violations for a domain (empty list when valid)."""
    if domain is None:
        return ["Domain information is required"]

    errors: List[str] = []
    sld = domain.second_level_domain
    tld = domain.top_level_domain

    if _blank(sld):
        errors.append("Second level domain is required")
    elif not DOMAIN_LABEL_RE.fullmatch(sld):
        errors.append("Invalid second level domain name format")
    elif sld.lower() in RESERVED_SECOND_LEVEL_DOMAINS:
        errors.append("Second level domain name is reserved and cannot be used")
    elif len(sld) < 2:
        errors.append("Second level domain must be at least 2 characters long")
    elif len(sld) > 63:
        errors.append("Second level domain cannot exceed 63 characters")

    if _blank(tld):
        errors.append("Top level domain is required")
    elif not TLD_RE.fullmatch(tld):
        errors.append("Invalid top level domain format")
    elif tld.lower() not in SUPPORTED_TOP_LEVEL_DOMAINS:
        errors.append(f"Top level domain '{tld}' is not supported")

    if not _blank(sld) and not _blank(tld) and len(domain.full_domain_name) > 253:
        errors.append("Full domain name cannot exceed 253 characters")

    if errors:
        logger.warning(f"Domain validation failed for {domain.full_domain_name}: {', '.join(errors)}")
    return errors


# ============================================================================
# CONTACT
# ============================================================================

def is_valid_email(email: Optional[str]) -> bool:
    if _blank(email) or len(email) > 254 or ".." in email:
        return False
    if email.count("@") != 1 or not EMAIL_SHAPE_RE.fullmatch(email):
        return False
    local, domain = email.split("@")
    if not local or len(local) > 64:
        return False
    return bool(domain) and "." in domain and not domain.startswith(".") and not domain.endswith(".")


def is_valid_phone_number(phone: Optional[str]) -> bool:
    if _blank(phone):
        return False
    return bool(PHONE_RE.fullmatch(phone.translate(_PHONE_FORMATTING)))


def is_valid_postal_code(postal_code: Optional[str], country: Optional[str]) -> bool:
    if _blank(postal_code):
        return False
    if (country or "").strip().lower() in US_COUNTRY_NAMES:
        return bool(US_ZIP_RE.fullmatch(postal_code))
    return bool(POSTAL_CODE_RE.fullmatch(postal_code))


def _check_length(errors: List[str], label: str, value: Optional[str], minimum: int, maximum: int) -> bool:
    """Required + length checks; True when the value passed them."""
    if _blank(value):
        errors.append(f"{label} is required")
        return False
    if len(value) < minimum:
        errors.append(f"{label} must be at least {minimum} characters long")
        return False
    if len(value) > maximum:
        errors.append(f"{label} cannot exceed {maximum} characters")
        return False
    return True


def validate_contact(contact: Optional[ContactInformation]) -> List[str]:
    """All rule violations for registrant contact details (empty list when valid)."""
    if contact is None:
        return ["Contact information is required"]

    errors: List[str] = []

    for label, value in (("First name", contact.first_name), ("Last name", contact.last_name)):
        if _check_length(errors, label, value, 2, 50) and not NAME_RE.fullmatch(value):
            errors.append(f"{label} contains invalid characters")

    if _blank(contact.email_address):
        errors.append("Email address is required")
    elif not is_valid_email(contact.email_address):
        errors.append("Email address format is invalid")

    if _check_length(errors, "Address", contact.address, 5, 100) and CONTROL_CHARS_RE.search(contact.address):
        errors.append("Address contains invalid characters")
    if contact.address2:
        if len(contact.address2) > 100:
            errors.append("Address line 2 cannot exceed 100 characters")
        elif CONTROL_CHARS_RE.search(contact.address2):
            errors.append("Address line 2 contains invalid characters")

    if _check_length(errors, "City", contact.city, 2, 50) and not CITY_RE.fullmatch(contact.city):
        errors.append("City name contains invalid characters")

    if _check_length(errors, "State", contact.state, 2, 50) and CONTROL_CHARS_RE.search(contact.state):
        errors.append("State contains invalid characters")

    if _blank(contact.country):
        errors.append("Country is required")
    elif contact.country.strip().lower() not in SUPPORTED_COUNTRIES:
        errors.append(f"Country '{contact.country}' is not supported")

    if _blank(contact.zip_code):
        errors.append("ZIP code is required")
    elif not is_valid_postal_code(contact.zip_code, contact.country):
        errors.append("ZIP code format is invalid for the specified country")

    if _blank(contact.telephone_number):
        errors.append("Telephone number is required")
    elif not is_valid_phone_number(contact.telephone_number):
        errors.append("Telephone number format is invalid")

    if errors:
        logger.warning(f"Contact validation failed for {contact.email_address}: {', '.join(errors)}")
    return errors


def ensure_valid_domain(domain: Optional[Domain]) -> None:
    """Raise ValidationError listing every domain rule violation."""
    errors = validate_domain(domain)
    if errors:
        raise ValidationError(f"Domain validation failed: {'; '.join(errors)}", errors=errors)


def ensure_valid_contact(contact: Optional[ContactInformation]) -> None:
    """Raise ValidationError listing every contact rule violation."""
    errors = validate_contact(contact)
    if errors:
        raise ValidationError(f"Contact information validation failed: {'; '.join(errors)}", errors=errors)


__all__ = [
    "validate_domain",
    "validate_contact",
    "ensure_valid_domain",
    "ensure_valid_contact",
    "is_valid_email",
    "is_valid_phone_number",
    "is_valid_postal_code",
    "RESERVED_SECOND_LEVEL_DOMAINS",
    "SUPPORTED_TOP_LEVEL_DOMAINS",
    "CONTROL_CHARS_RE",
    "DOMAIN_LABEL_RE",
]
