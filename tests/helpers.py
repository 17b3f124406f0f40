# ============================================================================
# TEST HELPERS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Tests - Shared helpers
# PURPOSE: Request builders and sample entities
# CREATED: 18 OCT 2026
# ============================================================================
"""
Test Helpers

HTTP functions are called through their blueprint builders:
    call(create_lead, make_request("POST", "/api/leads", body={...}))
"""

import json
from typing import Any, Dict, Optional

import azure.functions as func

from core.models import ContactInformation, Domain, DomainRegistration

USER_UPN = "jane@example.com"
ADMIN_UPN = "admin@example.com"


def make_request(
    method: str,
    url: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
    route_params: Optional[Dict[str, str]] = None,
    token: Optional[str] = None,
) -> func.HttpRequest:
    """Build a func.HttpRequest; dict bodies are JSON encoded."""
    all_headers = dict(headers or {})
    if token is not None:
        all_headers["Authorization"] = f"Bearer {token}"
    if body is None:
        raw = b""
    elif isinstance(body, (bytes, bytearray)):
        raw = bytes(body)
    else:
        raw = json.dumps(body).encode("utf-8")
        all_headers.setdefault("Content-Type", "application/json")
    return func.HttpRequest(
        method=method,
        url=url,
        headers=all_headers,
        params=params or {},
        route_params=route_params or {},
        body=raw,
    )


def call(function_builder, req: func.HttpRequest, context: Optional[func.Context] = None) -> func.HttpResponse:
    """Invoke a blueprint function the way the Functions host does."""
    user_function = function_builder.build().get_user_function()
    if context is None:
        return user_function(req)
    return user_function(req, context)


def body_of(resp: func.HttpResponse) -> Any:
    return json.loads(resp.get_body())


def make_registration(**overrides) -> DomainRegistration:
    values = dict(
        upn=USER_UPN,
        domain=Domain(top_level_domain="com", second_level_domain="janedoe"),
        contact_information=ContactInformation(
            first_name="Jane",
            last_name="Doe",
            address="123 Main Street",
            city="Seattle",
            state="WA",
            country="US",
            zip_code="98101",
            email_address="jane@example.com",
            telephone_number="+1 (206) 555-0100",
        ),
    )
    values.update(overrides)
    return DomainRegistration(**values)


def registration_body() -> Dict[str, Any]:
    return {
        "domain": {"topLevelDomain": "com", "secondLevelDomain": "janedoe"},
        "contactInformation": {
            "firstName": "Jane",
            "lastName": "Doe",
            "address": "123 Main Street",
            "city": "Seattle",
            "state": "WA",
            "country": "US",
            "zipCode": "98101",
            "emailAddress": "jane@example.com",
            "telephoneNumber": "+1 (206) 555-0100",
        },
    }


