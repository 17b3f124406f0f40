# ============================================================================
# DOMAIN REGISTRATION BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - User domain registrations
# PURPOSE: Create, list, read and update the caller's domain registrations
# CREATED: 17 OCT 2026
# ============================================================================
"""
Domain Registration Blueprint

All routes require a Bearer token and a user profile:
- POST /api/domain-registrations - Create (status Pending)
- GET  /api/domain-registrations - List caller's registrations
- GET  /api/domain-registrations/{registrationId} - Get one
- PUT  /api/domain-registrations/{registrationId} - Partial update (active subscription)
"""

import logging

import azure.functions as func

from function.auth.guard import authenticate_with_profile
from function.http import exception_response, json_response, read_json
from function.models.requests import CreateDomainRegistrationRequest, UpdateDomainRegistrationRequest
from function.models.responses import DomainRegistrationResponse
from function.services.domain_registration_service import DomainRegistrationService

logger = logging.getLogger(__name__)
domain_registration_bp = func.Blueprint()


@domain_registration_bp.route(route="domain-registrations", methods=["POST"])
def create_domain_registration(req: func.HttpRequest) -> func.HttpResponse:
    """
    Create a domain registration for the caller.

    POST /api/domain-registrations
    Body: {"domain": {...}, "contactInformation": {...}}
    """
    user, _, error = authenticate_with_profile(req)
    if error:
        return error

    try:
        request = CreateDomainRegistrationRequest.model_validate(read_json(req))
        registration = DomainRegistrationService().create(user.upn, request)
        logger.info(f"Created domain registration {registration.id} for {user.upn}")
        return json_response(DomainRegistrationResponse.from_entity(registration), status_code=201)
    except Exception as e:
        return exception_response(e, "create domain registration")


@domain_registration_bp.route(route="domain-registrations", methods=["GET"])
def list_domain_registrations(req: func.HttpRequest) -> func.HttpResponse:
    user, _, error = authenticate_with_profile(req)
    if error:
        return error

    try:
        registrations = DomainRegistrationService().list_for_user(user.upn)
        return json_response([DomainRegistrationResponse.from_entity(r).to_body() for r in registrations])
    except Exception as e:
        return exception_response(e, "list domain registrations")


@domain_registration_bp.route(route="domain-registrations/{registrationId}", methods=["GET"])
def get_domain_registration(req: func.HttpRequest) -> func.HttpResponse:
    user, _, error = authenticate_with_profile(req)
    if error:
        return error

    registration_id = req.route_params.get("registrationId")
    try:
        registration = DomainRegistrationService().get_for_user(user.upn, registration_id)
        return json_response(DomainRegistrationResponse.from_entity(registration))
    except Exception as e:
        return exception_response(e, f"get domain registration {registration_id}")


@domain_registration_bp.route(route="domain-registrations/{registrationId}", methods=["PUT"])
def update_domain_registration(req: func.HttpRequest) -> func.HttpResponse:
    """
    Partially update a registration.

    PUT /api/domain-registrations/{registrationId}
    Body: any of {"domain", "contactInformation", "status"}
    """
    user, _, error = authenticate_with_profile(req)
    if error:
        return error

    registration_id = req.route_params.get("registrationId")
    try:
        request = UpdateDomainRegistrationRequest.model_validate(read_json(req))
        registration = DomainRegistrationService().update(user.upn, registration_id, request)
        return json_response(DomainRegistrationResponse.from_entity(registration))
    except Exception as e:
        return exception_response(e, f"update domain registration {registration_id}")
