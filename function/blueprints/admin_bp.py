# ============================================================================
# ADMIN BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Administrative endpoints
# PURPOSE: Registration completion, invitations, provisioning and config (Admin role)
# CREATED: 17 OCT 2026
# ============================================================================
"""
Admin Blueprint

Every route requires a Bearer token carrying the Admin role:
- POST /api/admin/domain-registrations/{registrationId}/complete - Run completion workflow
- POST /api/author-invitations - Invite an author to claim their domain(s)
- POST /api/admin/containers/init - Create database and missing containers
- GET  /api/admin/config - Show configuration (non-sensitive)
"""

import logging
from datetime import datetime, timezone

import azure.functions as func

from core.logging import log_context
from function.auth.guard import authenticate_admin
from function.config import get_config
from function.http import error_response, exception_response, json_response, read_json
from function.models.requests import CreateAuthorInvitationRequest
from function.models.responses import CompletedRegistrationResponse, CompletionStepsResponse, DomainRegistrationResponse
from function.services.domain_registration_service import DomainRegistrationService
from function.services.invitation_service import InvitationService
from infrastructure.container_initializer import ContainerInitializer

logger = logging.getLogger(__name__)
admin_bp = func.Blueprint()


@admin_bp.route(route="admin/domain-registrations/{registrationId}/complete", methods=["POST"])
def admin_complete_domain_registration(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """
    Run WHMCS -> DNS -> Front Door for one registration.

    POST /api/admin/domain-registrations/{registrationId}/complete

    Returns 200 even when steps failed: the registration is then InProgress
    and `steps` says which ones to look at.
    """
    user, error = authenticate_admin(req)
    if error:
        return error

    registration_id = req.route_params.get("registrationId")
    logger.info(f"Admin {user.upn} completing domain registration {registration_id}")

    try:
        with log_context(invocation_id=context.invocation_id, upn=user.upn):
            result = DomainRegistrationService().complete_registration(registration_id)
    except Exception as e:
        return exception_response(e, f"complete domain registration {registration_id}")

    base = DomainRegistrationResponse.from_entity(result.registration)
    response = CompletedRegistrationResponse(
        **base.model_dump(),
        steps=CompletionStepsResponse(**result.steps()),
    )
    return json_response(response)


@admin_bp.route(route="author-invitations", methods=["POST"])
def create_author_invitation(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/author-invitations
    Body: {"emailAddress": "...", "domainName": "...", "domainNames": [...], "notes": "..."}

    Returns 201 with the stored invitation.
    """
    user, error = authenticate_admin(req)
    if error:
        return error

    try:
        request = CreateAuthorInvitationRequest.model_validate(read_json(req))
        response = InvitationService().create(request, invited_by=user.upn)
    except Exception as e:
        return exception_response(e, "create author invitation")

    logger.info(f"Admin {user.upn} invited {response.email_address}")
    return json_response(response, status_code=201)


@admin_bp.route(route="admin/containers/init", methods=["POST"])
def admin_init_containers(req: func.HttpRequest) -> func.HttpResponse:
    """
    Create the database and any missing containers.

    POST /api/admin/containers/init
    """
    user, error = authenticate_admin(req)
    if error:
        return error

    logger.info(f"Admin {user.upn} initializing Cosmos containers")
    try:
        result = ContainerInitializer().initialize_all()
    except Exception as e:
        logger.exception(f"Container initialization error: {e}")
        return error_response("Container initialization failed", 500, str(e))

    return json_response(result.to_dict(), status_code=200 if result.success else 500)


@admin_bp.route(route="admin/config", methods=["GET"])
def admin_config(req: func.HttpRequest) -> func.HttpResponse:
    """
    Show current configuration (non-sensitive values only).

    GET /api/admin/config
    """
    _, error = authenticate_admin(req)
    if error:
        return error

    config = get_config()

    # Only expose non-sensitive configuration
    safe_config = {
        "cosmos_database_id": config.cosmos_database_id,
        "cosmos_auth": "managed_identity" if config.use_managed_identity else "key",
        "cosmos_ensure_containers": config.cosmos_ensure_containers,
        "aad_tenant_id": config.aad_tenant_id,
        "token_audience": config.token_audience,
        "azure_dns_resource_group": config.azure_dns_resource_group,
        "azure_frontdoor_profile": config.azure_frontdoor_profile,
        "google_domains_location": config.google_domains_location,
        "referral_base_url": config.referral_base_url,
        "integrations": config.integration_summary(),
        "version": config.version,
        "service_name": config.service_name,
    }

    return json_response({
        "config": safe_config,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
