# ============================================================================
# LEAD BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Lead capture
# PURPOSE: Anonymous lead capture from marketing forms
# CREATED: 17 OCT 2026
# ============================================================================
"""
Lead Blueprint

- POST /api/leads - Capture a lead (anonymous, rate limited per IP)

Responses:
    201 {"id", "status": "created",  "message"} - new lead
    200 {"id", "status": "existing", "message"} - email already known
    429 rate limit exceeded
"""

import logging

import azure.functions as func

from function.http import client_ip, exception_response, json_response, read_json
from function.models.responses import LeadResponse
from function.services.lead_service import LeadService

logger = logging.getLogger(__name__)
lead_bp = func.Blueprint()


@lead_bp.route(route="leads", methods=["POST"])
def create_lead(req: func.HttpRequest) -> func.HttpResponse:
    ip_address = client_ip(req)
    try:
        lead, created = LeadService().capture(read_json(req), ip_address)
    except Exception as e:
        return exception_response(e, "create lead")

    if created:
        return json_response(
            LeadResponse(id=lead.id, status="created", message="Lead successfully created"),
            status_code=201,
        )
    return json_response(LeadResponse(id=lead.id, status="existing", message="Email already registered"))
