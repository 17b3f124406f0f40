# ============================================================================
# EXPERIMENT BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - A/B experiments
# PURPOSE: Variant assignment for a page
# CREATED: 17 OCT 2026
# ============================================================================
"""
Experiment Blueprint

- GET /api/experiments?page=...&userId=... - Assigned variants (anonymous)

Without userId a fresh session id is issued; clients should send it back
as userId to keep their assignments stable.
"""

import logging

import azure.functions as func

from function.http import error_response, exception_response, json_response
from function.services.experiment_service import ExperimentService

logger = logging.getLogger(__name__)
experiment_bp = func.Blueprint()


@experiment_bp.route(route="experiments", methods=["GET"])
def get_experiments(req: func.HttpRequest) -> func.HttpResponse:
    page = (req.params.get("page") or "").strip()
    if not page:
        return error_response("Missing required parameter: 'page'", 400)

    user_id = (req.params.get("userId") or "").strip() or None
    try:
        return json_response(ExperimentService().assign(page, user_id))
    except Exception as e:
        return exception_response(e, f"experiments for page {page}")
