# ============================================================================
# REFERRAL BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Referral program
# PURPOSE: Referral creation and per-referrer stats
# CREATED: 17 OCT 2026
# ============================================================================
"""
Referral Blueprint

- POST /api/referrals - Create a referral code for an invited email
- GET  /api/referrals/{userId} - Referral stats for a referrer
"""

import logging

import azure.functions as func

from function.http import exception_response, json_response, read_json
from function.models.requests import CreateReferralRequest
from function.services.referral_service import ReferralService

logger = logging.getLogger(__name__)
referral_bp = func.Blueprint()


@referral_bp.route(route="referrals", methods=["POST"])
def create_referral(req: func.HttpRequest) -> func.HttpResponse:
    """
    POST /api/referrals
    Body: {"referrerId": "...", "referredEmail": "..."}
    """
    try:
        request = CreateReferralRequest.model_validate(read_json(req))
        response = ReferralService().create(request)
        return json_response(response, status_code=201)
    except Exception as e:
        return exception_response(e, "create referral")


@referral_bp.route(route="referrals/{userId}", methods=["GET"])
def get_referral_stats(req: func.HttpRequest) -> func.HttpResponse:
    user_id = req.route_params.get("userId")
    try:
        return json_response(ReferralService().stats(user_id))
    except Exception as e:
        return exception_response(e, f"referral stats for {user_id}")
