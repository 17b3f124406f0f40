# ============================================================================
# STATS BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Platform statistics
# PURPOSE: Public platform counters for marketing pages
# CREATED: 17 OCT 2026
# ============================================================================
"""
Stats Blueprint

- GET /api/stats/platform - Platform stats (anonymous, cached one hour)
"""

import logging

import azure.functions as func

from function.http import exception_response, json_response
from function.models.responses import PlatformStatsResponse
from function.services.platform_stats_service import PlatformStatsService

logger = logging.getLogger(__name__)
stats_bp = func.Blueprint()

STATS_CACHE_CONTROL = "public, max-age=3600"


@stats_bp.route(route="stats/platform", methods=["GET"])
def get_platform_stats(req: func.HttpRequest) -> func.HttpResponse:
    try:
        stats = PlatformStatsService().get_stats()
    except Exception as e:
        return exception_response(e, "platform stats")
    return json_response(
        PlatformStatsResponse.from_entity(stats),
        headers={"Cache-Control": STATS_CACHE_CONTROL},
    )
