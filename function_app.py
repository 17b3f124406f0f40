# ============================================================================
# AUTHOR PLATFORM - Azure Function App
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Entry point
# PURPOSE: HTTP API and change-feed triggers for the author platform
# CREATED: 17 OCT 2026
# ============================================================================
"""
Author Platform Function App

Azure Functions V2 entry point providing:
- Domain registrations (user CRUD, admin completion workflow)
- Cosmos change-feed provisioning (Front Door, Google Domains)
- Testimonials, leads, referrals, experiments, authors, platform stats
- Third-party lookups (Wikipedia, Penguin Random House, Amazon, WHMCS, Stripe)

Endpoints:
- /api/livez - Liveness probe (always available)
- /api/readyz - Readiness probe (checks startup validation)
- /api/domain-registrations/* - Caller's domain registrations
- /api/admin/* - Administrative endpoints (Admin role)
- /api/testimonials, /api/leads, /api/referrals, /api/experiments
- /api/authors/*, /api/stats/platform
- /api/wikipedia/*, /api/penguin/*, /api/amazon/*, /api/whmcs/*, /api/stripe/*
"""

import azure.functions as func
import json
import logging

from __version__ import __version__
from core.logging import configure_logging

# ============================================================================
# CREATE APP FIRST (before any imports that might fail)
# ============================================================================

configure_logging()
app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

SERVICE_NAME = "author-platform-functions"

logger = logging.getLogger(__name__)
logger.info("=" * 60)
logger.info(f"Author Platform Function App Starting (v{__version__})")
logger.info("=" * 60)

# ============================================================================
# EARLY PROBES (Before validation - always available)
# ============================================================================
# These endpoints must be available even if startup validation fails.


@app.route(route="livez", methods=["GET"])
def liveness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """
    Liveness probe - always returns 200 if function is running.

    GET /api/livez
    """
    return func.HttpResponse(
        json.dumps({"alive": True, "service": SERVICE_NAME, "version": __version__}),
        status_code=200,
        headers={"Content-Type": "application/json"},
    )


@app.route(route="readyz", methods=["GET"])
def readiness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """
    Readiness probe - returns 200 if startup validation passed.

    GET /api/readyz

    Returns 503 with the failed check names otherwise.
    """
    from function.startup import STARTUP_STATE

    if STARTUP_STATE.all_passed:
        return func.HttpResponse(
            json.dumps({"ready": True, "service": SERVICE_NAME, "details": STARTUP_STATE.to_dict()}),
            status_code=200,
            headers={"Content-Type": "application/json"},
        )

    return func.HttpResponse(
        json.dumps({
            "ready": False,
            "service": SERVICE_NAME,
            "failed_checks": STARTUP_STATE.failed_check_names(),
            "details": STARTUP_STATE.to_dict(),
        }),
        status_code=503,
        headers={"Content-Type": "application/json"},
    )


# ============================================================================
# STARTUP VALIDATION
# ============================================================================
# If validation fails, only /livez and /readyz are available.

logger.info("Running startup validation...")

from function.startup import validate_startup, STARTUP_STATE

validate_startup()

if not STARTUP_STATE.all_passed:
    logger.error("=" * 60)
    logger.error("STARTUP VALIDATION FAILED")
    logger.error("=" * 60)
    logger.error("Only /api/livez and /api/readyz endpoints available")
    for check in STARTUP_STATE.failed_checks():
        logger.error(f"  FAILED: {check.name} - {check.error_message}")
    logger.error("=" * 60)
else:
    logger.info("Startup validation PASSED")


# ============================================================================
# BLUEPRINT REGISTRATION (Conditional on startup success)
# ============================================================================

if STARTUP_STATE.all_passed:
    logger.info("Registering blueprints...")

    from function.blueprints import ALL_BLUEPRINTS

    for blueprint in ALL_BLUEPRINTS:
        app.register_functions(blueprint)
    logger.info(f"  Registered {len(ALL_BLUEPRINTS)} blueprints")

    logger.info("=" * 60)
    logger.info("Author Platform Function App Ready")
    logger.info("=" * 60)
else:
    logger.warning("=" * 60)
    logger.warning("SKIPPING blueprint registration - startup validation failed")
    logger.warning("=" * 60)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["app"]
