# ============================================================================
# FUNCTION APP BLUEPRINTS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprints - HTTP routes and Cosmos triggers
# PURPOSE: Azure Functions V2 blueprints, one per functional area
# CREATED: 17 OCT 2026
# ============================================================================
"""
Function App Blueprints

Azure Functions V2 blueprints organizing HTTP endpoints and change-feed
triggers. Each blueprint is conditionally registered based on startup
validation.
"""

from function.blueprints.admin_bp import admin_bp
from function.blueprints.author_bp import author_bp
from function.blueprints.domain_registration_bp import domain_registration_bp
from function.blueprints.domain_trigger_bp import domain_trigger_bp
from function.blueprints.experiment_bp import experiment_bp
from function.blueprints.integrations_bp import integrations_bp
from function.blueprints.lead_bp import lead_bp
from function.blueprints.locale_bp import locale_bp
from function.blueprints.referral_bp import referral_bp
from function.blueprints.stats_bp import stats_bp
from function.blueprints.stripe_bp import stripe_bp
from function.blueprints.testimonial_bp import testimonial_bp

ALL_BLUEPRINTS = [
    domain_registration_bp,
    admin_bp,
    domain_trigger_bp,
    testimonial_bp,
    lead_bp,
    referral_bp,
    experiment_bp,
    author_bp,
    stats_bp,
    integrations_bp,
    stripe_bp,
    locale_bp,
]

__all__ = [
    "ALL_BLUEPRINTS",
    "admin_bp",
    "author_bp",
    "domain_registration_bp",
    "domain_trigger_bp",
    "experiment_bp",
    "integrations_bp",
    "lead_bp",
    "locale_bp",
    "referral_bp",
    "stats_bp",
    "stripe_bp",
    "testimonial_bp",
]
