# ============================================================================
# DOMAIN REGISTRATION TRIGGERS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Cosmos DB change-feed triggers
# PURPOSE: Provision Front Door and Google Domains for new registrations
# CREATED: 17 OCT 2026
# ============================================================================
"""
Domain Registration Triggers

Two independent change-feed consumers of the DomainRegistrations
container. Each keeps its own lease prefix in the shared `leases`
container so both see every change.

- Front Door:      Pending registration -> Front Door custom domain
- Google Domains:  Pending registration -> Cloud Domains registration
"""

import logging

import azure.functions as func

from core.logging import log_context
from function.services.domain_registration_service import DomainRegistrationService

logger = logging.getLogger(__name__)
domain_trigger_bp = func.Blueprint()

COSMOS_CONNECTION = "CosmosDBConnection"
DATABASE_NAME = "%COSMOSDB_DATABASE_ID%"
CONTAINER_NAME = "DomainRegistrations"
LEASE_CONTAINER = "leases"
FRONT_DOOR_LEASE_PREFIX = "domainregistration"
GOOGLE_DOMAINS_LEASE_PREFIX = "googledomainregistration"


def _to_dicts(documents: func.DocumentList) -> list:
    return [doc.to_dict() for doc in documents]


@domain_trigger_bp.cosmos_db_trigger(
    arg_name="documents",
    connection=COSMOS_CONNECTION,
    database_name=DATABASE_NAME,
    container_name=CONTAINER_NAME,
    lease_container_name=LEASE_CONTAINER,
    lease_container_prefix=FRONT_DOOR_LEASE_PREFIX,
    create_lease_container_if_not_exists=True,
)
def domain_registration_front_door_trigger(documents: func.DocumentList, context: func.Context) -> None:
    if not documents:
        return
    with log_context(invocation_id=context.invocation_id):
        logger.info(f"Front Door trigger received {len(documents)} document(s)")
        added = DomainRegistrationService().provision_front_door(_to_dicts(documents))
        logger.info(f"Front Door trigger added {added} custom domain(s)")


@domain_trigger_bp.cosmos_db_trigger(
    arg_name="documents",
    connection=COSMOS_CONNECTION,
    database_name=DATABASE_NAME,
    container_name=CONTAINER_NAME,
    lease_container_name=LEASE_CONTAINER,
    lease_container_prefix=GOOGLE_DOMAINS_LEASE_PREFIX,
    create_lease_container_if_not_exists=True,
)
def google_domain_registration_trigger(documents: func.DocumentList, context: func.Context) -> None:
    if not documents:
        return
    with log_context(invocation_id=context.invocation_id):
        logger.info(f"Google Domains trigger received {len(documents)} document(s)")
        registered = DomainRegistrationService().provision_google_domains(_to_dicts(documents))
        logger.info(f"Google Domains trigger submitted {registered} registration(s)")
