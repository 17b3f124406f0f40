# ============================================================================
# COSMOS DB CLIENT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Infrastructure - Cosmos DB client factory
# PURPOSE: One CosmosClient per worker process, container proxies on demand
# CREATED: 14 OCT 2026
# ============================================================================
"""
Cosmos DB Client

Lazily creates a single azure.cosmos.CosmosClient per process and hands
out container proxies. Getting a proxy makes no network call; the first
query or point read does.

Authentication (first match wins):
1. COSMOSDB_CONNECTION_STRING
2. COSMOSDB_ENDPOINT_URI + COSMOSDB_PRIMARY_KEY
3. COSMOSDB_ENDPOINT_URI + USE_MANAGED_IDENTITY=true
   (ManagedIdentityCredential if AZURE_CLIENT_ID is set,
   otherwise DefaultAzureCredential)

Usage:
    from infrastructure.cosmos import get_container

    container = get_container("DomainRegistrations")
    item = container.read_item(item=reg_id, partition_key=upn)
"""

import logging
import threading
from typing import Optional

from azure.cosmos import CosmosClient
from azure.cosmos.container import ContainerProxy
from azure.cosmos.database import DatabaseProxy

from function.config import get_config

logger = logging.getLogger(__name__)

_client: Optional[CosmosClient] = None
_client_lock = threading.Lock()


def _build_client() -> CosmosClient:
    """Create a CosmosClient from configuration."""
    config = get_config()

    if config.cosmos_connection_string:
        logger.info("Cosmos DB client using connection string")
        return CosmosClient.from_connection_string(config.cosmos_connection_string)

    if not config.cosmos_endpoint:
        raise RuntimeError(
            "Cosmos DB is not configured. Set COSMOSDB_CONNECTION_STRING or COSMOSDB_ENDPOINT_URI."
        )

    if config.cosmos_key:
        logger.info(f"Cosmos DB client using account key for {config.cosmos_endpoint}")
        return CosmosClient(config.cosmos_endpoint, credential=config.cosmos_key)

    from azure.identity import DefaultAzureCredential, ManagedIdentityCredential

    if config.azure_client_id:
        logger.info(f"Cosmos DB client using user-assigned Managed Identity: {config.azure_client_id[:8]}...")
        credential = ManagedIdentityCredential(client_id=config.azure_client_id)
    else:
        logger.info("Cosmos DB client using DefaultAzureCredential (system MI or az login)")
        credential = DefaultAzureCredential()
    return CosmosClient(config.cosmos_endpoint, credential=credential)


def get_cosmos_client() -> CosmosClient:
    """Get the process-wide CosmosClient."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = _build_client()
    return _client


def get_database() -> DatabaseProxy:
    """Database proxy for COSMOSDB_DATABASE_ID."""
    return get_cosmos_client().get_database_client(get_config().cosmos_database_id)


def get_container(name: str) -> ContainerProxy:
    """Container proxy by name."""
    return get_database().get_container_client(name)


def reset_cosmos_client() -> None:
    """Forget the cached client (tests, credential rotation)."""
    global _client
    with _client_lock:
        _client = None


__all__ = [
    "get_cosmos_client",
    "get_database",
    "get_container",
    "reset_cosmos_client",
]
