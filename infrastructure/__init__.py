# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Infrastructure - Cosmos DB access and provisioning
# PURPOSE: Cosmos client factory, container provisioning, Azure auth
# CREATED: 14 OCT 2026
# ============================================================================
"""
Infrastructure module for the author platform.

Provides:
- get_container: Cosmos container proxy by name (shared CosmosClient)
- ContainerInitializer: create database + entity containers if missing
- get_arm_token: Azure Resource Manager bearer token (infrastructure.auth)

Usage:
    from infrastructure import get_container, ContainerInitializer

    container = get_container("Testimonials")
    result = ContainerInitializer().initialize_all()
"""

from infrastructure.cosmos import get_container, get_cosmos_client, get_database, reset_cosmos_client
from infrastructure.container_initializer import (
    ContainerInitializer,
    InitializationResult,
    StepResult,
    initialize_containers,
)

__all__ = [
    "get_container",
    "get_cosmos_client",
    "get_database",
    "reset_cosmos_client",
    "ContainerInitializer",
    "InitializationResult",
    "StepResult",
    "initialize_containers",
]
