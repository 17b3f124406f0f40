# ============================================================================
# FUNCTION APP MODULE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Azure Function App components
# PURPOSE: HTTP routes, triggers and their supporting layers
# CREATED: 16 OCT 2026
# ============================================================================
"""
Function App Module

Contains all components specific to the Azure Function App deployment:
- Blueprints (HTTP endpoints and Cosmos triggers)
- Auth (JWT validation, role guard, user profiles)
- Models (request/response schemas)
- Repositories (Cosmos containers)
- Services (business logic, completion workflow)
- Clients (third-party APIs)
- Startup validation
"""

__all__ = []
