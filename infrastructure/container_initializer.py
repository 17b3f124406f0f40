# ============================================================================
# CONTAINER INITIALIZER - INFRASTRUCTURE AS CODE
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Infrastructure - Cosmos database and container provisioning
# PURPOSE: Create the database and every entity container if missing
# CREATED: 15 OCT 2026
# ============================================================================
"""
ContainerInitializer - Infrastructure as Code for Cosmos DB.

Provisioning workflow:
1. Connection test (read account properties)
2. Database creation (create_database_if_not_exists)
3. One step per container, partition key taken from the model's
   __partition_key__ (create_container_if_not_exists)

Pydantic models are the single source of truth for container names and
partition keys (core.models.ALL_DOCUMENT_MODELS). The change-feed lease
container is created by the Functions host, not here.

Usage:
    from infrastructure.container_initializer import ContainerInitializer

    result = ContainerInitializer().initialize_all()
    print(result.to_dict())
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from azure.cosmos import PartitionKey
from azure.cosmos import exceptions as cosmos_exceptions

from core.models import ALL_DOCUMENT_MODELS, CosmosDocument
from function.config import get_config
from infrastructure.cosmos import get_cosmos_client

logger = logging.getLogger(__name__)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class StepResult:
    """Result of a single initialization step."""
    name: str
    status: str  # 'success', 'failed', 'skipped'
    message: str = ""
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class InitializationResult:
    """Complete result of container initialization."""
    database_id: str
    timestamp: str
    success: bool
    steps: List[StepResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "database_id": self.database_id,
            "timestamp": self.timestamp,
            "success": self.success,
            "steps": [
                {
                    "name": s.name,
                    "status": s.status,
                    "message": s.message,
                    "error": s.error,
                    "details": s.details,
                }
                for s in self.steps
            ],
            "errors": self.errors,
            "summary": {
                "total_steps": len(self.steps),
                "successful": len([s for s in self.steps if s.status == "success"]),
                "failed": len([s for s in self.steps if s.status == "failed"]),
                "skipped": len([s for s in self.steps if s.status == "skipped"]),
            },
        }


# ============================================================================
# CONTAINER INITIALIZER
# ============================================================================

class ContainerInitializer:
    """
    Cosmos provisioning runner.

    All operations are idempotent (safe to run on every cold start).
    """

    def __init__(self, client=None, database_id: Optional[str] = None, models: Optional[List[Type[CosmosDocument]]] = None):
        self._client = client
        self.database_id = database_id or get_config().cosmos_database_id
        self.models = models or ALL_DOCUMENT_MODELS

    @property
    def client(self):
        """CosmosClient (lazy, shared with repositories)."""
        if self._client is None:
            self._client = get_cosmos_client()
        return self._client

    def initialize_all(self) -> InitializationResult:
        """Create the database and all containers."""
        result = InitializationResult(
            database_id=self.database_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
            success=False,
        )

        logger.info("=" * 70)
        logger.info("COSMOS DB - CONTAINER INITIALIZATION")
        logger.info(f"   Database: {self.database_id}")
        logger.info(f"   Containers: {len(self.models)}")
        logger.info("=" * 70)

        step = self._test_connection()
        result.steps.append(step)
        if step.status == "failed":
            result.errors.append(f"Connection failed: {step.error}")
            return result

        step, database = self._ensure_database()
        result.steps.append(step)
        if step.status == "failed":
            result.errors.append(f"Database creation failed: {step.error}")
            for model in self.models:
                result.steps.append(StepResult(
                    name=f"container:{model.__container__}",
                    status="skipped",
                    message="Skipped due to database failure",
                ))
            return result

        for model in self.models:
            step = self._ensure_container(database, model)
            result.steps.append(step)
            if step.status == "failed":
                result.errors.append(f"{model.__container__}: {step.error}")

        result.success = not result.errors

        summary = result.to_dict()["summary"]
        logger.info("=" * 70)
        logger.info(f"INITIALIZATION {'COMPLETE' if result.success else 'FAILED'}")
        logger.info(f"   Steps: {summary['successful']} succeeded, {summary['failed']} failed")
        if result.errors:
            logger.warning(f"   Errors: {result.errors}")
        logger.info("=" * 70)

        return result

    def _test_connection(self) -> StepResult:
        step = StepResult(name="test_connection", status="pending")
        try:
            account = self.client.get_database_account()
            step.status = "success"
            step.message = "Connected to Cosmos DB account"
            regions = getattr(account, "WritableLocations", None) or []
            step.details = {"writable_regions": [r.get("name") for r in regions if isinstance(r, dict)]}
        except Exception as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Connection failed: {e}"
            logger.error(f"Cosmos connection test failed: {e}")

        logger.info(f"   Result: {step.status} - {step.message}")
        return step

    def _ensure_database(self):
        step = StepResult(name="ensure_database", status="pending")
        database = None
        try:
            database = self.client.create_database_if_not_exists(id=self.database_id)
            step.status = "success"
            step.message = f"Database {self.database_id} ready"
        except cosmos_exceptions.CosmosHttpResponseError as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Database creation failed: {e}"
            logger.error(f"Database creation failed: {e}")

        logger.info(f"   Result: {step.status} - {step.message}")
        return step, database

    def _ensure_container(self, database, model: Type[CosmosDocument]) -> StepResult:
        name = model.__container__
        path = model.partition_key_path()
        step = StepResult(name=f"container:{name}", status="pending", details={"partition_key": path})
        try:
            database.create_container_if_not_exists(id=name, partition_key=PartitionKey(path=path))
            step.status = "success"
            step.message = f"Container {name} ready ({path})"
        except cosmos_exceptions.CosmosHttpResponseError as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Container creation failed: {e}"
            logger.error(f"Container {name} creation failed: {e}")

        logger.info(f"   Result: {step.status} - {step.message}")
        return step


def initialize_containers() -> InitializationResult:
    """Convenience wrapper used by startup validation and the admin endpoint."""
    return ContainerInitializer().initialize_all()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ContainerInitializer",
    "InitializationResult",
    "StepResult",
    "initialize_containers",
]
