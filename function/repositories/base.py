# ============================================================================
# BASE REPOSITORY FOR FUNCTION APP
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Cosmos DB access base class
# PURPOSE: Typed Cosmos container access for one entity model
# CREATED: 15 OCT 2026
# ============================================================================
"""
Base Repository for Function App

Thin typed wrapper over an azure.cosmos ContainerProxy. Each subclass binds
one CosmosDocument model and adds its own queries.

Design Principles:
- Parameterized SQL only (never string-format user input into a query)
- Models in, models out (documents parsed with model.from_document)
- Point reads return None on 404; every other Cosmos error propagates
- Container proxy resolved lazily so constructing a repository is free
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from azure.cosmos import exceptions as cosmos_exceptions
from azure.cosmos.container import ContainerProxy

from core.models.base import CosmosDocument
from infrastructure.cosmos import get_container

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=CosmosDocument)

QueryParams = Optional[Sequence[Dict[str, Any]]]


def params(**values: Any) -> List[Dict[str, Any]]:
    """Build Cosmos query parameters: params(upn="x") -> [{"name": "@upn", "value": "x"}]."""
    return [{"name": f"@{name}", "value": value} for name, value in values.items()]


class CosmosRepository(Generic[T]):
    """
    Base repository for one Cosmos container.

    Pattern:
    - model: the CosmosDocument subclass stored in the container
    - container: injected ContainerProxy (tests) or resolved by name
    """

    model: Type[T]

    def __init__(self, container: Optional[ContainerProxy] = None):
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        if self._container is None:
            self._container = get_container(self.model.__container__)
        return self._container

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(
        self,
        query: str,
        parameters: QueryParams = None,
        partition_key: Any = None,
    ) -> List[T]:
        """
        Run a SQL query and parse each document.

        Args:
            query: Cosmos SQL, e.g. "SELECT * FROM c WHERE c.upn = @upn"
            parameters: params(...) list
            partition_key: restrict to one partition; None means cross-partition
        """
        return [self.model.from_document(doc) for doc in self.query_raw(query, parameters, partition_key)]

    def query_raw(
        self,
        query: str,
        parameters: QueryParams = None,
        partition_key: Any = None,
    ) -> List[Any]:
        """Run a SQL query and return raw results (for VALUE / aggregate queries)."""
        kwargs: Dict[str, Any] = {"query": query, "parameters": list(parameters or [])}
        if partition_key is not None:
            kwargs["partition_key"] = partition_key
        else:
            kwargs["enable_cross_partition_query"] = True
        return list(self.container.query_items(**kwargs))

    def query_scalar(self, query: str, parameters: QueryParams = None, default: Any = 0) -> Any:
        """Run a SELECT VALUE query and return its single result."""
        rows = self.query_raw(query, parameters)
        return rows[0] if rows else default

    def first(self, query: str, parameters: QueryParams = None, partition_key: Any = None) -> Optional[T]:
        results = self.query(query, parameters, partition_key)
        return results[0] if results else None

    # ------------------------------------------------------------------
    # Point operations
    # ------------------------------------------------------------------

    def get(self, item_id: str, partition_key: Any) -> Optional[T]:
        """Point read; None if the document does not exist."""
        try:
            doc = self.container.read_item(item=item_id, partition_key=partition_key)
        except cosmos_exceptions.CosmosResourceNotFoundError:
            return None
        return self.model.from_document(doc)

    def find_by_id(self, item_id: str) -> Optional[T]:
        """Cross-partition lookup by id."""
        return self.first("SELECT * FROM c WHERE c.id = @id", params(id=item_id))

    def create(self, entity: T) -> T:
        doc = self.container.create_item(body=entity.to_document())
        logger.debug(f"Created {self.model.__name__} {entity.id}")
        return self.model.from_document(doc)

    def upsert(self, entity: T) -> T:
        doc = self.container.upsert_item(body=entity.to_document())
        return self.model.from_document(doc)

    def replace(self, entity: T) -> T:
        doc = self.container.replace_item(item=entity.id, body=entity.to_document())
        logger.debug(f"Replaced {self.model.__name__} {entity.id}")
        return self.model.from_document(doc)

    def delete(self, item_id: str, partition_key: Any) -> bool:
        """Delete by id; False if it did not exist."""
        try:
            self.container.delete_item(item=item_id, partition_key=partition_key)
        except cosmos_exceptions.CosmosResourceNotFoundError:
            return False
        logger.debug(f"Deleted {self.model.__name__} {item_id}")
        return True

    def count(self) -> int:
        return int(self.query_scalar("SELECT VALUE COUNT(1) FROM c"))


__all__ = ["CosmosRepository", "params"]
