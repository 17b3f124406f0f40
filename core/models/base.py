# ============================================================================
# COSMOS DOCUMENT BASE MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Shared base for Cosmos-persisted entities
# PURPOSE: camelCase aliasing and container metadata for every entity
# LAST_REVIEWED: 14 OCT 2026
# ============================================================================
"""
CosmosDocument

Every persisted entity derives from this model. Container metadata lives
on ClassVar attributes so repositories and the container initializer can
read it without instantiating anything:

    __container__      Cosmos container name
    __partition_key__  Python field name of the partition key
"""

import uuid
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """New document id (uuid4 string)."""
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CosmosDocument(CamelModel):
    """Base model for documents stored in a Cosmos container."""

    __container__: ClassVar[str] = ""
    __partition_key__: ClassVar[str] = "id"

    id: str = Field(default_factory=new_id, description="Document id (uuid4)")

    @classmethod
    def partition_key_path(cls) -> str:
        """Cosmos partition key path, e.g. '/upn'."""
        return "/" + to_camel(cls.__partition_key__)

    @property
    def partition_key_value(self) -> Any:
        """Partition key value of this document."""
        return getattr(self, self.__partition_key__)

    def to_document(self) -> Dict[str, Any]:
        """Serialize for Cosmos (camelCase, JSON-safe)."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        """Parse a Cosmos document, ignoring system properties (_rid, _etag, ...)."""
        return cls.model_validate(doc)


__all__ = ["CamelModel", "CosmosDocument", "utc_now", "new_id"]
