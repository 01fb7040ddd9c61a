"""Entity models: extracted entities in responses and dynamic entities in requests."""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """
    An entity extracted from an utterance.

    Built-in entities (wit$datetime, wit$location, wit$quantity, ...) carry
    different extra fields; those are kept as-is rather than rejected.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    role: str
    start: int
    end: int
    body: str
    confidence: float
    entities: Dict[str, List["Entity"]] = Field(default_factory=dict)
    value: Optional[Any] = None
    type: Optional[str] = None
    unit: Optional[str] = None
    grain: Optional[str] = None
    suggested: Optional[bool] = None


class EntityValue(BaseModel):
    """A keyword (and its synonyms) for a dynamic entity."""

    keyword: str = Field(..., min_length=1)
    synonyms: List[str] = Field(default_factory=list)


class DynamicEntity(BaseModel):
    """Keywords added to an entity for a single request."""

    name: str = Field(..., min_length=1)
    values: List[EntityValue] = Field(default_factory=list)

    def add_value(self, keyword: str, synonyms: Optional[List[str]] = None) -> "DynamicEntity":
        """Append a keyword; returns self for chaining."""
        self.values.append(EntityValue(keyword=keyword, synonyms=synonyms or []))
        return self


class DynamicEntities(BaseModel):
    """Collection of dynamic entities sent with /message or /speech."""

    entities: List[DynamicEntity] = Field(default_factory=list)

    def add(self, entity: DynamicEntity) -> "DynamicEntities":
        self.entities.append(entity)
        return self

    def is_empty(self) -> bool:
        return not self.entities

    def to_query_value(self) -> str:
        """
        JSON for the "entities" query parameter.

        Wit.ai expects {"entities": {"<name>": [{"keyword": ..., "synonyms": [...]}]}}.
        """
        payload = {
            entity.name: [value.model_dump() for value in entity.values]
            for entity in self.entities
        }
        return json.dumps({"entities": payload})
