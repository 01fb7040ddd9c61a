"""Query and response models for /message (text understanding)."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from witstream.constants import MAX_TEXT_LENGTH
from witstream.models.context import Context
from witstream.models.entities import DynamicEntities, Entity
from witstream.models.intents import Intent, Trait


class MessageQuery(BaseModel):
    """
    Parameters for a /message request.

    Attributes:
        q: Utterance to analyze (1-280 characters)
        tag: App version tag to query
        n: Maximum number of intents to return (1-8)
        context: Optional user context
        dynamic_entities: Keywords added to entities for this request only
    """

    q: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    tag: Optional[str] = None
    n: Optional[int] = Field(default=None, ge=1, le=8)
    context: Optional[Context] = None
    dynamic_entities: Optional[DynamicEntities] = None

    model_config = {"frozen": True}

    def with_tag(self, tag: str) -> "MessageQuery":
        return self.model_copy(update={"tag": tag})

    def with_limit(self, n: int) -> "MessageQuery":
        return self.model_copy(update={"n": n})

    def with_context(self, context: Context) -> "MessageQuery":
        return self.model_copy(update={"context": context})

    def with_dynamic_entities(self, dynamic_entities: DynamicEntities) -> "MessageQuery":
        return self.model_copy(update={"dynamic_entities": dynamic_entities})

    def query_params(self) -> Dict[str, str]:
        """Query string parameters (excluding the API version)."""
        params = {"q": self.q}
        if self.tag:
            params["tag"] = self.tag
        if self.n is not None:
            params["n"] = str(self.n)
        if self.context is not None and not self.context.is_empty():
            params["context"] = self.context.to_query_value()
        if self.dynamic_entities is not None and not self.dynamic_entities.is_empty():
            params["entities"] = self.dynamic_entities.to_query_value()
        return params


class Message(BaseModel):
    """Understanding of a text utterance."""

    text: str
    intents: List[Intent] = Field(default_factory=list)
    entities: Dict[str, List[Entity]] = Field(default_factory=dict)
    traits: Dict[str, List[Trait]] = Field(default_factory=dict)

    def intent(self) -> Optional[Intent]:
        """Most confident intent, if any."""
        return self.intents[0] if self.intents else None

    def get_entity(self, name: str) -> Optional[List[Entity]]:
        return self.entities.get(name)

    def get_trait(self, name: str) -> Optional[List[Trait]]:
        return self.traits.get(name)
