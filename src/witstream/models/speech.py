"""Query and event models for /speech (speech understanding)."""

from enum import Enum
from typing import Dict, List, Optional, Type, Union

from pydantic import BaseModel, Field

from witstream.models.context import Context
from witstream.models.dictation import AudioQuery, Speech
from witstream.models.entities import DynamicEntities, Entity
from witstream.models.intents import Intent, Trait


class SpeechQuery(AudioQuery):
    """
    Parameters for a /speech request.

    Attributes:
        context: Optional user context (reference time, timezone, locale, coordinates)
        n: Maximum number of intents to return (1-8)
        tag: App version tag to query
        dynamic_entities: Keywords added to entities for this request only
    """

    context: Optional[Context] = None
    n: Optional[int] = Field(default=None, ge=1, le=8)
    tag: Optional[str] = None
    dynamic_entities: Optional[DynamicEntities] = None

    def with_context(self, context: Context) -> "SpeechQuery":
        return self.model_copy(update={"context": context})

    def with_limit(self, n: int) -> "SpeechQuery":
        return self.model_copy(update={"n": n})

    def with_tag(self, tag: str) -> "SpeechQuery":
        return self.model_copy(update={"tag": tag})

    def with_dynamic_entities(self, dynamic_entities: DynamicEntities) -> "SpeechQuery":
        return self.model_copy(update={"dynamic_entities": dynamic_entities})

    def query_params(self) -> Dict[str, str]:
        """Query string parameters (excluding the API version)."""
        params = {}
        if self.n is not None:
            params["n"] = str(self.n)
        if self.tag:
            params["tag"] = self.tag
        if self.context is not None and not self.context.is_empty():
            params["context"] = self.context.to_query_value()
        if self.dynamic_entities is not None and not self.dynamic_entities.is_empty():
            params["entities"] = self.dynamic_entities.to_query_value()
        return params


class SpeechResponseType(str, Enum):
    """Value of the "type" field tagging each /speech event."""

    PARTIAL_TRANSCRIPTION = "PARTIAL_TRANSCRIPTION"
    FINAL_TRANSCRIPTION = "FINAL_TRANSCRIPTION"
    PARTIAL_UNDERSTANDING = "PARTIAL_UNDERSTANDING"
    FINAL_UNDERSTANDING = "FINAL_UNDERSTANDING"


class SpeechTranscription(BaseModel):
    """Transcription-only /speech event (partial or final)."""

    type: SpeechResponseType
    text: str
    speech: Optional[Speech] = None
    is_final: Optional[bool] = None

    @property
    def final(self) -> bool:
        return self.type == SpeechResponseType.FINAL_TRANSCRIPTION


class SpeechUnderstanding(BaseModel):
    """Understanding /speech event: the transcription plus intents, entities and traits."""

    type: SpeechResponseType
    text: str
    speech: Optional[Speech] = None
    intents: List[Intent] = Field(default_factory=list)
    entities: Dict[str, List[Entity]] = Field(default_factory=dict)
    traits: Dict[str, List[Trait]] = Field(default_factory=dict)
    is_final: Optional[bool] = None

    @property
    def final(self) -> bool:
        return self.type == SpeechResponseType.FINAL_UNDERSTANDING

    def intent(self) -> Optional[Intent]:
        """Most confident intent, if any."""
        return self.intents[0] if self.intents else None

    def get_entity(self, name: str) -> Optional[List[Entity]]:
        return self.entities.get(name)

    def get_trait(self, name: str) -> Optional[List[Trait]]:
        return self.traits.get(name)


SpeechResponse = Union[SpeechTranscription, SpeechUnderstanding]

# Tag -> model used to decode a /speech event. Tags missing here are skipped.
SPEECH_VARIANTS: Dict[str, Type[BaseModel]] = {
    SpeechResponseType.PARTIAL_TRANSCRIPTION.value: SpeechTranscription,
    SpeechResponseType.FINAL_TRANSCRIPTION.value: SpeechTranscription,
    SpeechResponseType.PARTIAL_UNDERSTANDING.value: SpeechUnderstanding,
    SpeechResponseType.FINAL_UNDERSTANDING.value: SpeechUnderstanding,
}
