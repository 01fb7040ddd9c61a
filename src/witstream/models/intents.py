"""Intent and trait models returned by Wit.ai understanding endpoints."""

from pydantic import BaseModel, Field


class Intent(BaseModel):
    """An intent recognized in an utterance.

    Two intents are equal when they share id and name; confidence is ignored.
    """

    id: str
    name: str
    confidence: float = Field(..., ge=0.0, le=1.0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intent):
            return NotImplemented
        return self.id == other.id and self.name == other.name

    def __hash__(self) -> int:
        return hash((self.id, self.name))


class Trait(BaseModel):
    """A trait value (e.g. wit$sentiment) detected in an utterance."""

    id: str
    value: str
    confidence: float = Field(..., ge=0.0, le=1.0)
