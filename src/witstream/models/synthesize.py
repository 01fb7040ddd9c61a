"""Request models for /synthesize (text-to-speech)."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SynthesizeCodec(str, Enum):
    """Audio format requested through the Accept header."""

    PCM = "audio/pcm16"
    MP3 = "audio/mpeg"
    WAV = "audio/wav"


class SynthesizeQuery(BaseModel):
    """
    Parameters for a /synthesize request.

    Attributes:
        q: Text (or SSML) to speak
        voice: Voice name, see GET /voices
        style: Voice style, must be one of the voice's styles
        speed: Speaking rate in percent (10-400)
        pitch: Pitch in percent (25-400)
    """

    q: str = Field(..., min_length=1)
    voice: str = Field(..., min_length=1)
    style: Optional[str] = None
    speed: Optional[int] = Field(default=None, ge=10, le=400)
    pitch: Optional[int] = Field(default=None, ge=25, le=400)

    model_config = {"frozen": True}

    def with_style(self, style: str) -> "SynthesizeQuery":
        return self.model_copy(update={"style": style})

    def with_speed(self, speed: int) -> "SynthesizeQuery":
        return self.model_validate({**self.model_dump(), "speed": speed})

    def with_pitch(self, pitch: int) -> "SynthesizeQuery":
        return self.model_validate({**self.model_dump(), "pitch": pitch})

    def spoken_length(self) -> int:
        """Number of characters spoken, ignoring SSML tags."""
        count = 0
        in_tag = False
        for ch in self.q:
            if ch == "<":
                in_tag = True
            elif ch == ">":
                in_tag = False
            elif not in_tag:
                count += 1
        return count

    def to_body(self) -> Dict[str, Any]:
        """JSON request body."""
        return self.model_dump(exclude_none=True)
