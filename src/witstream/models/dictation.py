"""Audio query and transcription models for /dictation."""

from enum import Enum
from typing import Any, AsyncIterable, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Request body: a complete buffer, or chunks uploaded as they are produced.
# Async iterables are only accepted by the async client methods.
AudioSource = Union[bytes, Iterable[bytes], AsyncIterable[bytes]]


class Encoding(str, Enum):
    """Audio container/encoding of the uploaded data."""

    WAV = "wav"
    MP3 = "mp3"
    OGG = "ogg"
    ULAW = "ulaw"
    RAW = "raw"


_CONTENT_TYPES = {
    Encoding.WAV: "audio/wav",
    Encoding.MP3: "audio/mpeg3",
    Encoding.OGG: "audio/ogg",
    Encoding.ULAW: "audio/ulaw",
}


class AudioQuery(BaseModel):
    """
    Audio upload parameters shared by /dictation and /speech.

    Raw audio needs its sample layout spelled out in the Content-Type header,
    so raw_encoding, bits, sample_rate and endian are required for
    Encoding.RAW and ignored otherwise.

    Attributes:
        encoding: Audio format of data
        data: Audio bytes, or an iterable of byte chunks to stream upstream
        raw_encoding: Sample encoding for raw audio (e.g. "signed-integer")
        bits: Bits per sample for raw audio
        sample_rate: Sample rate in Hz for raw audio
        endian: True for little-endian, False for big-endian
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    encoding: Encoding = Encoding.WAV
    data: Any = b""
    raw_encoding: Optional[str] = None
    bits: Optional[int] = Field(default=None, gt=0)
    sample_rate: Optional[int] = Field(default=None, gt=0)
    endian: Optional[bool] = None

    def with_raw_encoding(self, raw_encoding: str):
        return self.model_copy(update={"raw_encoding": raw_encoding})

    def with_bits(self, bits: int):
        return self.model_copy(update={"bits": bits})

    def with_sample_rate(self, sample_rate: int):
        return self.model_copy(update={"sample_rate": sample_rate})

    def with_endian(self, little_endian: bool):
        return self.model_copy(update={"endian": little_endian})

    def content_type(self) -> str:
        """
        Content-Type header value for the upload.

        Raises:
            ValueError: If raw audio is missing one of its layout parameters
        """
        if self.encoding != Encoding.RAW:
            return _CONTENT_TYPES[self.encoding]

        missing = [
            name
            for name in ("raw_encoding", "bits", "sample_rate", "endian")
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(
                f"Raw audio requires {', '.join(missing)} to build the Content-Type header"
            )

        endian = "little" if self.endian else "big"
        return (
            f"audio/raw;encoding={self.raw_encoding};bits={self.bits};"
            f"rate={self.sample_rate};endian={endian}"
        )


class DictationQuery(AudioQuery):
    """Parameters for a /dictation request."""

    pass


class Token(BaseModel):
    """A transcribed word with its position in the audio (milliseconds)."""

    start: int
    end: int
    token: str


class Speech(BaseModel):
    """Transcription confidence and per-token timings."""

    confidence: float = 0.0
    tokens: List[Token] = Field(default_factory=list)


class SpeechType(str, Enum):
    """Whether a transcription may still change."""

    PARTIAL_TRANSCRIPTION = "PARTIAL_TRANSCRIPTION"
    FINAL_TRANSCRIPTION = "FINAL_TRANSCRIPTION"


class Dictation(BaseModel):
    """One transcription event streamed back by /dictation."""

    text: str
    type: SpeechType
    speech: Speech

    @property
    def is_final(self) -> bool:
        return self.type == SpeechType.FINAL_TRANSCRIPTION
