"""witstream: Wit.ai client with incremental decoding of streamed responses."""

from witstream.constants import BASE_URL, CURRENT_VERSION, MAX_TEXT_LENGTH
from witstream.exceptions import (
    WitAPIError,
    WitDecodeError,
    WitError,
    WitTimeoutError,
    WitTransportError,
    WitTruncatedStreamError,
)
from witstream.models import (
    Context,
    Dictation,
    DictationQuery,
    DynamicEntities,
    DynamicEntity,
    Encoding,
    Message,
    MessageQuery,
    SpeechQuery,
    SpeechResponse,
    SpeechResponseType,
    SpeechTranscription,
    SpeechType,
    SpeechUnderstanding,
    SynthesizeCodec,
    SynthesizeQuery,
    Voice,
    VoicesResponse,
)
from witstream.models.config import WitConfig
from witstream.services.wit_client import WitClient
from witstream.streaming.frames import FrameBuffer, extract_complete_json

__version__ = "0.1.0"
