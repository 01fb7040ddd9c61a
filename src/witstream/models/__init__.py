"""Pydantic data models for witstream."""

# Import models in dependency order; Entity refers to itself
from witstream.models.context import Context, Coordinates
from witstream.models.intents import Intent, Trait
from witstream.models.entities import DynamicEntities, DynamicEntity, Entity, EntityValue
from witstream.models.dictation import (
    AudioQuery,
    AudioSource,
    Dictation,
    DictationQuery,
    Encoding,
    Speech,
    SpeechType,
    Token,
)
from witstream.models.speech import (
    SPEECH_VARIANTS,
    SpeechQuery,
    SpeechResponse,
    SpeechResponseType,
    SpeechTranscription,
    SpeechUnderstanding,
)
from witstream.models.message import Message, MessageQuery
from witstream.models.voice import Voice, VoiceGender, VoicesResponse
from witstream.models.synthesize import SynthesizeCodec, SynthesizeQuery

Entity.model_rebuild()
