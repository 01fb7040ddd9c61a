"""Frame decoders turning one JSON object into a typed event."""

import json
from typing import Optional

from pydantic import ValidationError

from witstream.exceptions import WitDecodeError
from witstream.models.dictation import Dictation
from witstream.models.speech import SPEECH_VARIANTS, SpeechResponse
from witstream.utils.logging import get_logger


logger = get_logger(__name__)


def decode_dictation(frame: str) -> Dictation:
    """
    Decode a /dictation frame.

    Every frame maps to the same model; the "type" field only says whether the
    transcription is partial or final.

    Raises:
        WitDecodeError: If the frame is not valid JSON or not a transcription
    """
    try:
        return Dictation.model_validate_json(frame)
    except ValidationError as e:
        raise WitDecodeError(f"Invalid dictation frame: {e}", frame=frame) from e


def decode_speech(frame: str) -> Optional[SpeechResponse]:
    """
    Decode a /speech frame using its "type" tag.

    The frame is parsed once into a generic JSON value, the tag selects the
    model, and the same value is validated against it. Unknown tags, and
    tags that are not strings, return None so that event kinds added to the
    API later are skipped rather than breaking the stream.

    Returns:
        SpeechTranscription or SpeechUnderstanding, or None for skipped tags

    Raises:
        WitDecodeError: On invalid JSON, a missing "type" field, or a
            payload that does not match the tagged model
    """
    try:
        value = json.loads(frame)
    except json.JSONDecodeError as e:
        raise WitDecodeError(
            f"Malformed JSON at position {e.pos}: {e.msg}", frame=frame
        ) from e

    if not isinstance(value, dict):
        raise WitDecodeError(
            f"Expected JSON object, got {type(value).__name__}", frame=frame
        )

    if "type" not in value:
        raise WitDecodeError("Speech frame has no 'type' field", frame=frame)

    tag = value["type"]
    model = SPEECH_VARIANTS.get(tag) if isinstance(tag, str) else None
    if model is None:
        logger.debug("wit_speech_tag_skipped", tag=tag)
        return None

    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise WitDecodeError(f"Invalid {tag} frame: {e}", frame=frame) from e
