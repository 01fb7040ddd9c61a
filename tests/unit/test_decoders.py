"""Unit tests for /speech and /dictation frame decoders."""

import pytest

from witstream.exceptions import WitDecodeError
from witstream.models.dictation import SpeechType
from witstream.models.speech import SpeechResponseType, SpeechTranscription, SpeechUnderstanding
from witstream.streaming.decoders import decode_dictation, decode_speech


UNDERSTANDING_FRAME = """{
  "type": "FINAL_UNDERSTANDING",
  "text": "set an alarm tomorrow at 7am",
  "is_final": true,
  "speech": {"confidence": 0.91, "tokens": [{"start": 0, "end": 300, "token": "set"}]},
  "intents": [{"id": "1234", "name": "wake_up", "confidence": 0.97}],
  "entities": {
    "wit$datetime:datetime": [{
      "id": "5678", "name": "wit$datetime", "role": "datetime",
      "start": 13, "end": 28, "body": "tomorrow at 7am",
      "confidence": 0.95, "entities": {}, "type": "value",
      "grain": "hour", "value": "2024-03-05T07:00:00.000-08:00",
      "values": [{"type": "value", "grain": "hour"}]
    }]
  },
  "traits": {"wit$sentiment": [{"id": "t1", "value": "neutral", "confidence": 0.6}]}
}"""


class TestDecodeSpeech:
    """Test decode_speech."""

    @pytest.mark.parametrize(
        "tag", ["PARTIAL_TRANSCRIPTION", "FINAL_TRANSCRIPTION"]
    )
    def test_transcription_tags(self, tag):
        event = decode_speech(f'{{"type": "{tag}", "text": "hello"}}')

        assert isinstance(event, SpeechTranscription)
        assert event.type == SpeechResponseType(tag)
        assert event.final == (tag == "FINAL_TRANSCRIPTION")

    def test_partial_understanding(self):
        event = decode_speech('{"type": "PARTIAL_UNDERSTANDING", "text": "set an"}')

        assert isinstance(event, SpeechUnderstanding)
        assert not event.final
        assert event.intent() is None

    def test_final_understanding(self):
        event = decode_speech(UNDERSTANDING_FRAME)

        assert isinstance(event, SpeechUnderstanding)
        assert event.final
        assert event.is_final is True
        assert event.intent().name == "wake_up"
        assert event.speech.tokens[0].token == "set"

        datetime_entity = event.get_entity("wit$datetime:datetime")[0]
        assert datetime_entity.body == "tomorrow at 7am"
        assert datetime_entity.grain == "hour"
        # Fields not declared on Entity are kept
        assert datetime_entity.values == [{"type": "value", "grain": "hour"}]

        assert event.get_trait("wit$sentiment")[0].value == "neutral"
        assert event.get_trait("missing") is None

    def test_unknown_tag_returns_none(self):
        assert decode_speech('{"type": "UNKNOWN_TAG", "text": "?"}') is None

    def test_missing_tag(self):
        frame = '{"text": "no tag"}'

        with pytest.raises(WitDecodeError, match="no 'type' field") as exc_info:
            decode_speech(frame)

        assert exc_info.value.frame == frame

    @pytest.mark.parametrize(
        "frame",
        [
            '{"type": 7, "text": "numeric tag"}',
            '{"type": null}',
            '{"type": ["FINAL_TRANSCRIPTION"], "text": "list tag"}',
        ],
    )
    def test_non_string_tag_skipped(self, frame):
        assert decode_speech(frame) is None

    def test_malformed_json(self):
        with pytest.raises(WitDecodeError, match="Malformed JSON"):
            decode_speech('{"type": "FINAL_TRANSCRIPTION", text}')

    def test_known_tag_with_wrong_shape(self):
        with pytest.raises(WitDecodeError, match="FINAL_UNDERSTANDING"):
            decode_speech('{"type": "FINAL_UNDERSTANDING", "text": "x", "intents": "none"}')


class TestDecodeDictation:
    """Test decode_dictation."""

    def test_partial(self):
        dictation = decode_dictation(
            '{"text": "hel", "type": "PARTIAL_TRANSCRIPTION", "speech": {"confidence": 0.4, "tokens": []}}'
        )

        assert dictation.text == "hel"
        assert dictation.type == SpeechType.PARTIAL_TRANSCRIPTION
        assert not dictation.is_final

    def test_final_with_tokens(self):
        dictation = decode_dictation(
            '{"text": "hello", "type": "FINAL_TRANSCRIPTION",'
            ' "speech": {"confidence": 0.8, "tokens": [{"start": 0, "end": 420, "token": "hello"}]}}'
        )

        assert dictation.is_final
        assert dictation.speech.confidence == 0.8
        assert dictation.speech.tokens[0].end == 420

    def test_missing_text(self):
        with pytest.raises(WitDecodeError):
            decode_dictation('{"type": "FINAL_TRANSCRIPTION", "speech": {"confidence": 0.4, "tokens": []}}')

    @pytest.mark.parametrize(
        "frame",
        [
            '{"text": "x"}',
            '{"text": "x", "type": "FINAL_TRANSCRIPTION"}',
            '{"text": "x", "speech": {"confidence": 0.4, "tokens": []}}',
        ],
    )
    def test_missing_type_or_speech(self, frame):
        with pytest.raises(WitDecodeError) as exc_info:
            decode_dictation(frame)

        assert exc_info.value.frame == frame

    def test_invalid_json(self):
        with pytest.raises(WitDecodeError):
            decode_dictation('{"text": ')
