"""Unit tests for request and response models."""

import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from witstream.constants import MAX_TEXT_LENGTH
from witstream.models import (
    Context,
    DictationQuery,
    DynamicEntities,
    DynamicEntity,
    Encoding,
    Intent,
    Message,
    MessageQuery,
    SpeechQuery,
    SynthesizeQuery,
    Voice,
    VoiceGender,
    VoicesResponse,
)


class TestAudioQuery:
    """Test Content-Type construction for audio uploads."""

    @pytest.mark.parametrize(
        "encoding,expected",
        [
            (Encoding.WAV, "audio/wav"),
            (Encoding.MP3, "audio/mpeg3"),
            (Encoding.OGG, "audio/ogg"),
            (Encoding.ULAW, "audio/ulaw"),
        ],
    )
    def test_container_formats(self, encoding, expected):
        assert DictationQuery(encoding=encoding, data=b"x").content_type() == expected

    def test_raw_content_type(self):
        query = (
            DictationQuery(encoding=Encoding.RAW, data=b"\x00\x01")
            .with_raw_encoding("signed-integer")
            .with_bits(16)
            .with_sample_rate(16000)
            .with_endian(True)
        )

        assert query.content_type() == (
            "audio/raw;encoding=signed-integer;bits=16;rate=16000;endian=little"
        )

    def test_raw_big_endian(self):
        query = SpeechQuery(
            encoding=Encoding.RAW,
            raw_encoding="unsigned-integer",
            bits=8,
            sample_rate=8000,
            endian=False,
        )

        assert query.content_type().endswith("endian=big")

    def test_raw_missing_parameters(self):
        query = DictationQuery(encoding=Encoding.RAW, data=b"").with_bits(16)

        with pytest.raises(ValueError, match="raw_encoding, sample_rate, endian"):
            query.content_type()

    def test_builders_do_not_mutate(self):
        query = DictationQuery(encoding=Encoding.RAW)
        query.with_bits(16)

        assert query.bits is None

    def test_accepts_chunk_iterables(self):
        chunks = iter([b"a", b"b"])

        assert DictationQuery(data=chunks).data is chunks


class TestContext:
    """Test Context."""

    def test_query_value_omits_unset_fields(self):
        context = Context().with_timezone("Europe/Paris").with_coordinates(48.85, 2.35)

        assert json.loads(context.to_query_value()) == {
            "timezone": "Europe/Paris",
            "coords": {"lat": 48.85, "long": 2.35},
        }

    def test_reference_time_serialized_with_offset(self):
        reference = datetime(2024, 3, 4, 7, 30, tzinfo=timezone(timedelta(hours=-8)))

        value = json.loads(Context().with_reference_time(reference).to_query_value())

        assert value["reference_time"] == "2024-03-04T07:30:00-08:00"

    def test_is_empty(self):
        assert Context().is_empty()
        assert not Context(locale="en_US").is_empty()

    def test_reference_time_or_now(self):
        reference = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert Context(reference_time=reference).reference_time_or_now() == reference
        assert Context().reference_time_or_now().tzinfo is not None

    def test_invalid_coordinates(self):
        with pytest.raises(ValidationError):
            Context().with_coordinates(91.0, 0.0)


class TestDynamicEntities:
    """Test dynamic entity serialization."""

    def test_query_value_shape(self):
        entities = DynamicEntities().add(
            DynamicEntity(name="contact").add_value("Ada", ["Ada Lovelace"]).add_value("Grace")
        )

        assert json.loads(entities.to_query_value()) == {
            "entities": {
                "contact": [
                    {"keyword": "Ada", "synonyms": ["Ada Lovelace"]},
                    {"keyword": "Grace", "synonyms": []},
                ]
            }
        }


class TestMessageQuery:
    """Test MessageQuery."""

    def test_minimal_params(self):
        assert MessageQuery(q="hello").query_params() == {"q": "hello"}

    def test_all_params(self):
        query = (
            MessageQuery(q="call Ada")
            .with_tag("prod")
            .with_limit(3)
            .with_context(Context(locale="en_US"))
            .with_dynamic_entities(
                DynamicEntities().add(DynamicEntity(name="contact").add_value("Ada"))
            )
        )

        params = query.query_params()

        assert params["q"] == "call Ada"
        assert params["tag"] == "prod"
        assert params["n"] == "3"
        assert json.loads(params["context"]) == {"locale": "en_US"}
        assert "contact" in json.loads(params["entities"])["entities"]

    def test_empty_context_not_sent(self):
        assert "context" not in MessageQuery(q="hi", context=Context()).query_params()

    @pytest.mark.parametrize("text", ["", "x" * (MAX_TEXT_LENGTH + 1)])
    def test_text_length_bounds(self, text):
        with pytest.raises(ValidationError):
            MessageQuery(q=text)

    def test_max_length_accepted(self):
        assert MessageQuery(q="x" * MAX_TEXT_LENGTH).q == "x" * MAX_TEXT_LENGTH

    @pytest.mark.parametrize("n", [0, 9])
    def test_limit_bounds(self, n):
        with pytest.raises(ValidationError):
            MessageQuery(q="hi", n=n)


class TestSpeechQuery:
    """Test SpeechQuery query parameters."""

    def test_no_params_by_default(self):
        assert SpeechQuery(data=b"").query_params() == {}

    def test_params(self):
        query = SpeechQuery(data=b"").with_limit(2).with_tag("beta")

        assert query.query_params() == {"n": "2", "tag": "beta"}


class TestMessage:
    """Test Message response model."""

    def test_parse_and_accessors(self):
        message = Message.model_validate(
            {
                "text": "hello",
                "intents": [
                    {"id": "1", "name": "greet", "confidence": 0.9},
                    {"id": "2", "name": "bye", "confidence": 0.1},
                ],
                "entities": {},
                "traits": {},
            }
        )

        assert message.intent().name == "greet"
        assert message.get_entity("contact:contact") is None

    def test_defaults(self):
        message = Message(text="hi")

        assert message.intent() is None
        assert message.intents == []

    def test_intent_equality_ignores_confidence(self):
        assert Intent(id="1", name="greet", confidence=0.2) == Intent(id="1", name="greet", confidence=0.9)
        assert len({Intent(id="1", name="greet", confidence=0.2), Intent(id="1", name="greet", confidence=0.9)}) == 1


class TestSynthesizeQuery:
    """Test SynthesizeQuery."""

    def test_body_omits_unset(self):
        assert SynthesizeQuery(q="Hello", voice="Rebecca").to_body() == {
            "q": "Hello",
            "voice": "Rebecca",
        }

    def test_builders(self):
        query = SynthesizeQuery(q="Hi", voice="Rebecca").with_style("soft").with_speed(120).with_pitch(90)

        assert query.to_body() == {"q": "Hi", "voice": "Rebecca", "style": "soft", "speed": 120, "pitch": 90}

    def test_speed_validated_by_builder(self):
        with pytest.raises(ValidationError):
            SynthesizeQuery(q="Hi", voice="Rebecca").with_speed(500)

    def test_spoken_length_ignores_ssml(self):
        query = SynthesizeQuery(q='<speak>Hi <break time="1s"/>there</speak>', voice="Rebecca")

        assert query.spoken_length() == len("Hi there")


class TestVoices:
    """Test voice models."""

    @pytest.fixture
    def voices_response(self):
        return VoicesResponse.model_validate(
            {
                "en_US": [
                    {
                        "name": "wit$Rebecca",
                        "locale": "en_US",
                        "gender": "female",
                        "styles": ["default", "soft"],
                        "supported_features": ["ssml", "style"],
                    },
                    {"name": "wit$Colin", "locale": "en_US", "gender": "male"},
                ],
                "fr_FR": [{"name": "wit$Pauline", "locale": "fr_FR", "gender": "female"}],
            }
        )

    def test_flatten(self, voices_response):
        assert [v.name for v in voices_response.all_voices()] == [
            "wit$Rebecca",
            "wit$Colin",
            "wit$Pauline",
        ]

    def test_by_locale(self, voices_response):
        assert voices_response.locales() == ["en_US", "fr_FR"]
        assert len(voices_response.voices_for_locale("en_US")) == 2
        assert voices_response.voices_for_locale("de_DE") is None

    def test_voice_helpers(self, voices_response):
        rebecca = voices_response.voices_for_locale("en_US")[0]

        assert rebecca.supports_style("soft")
        assert rebecca.supports_feature("ssml")
        assert not rebecca.supports_feature("viseme")
        assert rebecca.gender_enum() == VoiceGender.FEMALE
        assert rebecca.is_locale("en_US")

    def test_unknown_gender(self):
        assert Voice(name="x", locale="en_US", gender="robot").gender_enum() is None
