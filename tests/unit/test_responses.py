"""Unit tests for response status checks and body decoding."""

import pytest

from witstream.exceptions import WitAPIError, WitDecodeError
from witstream.models.message import Message
from witstream.services.responses import decode_body, parse_error_payload, raise_for_wit_error


class TestRaiseForWitError:
    """Test raise_for_wit_error."""

    def test_success_passes(self):
        raise_for_wit_error(200, '{"text": "hi"}')
        raise_for_wit_error(204, "")

    def test_structured_error(self):
        with pytest.raises(WitAPIError) as exc_info:
            raise_for_wit_error(400, '{"error": "Bad auth, check token/params", "code": "no-auth"}')

        error = exc_info.value
        assert error.code == "no-auth"
        assert error.message == "Bad auth, check token/params"
        assert error.status_code == 400
        assert str(error) == "Error code: no-auth, message: Bad auth, check token/params"

    def test_message_field_accepted(self):
        with pytest.raises(WitAPIError) as exc_info:
            raise_for_wit_error(429, '{"message": "Too many requests", "code": "rate-limit"}')

        assert exc_info.value.message == "Too many requests"

    def test_unstructured_error_uses_fallback(self):
        with pytest.raises(WitAPIError) as exc_info:
            raise_for_wit_error(502, "<html>Bad Gateway</html>")

        assert exc_info.value.code == "unexpected_response"
        assert "HTTP 502" in exc_info.value.message
        assert "Bad Gateway" in exc_info.value.message

    def test_custom_fallback(self):
        with pytest.raises(WitAPIError) as exc_info:
            raise_for_wit_error(
                500, "", fallback_code="synthesis_failed", fallback_message="Failed to synthesize speech"
            )

        assert exc_info.value.code == "synthesis_failed"
        assert exc_info.value.message.startswith("Failed to synthesize speech: HTTP 500")

    def test_long_body_truncated(self):
        with pytest.raises(WitAPIError) as exc_info:
            raise_for_wit_error(500, "x" * 2000)

        assert len(exc_info.value.message) < 600


class TestParseErrorPayload:
    """Test parse_error_payload."""

    def test_not_json(self):
        assert parse_error_payload("oops") is None

    def test_missing_code(self):
        assert parse_error_payload('{"error": "no code"}') is None


class TestDecodeBody:
    """Test decode_body."""

    def test_valid(self):
        assert decode_body(Message, '{"text": "hi"}').text == "hi"

    def test_invalid(self):
        with pytest.raises(WitDecodeError, match="Invalid Message response") as exc_info:
            decode_body(Message, "[]")

        assert exc_info.value.frame == "[]"
