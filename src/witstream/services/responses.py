"""Response status checks and JSON body decoding shared by all endpoints."""

from typing import Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from witstream.exceptions import WitAPIError, WitDecodeError


M = TypeVar("M", bound=BaseModel)


class WitErrorPayload(BaseModel):
    """Error body returned by Wit.ai, e.g. {"error": "Bad auth", "code": "no-auth"}."""

    code: str
    message: str = Field(validation_alias=AliasChoices("message", "error"))


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def parse_error_payload(body: str) -> Optional[WitErrorPayload]:
    """Structured error from a response body, or None if the body is not one."""
    try:
        return WitErrorPayload.model_validate_json(body)
    except ValidationError:
        return None


def raise_for_wit_error(
    status_code: int,
    body: str,
    fallback_code: str = "unexpected_response",
    fallback_message: str = "Unexpected response",
) -> None:
    """
    Raise WitAPIError if the status code is not a success.

    Runs before any frame extraction, so error bodies are never fed to the
    frame decoders.

    Args:
        status_code: HTTP status code
        body: Full response body text
        fallback_code: Code used when the body is not a structured error
        fallback_message: Message prefix used when the body is not a structured error

    Raises:
        WitAPIError: If status_code is not 2xx
    """
    if is_success(status_code):
        return

    payload = parse_error_payload(body)
    if payload is not None:
        raise WitAPIError(payload.code, payload.message, status_code=status_code)

    raise WitAPIError(
        fallback_code,
        f"{fallback_message}: HTTP {status_code} - {body[:500]}",
        status_code=status_code,
    )


def decode_body(model: Type[M], body: str) -> M:
    """
    Validate a complete JSON body against a model.

    Raises:
        WitDecodeError: If the body is not valid JSON or does not match
    """
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise WitDecodeError(
            f"Invalid {model.__name__} response: {e}", frame=body
        ) from e
