"""Wit.ai HTTP client with streaming and blocking variants of every endpoint."""

import asyncio
import uuid
from contextlib import contextmanager
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional, Type, TypeVar, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from witstream.exceptions import WitAPIError, WitTimeoutError, WitTransportError
from witstream.models.config import WitConfig
from witstream.models.dictation import AudioQuery, Dictation, DictationQuery
from witstream.models.message import Message, MessageQuery
from witstream.models.speech import SpeechQuery, SpeechResponse
from witstream.models.synthesize import SynthesizeCodec, SynthesizeQuery
from witstream.models.voice import Voice, VoicesResponse
from witstream.services.responses import decode_body, is_success, raise_for_wit_error
from witstream.streaming.consumer import Decoder, aiter_events, collect_events
from witstream.streaming.decoders import decode_dictation, decode_speech
from witstream.utils.logging import get_logger


logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

_SYNTHESIS_FALLBACK = {
    "fallback_code": "synthesis_failed",
    "fallback_message": "Failed to synthesize speech",
}


def _new_request_id() -> str:
    return uuid.uuid4().hex[:8]


@contextmanager
def _transport_errors(endpoint: str, request_id: str) -> Iterator[None]:
    """Re-raise httpx failures as WitTransportError / WitTimeoutError."""
    try:
        yield
    except httpx.TimeoutException as e:
        logger.error("wit_request_timeout", endpoint=endpoint, request_id=request_id, error=str(e))
        raise WitTimeoutError(f"Request timeout: {e}") from e
    except httpx.HTTPError as e:
        logger.error(
            "wit_transport_error",
            endpoint=endpoint,
            request_id=request_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise WitTransportError(f"Request failed: {e}") from e


def _sync_body(data: Any) -> Any:
    """Request content for httpx.Client: bytes or a sync iterable of bytes."""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str):
        raise TypeError("Audio data must be bytes, not str")
    if hasattr(data, "__aiter__"):
        raise TypeError("Blocking requests cannot upload an async audio stream")
    return data


_CHUNKS_DONE = object()


async def _aiter_chunks(chunks) -> AsyncIterator[bytes]:
    """
    Async view of a sync chunk iterable.

    Each next() runs in a worker thread, so an iterable that reads a file or
    a device does not block the event loop between uploads.
    """
    iterator = iter(chunks)
    while True:
        chunk = await asyncio.to_thread(next, iterator, _CHUNKS_DONE)
        if chunk is _CHUNKS_DONE:
            return
        yield chunk


def _async_body(data: Any) -> Any:
    """Request content for httpx.AsyncClient: bytes or an async iterable of bytes."""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str):
        raise TypeError("Audio data must be bytes, not str")
    if hasattr(data, "__aiter__"):
        return data
    return _aiter_chunks(data)


class WitClient:
    """
    HTTP client for the Wit.ai API.

    Holds only immutable configuration (token, base URL, API version). Each
    call opens its own httpx client, so one WitClient can be shared freely
    between threads and tasks.

    Every endpoint has an async method and a "_blocking" twin. Streaming
    endpoints (dictation, speech, synthesize) return async iterators that
    yield events as the server produces them; their blocking twins read the
    whole body and return a list.

    Args:
        config: Connection settings
        transport: Optional httpx transport for blocking calls (e.g. httpx.MockTransport)
        async_transport: Optional httpx transport for async calls

    Example:
        >>> client = WitClient.from_token("MY_TOKEN")
        >>> async for event in client.post_speech(SpeechQuery(encoding=Encoding.WAV, data=audio)):
        ...     print(event.type, event.text)
    """

    def __init__(
        self,
        config: WitConfig,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.timeout = config.timeout.to_httpx()
        self._transport = transport
        self._async_transport = async_transport

    @classmethod
    def from_token(cls, token: str, **kwargs) -> "WitClient":
        """Client with default settings for the given access token."""
        return cls(WitConfig(api_token=token), **kwargs)

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.config.api_token}"}
        if extra:
            headers.update(extra)
        return headers

    def _params(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        params = {"v": self.config.api_version}
        if extra:
            params.update(extra)
        return params

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def _async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._async_transport)

    def _check_status(
        self, endpoint: str, request_id: str, status_code: int, body: str, **fallback
    ) -> None:
        try:
            raise_for_wit_error(status_code, body, **fallback)
        except WitAPIError as e:
            logger.error(
                "wit_api_error",
                endpoint=endpoint,
                request_id=request_id,
                status_code=status_code,
                code=e.code,
                error=e.message,
            )
            raise

    # JSON endpoints

    def _get_json_blocking(
        self, path: str, model: Type[M], params: Optional[Dict[str, str]] = None
    ) -> M:
        request_id = _new_request_id()
        logger.info("wit_request_started", endpoint=path, request_id=request_id)

        with _transport_errors(path, request_id):
            with self._client() as client:
                response = client.get(
                    self.config.url(path), params=self._params(params), headers=self._headers()
                )

        self._check_status(path, request_id, response.status_code, response.text)
        result = decode_body(model, response.text)
        logger.info("wit_request_completed", endpoint=path, request_id=request_id)
        return result

    async def _get_json(
        self, path: str, model: Type[M], params: Optional[Dict[str, str]] = None
    ) -> M:
        request_id = _new_request_id()
        logger.info("wit_request_started", endpoint=path, request_id=request_id)

        with _transport_errors(path, request_id):
            async with self._async_client() as client:
                response = await client.get(
                    self.config.url(path), params=self._params(params), headers=self._headers()
                )

        self._check_status(path, request_id, response.status_code, response.text)
        result = decode_body(model, response.text)
        logger.info("wit_request_completed", endpoint=path, request_id=request_id)
        return result

    # Streamed-object endpoints

    def _post_events_blocking(
        self, path: str, query: AudioQuery, params: Dict[str, str], decode: Decoder
    ) -> list:
        headers = self._headers({"Content-Type": query.content_type()})
        content = _sync_body(query.data)
        request_id = _new_request_id()
        logger.info(
            "wit_request_started",
            endpoint=path,
            request_id=request_id,
            content_type=headers["Content-Type"],
            mode="blocking",
        )

        with _transport_errors(path, request_id):
            with self._client() as client:
                response = client.post(
                    self.config.url(path),
                    params=self._params(params),
                    headers=headers,
                    content=content,
                )

        body = response.content.decode("utf-8", errors="replace")
        self._check_status(path, request_id, response.status_code, body)

        events = collect_events(
            body, decode, strict=self.config.strict_stream_end, request_id=request_id
        )
        logger.info(
            "wit_request_completed", endpoint=path, request_id=request_id, event_count=len(events)
        )
        return events

    def _stream_events(
        self, path: str, query: AudioQuery, params: Dict[str, str], decode: Decoder
    ) -> AsyncIterator[Any]:
        # Validate eagerly so bad queries fail at call time, not first iteration
        headers = self._headers({"Content-Type": query.content_type()})
        content = _async_body(query.data)
        return self._stream_events_iter(path, headers, params, content, decode)

    async def _stream_events_iter(
        self,
        path: str,
        headers: Dict[str, str],
        params: Dict[str, str],
        content: Any,
        decode: Decoder,
    ) -> AsyncIterator[Any]:
        request_id = _new_request_id()
        logger.info(
            "wit_request_started",
            endpoint=path,
            request_id=request_id,
            content_type=headers["Content-Type"],
            mode="stream",
        )
        event_count = 0

        with _transport_errors(path, request_id):
            async with self._async_client() as client:
                async with client.stream(
                    "POST",
                    self.config.url(path),
                    params=self._params(params),
                    headers=headers,
                    content=content,
                ) as response:
                    if not is_success(response.status_code):
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        self._check_status(path, request_id, response.status_code, body)

                    async for event in aiter_events(
                        response.aiter_bytes(),
                        decode,
                        strict=self.config.strict_stream_end,
                        request_id=request_id,
                    ):
                        event_count += 1
                        yield event

        logger.info(
            "wit_request_completed", endpoint=path, request_id=request_id, event_count=event_count
        )

    # /message

    async def get_message(self, query: Union[MessageQuery, str]) -> Message:
        """
        Understand a text utterance.

        Args:
            query: A MessageQuery, or the utterance itself

        Returns:
            Intents, entities and traits found in the text

        Raises:
            ValueError: If the text is empty or longer than 280 characters
            WitAPIError: If the API returns an error
            WitTransportError: On network failures
            WitDecodeError: If the response does not match the Message model
        """
        query = _as_message_query(query)
        return await self._get_json("message", Message, query.query_params())

    def get_message_blocking(self, query: Union[MessageQuery, str]) -> Message:
        """Blocking variant of get_message."""
        query = _as_message_query(query)
        return self._get_json_blocking("message", Message, query.query_params())

    # /dictation

    def post_dictation(self, query: DictationQuery) -> AsyncIterator[Dictation]:
        """
        Transcribe audio, yielding partial and final transcriptions as they arrive.

        The audio may itself be an (async) iterable of chunks, in which case it
        is uploaded while transcriptions stream back.

        Returns:
            Async iterator of Dictation events. Stopping iteration early (and
            closing the iterator) releases the connection.

        Raises:
            ValueError: If raw audio parameters are incomplete (raised immediately)
            WitAPIError: If the API rejects the request (before any event)
            WitTransportError: On network failures
            WitDecodeError: If a frame cannot be decoded; earlier events stay valid
        """
        return self._stream_events("dictation", query, {}, decode_dictation)

    def post_dictation_blocking(self, query: DictationQuery) -> List[Dictation]:
        """Transcribe audio and return every transcription event at once."""
        return self._post_events_blocking("dictation", query, {}, decode_dictation)

    # /speech

    def post_speech(self, query: SpeechQuery) -> AsyncIterator[SpeechResponse]:
        """
        Transcribe and understand audio, yielding events as they arrive.

        Each event is a SpeechTranscription (PARTIAL_/FINAL_TRANSCRIPTION) or
        a SpeechUnderstanding (PARTIAL_/FINAL_UNDERSTANDING). Events with tags
        this client does not know are skipped.

        Raises:
            ValueError: If raw audio parameters are incomplete (raised immediately)
            WitAPIError: If the API rejects the request (before any event)
            WitTransportError: On network failures
            WitDecodeError: If a frame cannot be decoded; earlier events stay valid
        """
        return self._stream_events("speech", query, query.query_params(), decode_speech)

    def post_speech_blocking(self, query: SpeechQuery) -> List[SpeechResponse]:
        """Transcribe and understand audio, returning every event at once."""
        return self._post_events_blocking("speech", query, query.query_params(), decode_speech)

    # /synthesize

    async def post_synthesize(
        self, query: SynthesizeQuery, codec: SynthesizeCodec = SynthesizeCodec.MP3
    ) -> AsyncIterator[bytes]:
        """
        Synthesize speech, yielding audio chunks as they are received.

        Raises:
            WitAPIError: If the API rejects the request (code "synthesis_failed"
                when the error body is not structured)
            WitTransportError: On network failures
        """
        request_id = _new_request_id()
        logger.info(
            "wit_request_started",
            endpoint="synthesize",
            request_id=request_id,
            voice=query.voice,
            codec=codec.value,
        )
        byte_count = 0

        with _transport_errors("synthesize", request_id):
            async with self._async_client() as client:
                async with client.stream(
                    "POST",
                    self.config.url("synthesize"),
                    params=self._params(),
                    headers=self._headers({"Accept": codec.value}),
                    json=query.to_body(),
                ) as response:
                    if not is_success(response.status_code):
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        self._check_status(
                            "synthesize", request_id, response.status_code, body,
                            **_SYNTHESIS_FALLBACK,
                        )

                    async for chunk in response.aiter_bytes():
                        byte_count += len(chunk)
                        yield chunk

        logger.info(
            "wit_request_completed", endpoint="synthesize", request_id=request_id, byte_count=byte_count
        )

    def post_synthesize_blocking(
        self, query: SynthesizeQuery, codec: SynthesizeCodec = SynthesizeCodec.MP3
    ) -> bytes:
        """Synthesize speech and return the complete audio."""
        request_id = _new_request_id()
        logger.info(
            "wit_request_started",
            endpoint="synthesize",
            request_id=request_id,
            voice=query.voice,
            codec=codec.value,
        )

        with _transport_errors("synthesize", request_id):
            with self._client() as client:
                response = client.post(
                    self.config.url("synthesize"),
                    params=self._params(),
                    headers=self._headers({"Accept": codec.value}),
                    json=query.to_body(),
                )

        if not is_success(response.status_code):
            body = response.content.decode("utf-8", errors="replace")
            self._check_status(
                "synthesize", request_id, response.status_code, body, **_SYNTHESIS_FALLBACK
            )

        logger.info(
            "wit_request_completed",
            endpoint="synthesize",
            request_id=request_id,
            byte_count=len(response.content),
        )
        return response.content

    # /voices

    async def get_voices_by_locale(self) -> VoicesResponse:
        """All voices grouped by locale."""
        return await self._get_json("voices", VoicesResponse)

    def get_voices_by_locale_blocking(self) -> VoicesResponse:
        return self._get_json_blocking("voices", VoicesResponse)

    async def get_voices(self) -> List[Voice]:
        """All voices, every locale flattened into one list."""
        return (await self.get_voices_by_locale()).all_voices()

    def get_voices_blocking(self) -> List[Voice]:
        return self.get_voices_by_locale_blocking().all_voices()

    async def get_voices_for_locale(self, locale: str) -> List[Voice]:
        """Voices for one locale (e.g. "en_US"); empty if the locale is unknown."""
        return (await self.get_voices_by_locale()).voices_for_locale(locale) or []

    def get_voices_for_locale_blocking(self, locale: str) -> List[Voice]:
        return self.get_voices_by_locale_blocking().voices_for_locale(locale) or []

    async def get_voice(self, name: str) -> Voice:
        """Details of a single voice."""
        return await self._get_json(f"voices/{quote(name, safe='')}", Voice)

    def get_voice_blocking(self, name: str) -> Voice:
        return self._get_json_blocking(f"voices/{quote(name, safe='')}", Voice)


def _as_message_query(query: Union[MessageQuery, str]) -> MessageQuery:
    if isinstance(query, MessageQuery):
        return query
    return MessageQuery(q=query)
