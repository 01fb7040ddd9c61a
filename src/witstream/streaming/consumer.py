"""Turn a streamed (or fully read) response body into decoded events.

Both execution modes share EventAssembler: the async mode feeds it one
network chunk at a time and yields as soon as frames complete, the blocking
mode feeds it the whole body at once and collects a list.
"""

import codecs
from typing import AsyncIterable, AsyncIterator, Callable, Generic, List, Optional, TypeVar

from witstream.exceptions import WitTruncatedStreamError
from witstream.streaming.frames import FrameBuffer
from witstream.utils.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

# Returns the event for a frame, or None to skip it
Decoder = Callable[[str], Optional[T]]


class EventAssembler(Generic[T]):
    """
    Accumulates response text and decodes complete frames into events.

    Bytes are decoded as UTF-8 with invalid sequences replaced. The decoder is
    incremental, so a multi-byte character split across two network reads is
    decoded intact.

    Args:
        decode: Frame decoder; raises WitDecodeError on bad frames
        strict: Raise WitTruncatedStreamError when the body ends inside an object
        request_id: Identifier included in log events
    """

    def __init__(self, decode: Decoder, strict: bool = False, request_id: Optional[str] = None):
        self.decode = decode
        self.strict = strict
        self.request_id = request_id
        self.frames = FrameBuffer()
        self.frame_count = 0
        self.event_count = 0
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed_bytes(self, chunk: bytes) -> List[str]:
        """Append a network chunk; returns the frames it completed."""
        if not chunk:
            return []
        return self.feed_text(self._utf8.decode(chunk))

    def feed_text(self, text: str) -> List[str]:
        """Append decoded text; returns the frames it completed."""
        frames = self.frames.feed(text)
        self.frame_count += len(frames)
        return frames

    def decode_frame(self, frame: str) -> Optional[T]:
        """Decode one frame, returning None when the decoder skips it."""
        logger.debug("wit_frame_received", request_id=self.request_id, frame=frame)
        event = self.decode(frame)
        if event is not None:
            self.event_count += 1
            logger.debug(
                "wit_frame_decoded",
                request_id=self.request_id,
                event_type=type(event).__name__,
            )
        return event

    def finish(self) -> List[str]:
        """
        Signal end of body.

        Flushes the UTF-8 decoder and returns any frame that completes with
        it. Text still buffered after that is an incomplete object: it is
        logged and discarded, or raised in strict mode.

        Raises:
            WitTruncatedStreamError: In strict mode, if an object was cut off
        """
        frames = self.feed_text(self._utf8.decode(b"", final=True))

        if self.frames.has_partial_frame():
            pending = self.frames.pending
            if self.strict:
                raise WitTruncatedStreamError(
                    f"Response ended inside a JSON object ({len(pending)} characters pending)",
                    frame=pending,
                )
            logger.warning(
                "stream_truncated",
                request_id=self.request_id,
                pending_length=len(pending),
                pending=pending[:200],
            )

        return frames


async def aiter_events(
    chunks: AsyncIterable[bytes],
    decode: Decoder,
    strict: bool = False,
    request_id: Optional[str] = None,
) -> AsyncIterator[T]:
    """
    Decode events from an async stream of body chunks (streaming mode).

    Frames are decoded and yielded as soon as their closing brace arrives, in
    order, before the next chunk is requested. Nothing is read ahead.

    Args:
        chunks: Response body chunks, e.g. httpx.Response.aiter_bytes()
        decode: Frame decoder (see witstream.streaming.decoders)
        strict: Raise instead of discarding a truncated final object
        request_id: Identifier included in log events

    Yields:
        Decoded events; frames the decoder skips produce nothing

    Raises:
        WitDecodeError: When a frame fails to decode. Events already yielded
            remain valid.

    Example:
        ```python
        async for event in aiter_events(response.aiter_bytes(), decode_speech):
            print(event.type, event.text)
        ```
    """
    assembler = EventAssembler(decode, strict=strict, request_id=request_id)

    async for chunk in chunks:
        for frame in assembler.feed_bytes(chunk):
            event = assembler.decode_frame(frame)
            if event is not None:
                yield event

    for frame in assembler.finish():
        event = assembler.decode_frame(frame)
        if event is not None:
            yield event

    logger.debug(
        "wit_stream_drained",
        request_id=request_id,
        frame_count=assembler.frame_count,
        event_count=assembler.event_count,
    )


def collect_events(
    text: str,
    decode: Decoder,
    strict: bool = False,
    request_id: Optional[str] = None,
) -> List[T]:
    """
    Decode every event of a fully read body (blocking mode).

    All-or-nothing: a decode error aborts the call and no partial list is
    returned.

    Args:
        text: Entire response body
        decode: Frame decoder (see witstream.streaming.decoders)
        strict: Raise instead of discarding a truncated final object
        request_id: Identifier included in log events

    Returns:
        Decoded events in body order

    Raises:
        WitDecodeError: When any frame fails to decode
    """
    assembler = EventAssembler(decode, strict=strict, request_id=request_id)

    frames = assembler.feed_text(text)
    frames.extend(assembler.finish())

    events = []
    for frame in frames:
        event = assembler.decode_frame(frame)
        if event is not None:
            events.append(event)

    logger.debug(
        "wit_body_drained",
        request_id=request_id,
        frame_count=assembler.frame_count,
        event_count=assembler.event_count,
    )
    return events
