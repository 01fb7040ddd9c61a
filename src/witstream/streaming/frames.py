"""Incremental JSON object framing for streamed Wit.ai response bodies.

Wit.ai answers /speech and /dictation with a long-lived HTTP body containing
back-to-back JSON objects and no delimiter between them. Network reads split
that body at arbitrary offsets, so objects must be reassembled before they can
be decoded.

Known limitation: braces are counted without tracking JSON string literals.
A string value containing an unbalanced literal "{" or "}" desynchronizes the
depth counter. Wit.ai payloads are not expected to carry such values, but
nothing in the protocol forbids them.
"""

from typing import List, Optional, Tuple


def extract_complete_json(buffer: str) -> Optional[Tuple[str, str]]:
    """
    Extract the first complete top-level JSON object from a buffer.

    A "}" met while no object is open is ignored, so stray closing braces never
    end a frame and the depth counter never goes negative.

    Args:
        buffer: Text received so far, possibly ending in a partial object

    Returns:
        (frame, remainder) where frame includes both outer braces and remainder
        is everything after the closing brace, verbatim. None when no complete
        object is available yet.

    Example:
        >>> extract_complete_json('{"text": "hello"}{"text": "wor')
        ('{"text": "hello"}', '{"text": "wor')
        >>> extract_complete_json('{"text": "hel') is None
        True
    """
    depth = 0
    start = None

    for i, ch in enumerate(buffer):
        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}":
            if depth == 0:
                continue
            depth -= 1
            if depth == 0 and start is not None:
                end = i + 1
                return buffer[start:end], buffer[end:]

    return None


class FrameBuffer:
    """
    Accumulation buffer for one request/response cycle.

    Holds text that has not yet produced a complete frame. After every feed the
    buffer contains at most one partial object (plus any whitespace around it).
    Not thread-safe; each request owns its own instance.
    """

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Undrained text (the partial trailing object, if any)."""
        return self._buffer

    def feed(self, text: str) -> List[str]:
        """
        Append text and drain every frame that is now complete.

        Args:
            text: Newly received text; empty text is ignored

        Returns:
            Complete frames in the order their closing braces appeared
        """
        if text:
            self._buffer += text
        return self.drain()

    def drain(self) -> List[str]:
        """Extract all currently complete frames, keeping the remainder."""
        frames = []
        while True:
            extracted = extract_complete_json(self._buffer)
            if extracted is None:
                break
            frame, self._buffer = extracted
            frames.append(frame)
        return frames

    def has_partial_frame(self) -> bool:
        """
        True when an object has been opened but not yet closed.

        Every complete object has already been drained, so any "{" left in
        the buffer starts an unfinished one. Leftover whitespace or stray
        closing braces are not a partial frame.
        """
        return "{" in self._buffer
