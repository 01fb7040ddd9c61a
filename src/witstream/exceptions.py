"""Exceptions raised by the Wit.ai client."""

from typing import Optional


class WitError(Exception):
    """Base exception for Wit.ai client errors.

    Covers transport failures, error responses from the API, and bodies that
    could not be decoded into the expected models.
    """

    pass


class WitAPIError(WitError):
    """Error payload returned by the Wit.ai API.

    Attributes:
        code: Machine-readable error code (e.g. "no-auth")
        message: Human-readable description
        status_code: HTTP status of the failed response, when known
    """

    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"Error code: {code}, message: {message}")


class WitTransportError(WitError):
    """Request could not be sent or the response body could not be read."""

    pass


class WitTimeoutError(WitTransportError):
    """Request or read timeout."""

    pass


class WitDecodeError(WitError):
    """A frame or JSON body failed to parse or match its expected shape.

    Attributes:
        frame: Raw text that failed to decode (None when not applicable)
    """

    def __init__(self, message: str, frame: Optional[str] = None):
        super().__init__(message)
        self.frame = frame


class WitTruncatedStreamError(WitDecodeError):
    """Response body ended in the middle of a JSON object."""

    pass
