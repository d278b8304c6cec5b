"""Errors raised while requesting and consuming a response stream."""

from __future__ import annotations


class StreamError(Exception):
    """Base error for a failed request.

    ``partial_text`` holds whatever text was assembled before the failure so
    the caller can still show it.
    """

    def __init__(self, message: str, partial_text: str = ""):
        super().__init__(message)
        self.partial_text = partial_text


class TransportError(StreamError):
    """The request could not be sent or the server answered with a non-200 status."""

    def __init__(self, message: str, status_code: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class DecodeError(StreamError):
    """A single frame could not be decoded into an event."""

    def __init__(self, message: str, frame: str, **kwargs):
        super().__init__(message, **kwargs)
        self.frame = frame


class RepeatedDecodeError(StreamError):
    """More malformed frames than tolerated in one response."""

    def __init__(self, errors: list[DecodeError], **kwargs):
        super().__init__(
            f"{len(errors)} malformed frames in response stream", **kwargs
        )
        self.errors = list(errors)


class IncompleteStreamError(StreamError):
    """The stream ended before a frame with done=true arrived."""


class ServerStreamError(StreamError):
    """The server reported an error inside the stream."""


class ChannelClosedError(Exception):
    """Put or close on a channel that is already closed."""
