"""Newline-delimited JSON stream decoder."""

from __future__ import annotations

import json
from collections.abc import AsyncIterable, AsyncIterator, Callable

import structlog
from pydantic import ValidationError

from ollama_stream_cli.stream.exceptions import (
    DecodeError,
    IncompleteStreamError,
    ServerStreamError,
)
from ollama_stream_cli.stream.models import Mode, StreamEvent, StreamMetrics

logger = structlog.get_logger()


class StreamDecoder:
    """Turns a stream of newline-delimited frames into a sequence of StreamEvents.

    ``source`` yields one frame per item, e.g. ``httpx.Response.aiter_lines()``.
    The sequence is lazy and single-use. Its last element is the event with
    ``done=True``; if the source runs dry before that, iteration raises
    IncompleteStreamError. Malformed frames are logged, recorded in
    ``decode_errors`` and skipped, after handing each one to
    ``on_decode_error`` (which may raise to abort).

    The decoder does not own ``source``; closing it is up to the caller.
    """

    def __init__(
        self,
        source: AsyncIterable[str],
        mode: Mode,
        on_decode_error: Callable[[DecodeError], None] | None = None,
    ) -> None:
        self._source = source
        self._mode = mode
        self._on_decode_error = on_decode_error
        self._started = False
        self.decode_errors: list[DecodeError] = []

    def __aiter__(self) -> AsyncIterator[StreamEvent]:
        if self._started:
            raise RuntimeError("StreamDecoder can only be iterated once")
        self._started = True
        return self._events()

    async def _events(self) -> AsyncIterator[StreamEvent]:
        frame_count = 0
        async for line in self._source:
            frame = line.rstrip("\r\n")
            if not frame.strip():
                continue
            frame_count += 1
            event = self._decode(frame)
            if event is None:
                continue
            yield event
            if event.done:
                logger.debug(
                    "stream_terminal_frame",
                    mode=self._mode.value,
                    frames=frame_count,
                )
                return

        raise IncompleteStreamError(
            f"stream ended after {frame_count} frames without a done event"
        )

    def _decode(self, frame: str) -> StreamEvent | None:
        try:
            obj = json.loads(frame)
            if not isinstance(obj, dict):
                raise ValueError(f"expected a JSON object, got {type(obj).__name__}")

            if obj.get("error"):
                raise ServerStreamError(str(obj["error"]))

            done = obj.get("done", False)
            if not isinstance(done, bool):
                raise ValueError("'done' must be a boolean")

            fragment = self._fragment(obj)
            metrics = StreamMetrics.model_validate(obj) if done else None
        except (ValueError, ValidationError, RecursionError) as e:
            # RecursionError comes from json.loads on very deeply nested input
            self._record_error(frame, e)
            return None

        return StreamEvent(fragment=fragment, done=done, metrics=metrics, raw=frame)

    def _fragment(self, obj: dict) -> str:
        if self._mode is Mode.CHAT:
            message = obj.get("message") or {}
            if not isinstance(message, dict):
                raise ValueError("'message' must be an object")
            fragment = message.get("content") or ""
        else:
            fragment = obj.get("response") or ""
        if not isinstance(fragment, str):
            raise ValueError("fragment must be a string")
        return fragment

    def _record_error(self, frame: str, cause: Exception) -> None:
        error = DecodeError(f"malformed frame: {cause}", frame=frame)
        self.decode_errors.append(error)
        logger.warning(
            "stream_frame_decode_failed",
            mode=self._mode.value,
            error=str(cause),
            frame=frame[:200],
            decode_errors=len(self.decode_errors),
        )
        if self._on_decode_error is not None:
            self._on_decode_error(error)
