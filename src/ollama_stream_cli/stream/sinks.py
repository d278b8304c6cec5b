"""Destinations for text fragments as they arrive."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import AsyncIterator
from typing import Protocol, TextIO

from ollama_stream_cli.stream.exceptions import ChannelClosedError

_CLOSED = object()


class FragmentSink(Protocol):
    """Anything that accepts fragments one at a time, in arrival order."""

    def accept(self, fragment: str) -> None: ...


class PrintSink:
    """Writes each fragment straight to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def accept(self, fragment: str) -> None:
        self._stream.write(fragment)
        self._stream.flush()


class NullSink:
    """Discards fragments."""

    def accept(self, fragment: str) -> None:
        pass


class Channel:
    """Unbounded single-producer/single-consumer FIFO, terminated by close().

    The consumer iterates with ``async for``; iteration waits while the
    channel is empty and open, and ends once the channel is closed and all
    buffered items have been read.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: str) -> None:
        if self._closed:
            raise ChannelClosedError("put on closed channel")
        self._queue.put_nowait(item)

    def close(self) -> None:
        if self._closed:
            raise ChannelClosedError("channel already closed")
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


class ChannelSink:
    """Pushes fragments into a Channel for a concurrent consumer."""

    def __init__(self, channel: Channel) -> None:
        self._channel = channel

    def accept(self, fragment: str) -> None:
        self._channel.put(fragment)
