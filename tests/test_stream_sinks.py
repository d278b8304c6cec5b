"""Tests for fragment sinks and the close-terminated channel."""

import asyncio
import io

import pytest

from ollama_stream_cli.stream.exceptions import ChannelClosedError
from ollama_stream_cli.stream.sinks import Channel, ChannelSink, NullSink, PrintSink


def test_print_sink_writes_fragments_in_order():
    out = io.StringIO()
    sink = PrintSink(out)

    for fragment in ["Hel", "lo", ", ", "world"]:
        sink.accept(fragment)

    assert out.getvalue() == "Hello, world"


def test_null_sink_discards():
    NullSink().accept("anything")


class TestChannel:
    @pytest.mark.asyncio
    async def test_fifo_then_close(self):
        channel = Channel()
        for item in ["a", "b", "c"]:
            channel.put(item)
        channel.close()

        assert [item async for item in channel] == ["a", "b", "c"]
        assert channel.closed

    @pytest.mark.asyncio
    async def test_consumer_waits_while_open_and_empty(self):
        channel = Channel()
        received = []

        async def consume():
            async for item in channel:
                received.append(item)

        consumer = asyncio.create_task(consume())
        await asyncio.sleep(0)
        assert not consumer.done()

        channel.put("first")
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert received == ["first"]
        assert not consumer.done()

        channel.put("second")
        channel.close()
        await asyncio.wait_for(consumer, timeout=1)

        assert received == ["first", "second"]

    @pytest.mark.asyncio
    async def test_put_after_close_raises(self):
        channel = Channel()
        channel.close()

        with pytest.raises(ChannelClosedError):
            channel.put("late")

    @pytest.mark.asyncio
    async def test_close_twice_raises(self):
        channel = Channel()
        channel.close()

        with pytest.raises(ChannelClosedError):
            channel.close()

    @pytest.mark.asyncio
    async def test_empty_channel_ends_on_close(self):
        channel = Channel()
        channel.close()

        assert [item async for item in channel] == []


@pytest.mark.asyncio
async def test_channel_sink_pushes_into_channel():
    channel = Channel()
    sink = ChannelSink(channel)

    sink.accept("Bon")
    sink.accept("jour")
    channel.close()

    assert [item async for item in channel] == ["Bon", "jour"]
