"""Translation workflow: chat fragments relayed through a channel to a display loop."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TextIO

import structlog

from ollama_stream_cli.config import Settings
from ollama_stream_cli.stream.assembler import ResponseAssembler
from ollama_stream_cli.stream.models import AssembledResult, ChatRequest, Mode
from ollama_stream_cli.stream.payloads import build_chat_request, build_translation_turns
from ollama_stream_cli.stream.sinks import Channel, ChannelSink

logger = structlog.get_logger()


async def _produce(
    assembler: ResponseAssembler,
    request: ChatRequest,
    channel: Channel,
) -> AssembledResult:
    try:
        return await assembler.run(Mode.CHAT, request, ChannelSink(channel))
    finally:
        channel.close()


async def translate(
    text: str,
    settings: Settings,
    output: TextIO,
    assembler: ResponseAssembler | None = None,
) -> AssembledResult:
    """Translate ``text`` and write the translation to ``output`` as it streams.

    A producer task runs the chat request and pushes fragments into a
    channel; this coroutine drains the channel until the producer closes it.
    Errors from the producer are re-raised here after the channel is drained.
    There is no early stop: the display loop reads to close. If the display
    loop itself fails, the producer is cancelled before the error propagates.
    """
    request = build_chat_request(
        settings,
        build_translation_turns(text, settings.translate_target_language),
    )
    channel = Channel()

    owns_assembler = assembler is None
    if assembler is None:
        assembler = ResponseAssembler(settings)

    logger.info(
        "translate_start",
        model=settings.model,
        target_language=settings.translate_target_language,
        text_length=len(text),
    )

    producer = asyncio.create_task(_produce(assembler, request, channel))
    try:
        received = 0
        async for fragment in channel:
            received += 1
            output.write(fragment)
            output.flush()

        result = await producer
        logger.info("translate_complete", fragments=received, length=len(result.text))
        return result
    finally:
        # Display loop failed: stop the producer before its client goes away.
        if not producer.done():
            producer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await producer
        if owns_assembler:
            await assembler.aclose()
