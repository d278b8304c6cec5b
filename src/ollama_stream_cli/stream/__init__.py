"""Streaming response protocol for the inference server."""

from ollama_stream_cli.stream.assembler import ResponseAssembler
from ollama_stream_cli.stream.decoder import StreamDecoder
from ollama_stream_cli.stream.models import (
    AssembledResult,
    ChatRequest,
    ChatTurn,
    GenerateRequest,
    Mode,
    StreamEvent,
    StreamMetrics,
)
from ollama_stream_cli.stream.sinks import Channel, ChannelSink, NullSink, PrintSink

__all__ = [
    "AssembledResult",
    "Channel",
    "ChannelSink",
    "ChatRequest",
    "ChatTurn",
    "GenerateRequest",
    "Mode",
    "NullSink",
    "PrintSink",
    "ResponseAssembler",
    "StreamDecoder",
    "StreamEvent",
    "StreamMetrics",
]
