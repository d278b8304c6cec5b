"""Data models for the inference server stream protocol."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NANOSECONDS_PER_SECOND = 1e9


class Mode(str, Enum):
    """Request mode, selects the endpoint and where fragments live in a frame."""

    GENERATE = "generate"
    CHAT = "chat"


def seconds(nanoseconds: int) -> float:
    """Convert a nanosecond duration reported by the server to seconds."""
    return nanoseconds / NANOSECONDS_PER_SECOND


class StreamMetrics(BaseModel):
    """Performance counters carried by the terminal frame."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    total_duration: int = 0
    load_duration: int = 0
    prompt_eval_count: int = 0
    prompt_eval_duration: int = 0
    eval_count: int = 0
    eval_duration: int = 0


@dataclass(slots=True, frozen=True)
class StreamEvent:
    """A single decoded frame from the stream."""

    fragment: str
    done: bool = False
    metrics: StreamMetrics | None = None
    raw: str = ""


class ChatTurn(BaseModel):
    """One message of a conversation. Position in the list is turn order."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class GenerateRequest(BaseModel):
    """Body of a POST to the generate endpoint."""

    model_config = ConfigDict(frozen=True)

    model: str
    prompt: str
    format: Literal["json"] | None = None
    stream: bool | None = None

    @property
    def is_streaming(self) -> bool:
        return self.stream is not False

    def to_wire(self) -> dict:
        return self.model_dump(exclude_none=True)


class ChatRequest(BaseModel):
    """Body of a POST to the chat endpoint."""

    model_config = ConfigDict(frozen=True)

    model: str
    messages: tuple[ChatTurn, ...] = Field(default_factory=tuple)

    @property
    def is_streaming(self) -> bool:
        return True

    def to_wire(self) -> dict:
        return self.model_dump(mode="json")


RequestPayload = GenerateRequest | ChatRequest


class AssembledResult(BaseModel):
    """Full text of a response plus the terminal frame's metrics."""

    text: str
    mode: Mode
    metrics: StreamMetrics | None = None
    raw_terminal_frame: str | None = None
