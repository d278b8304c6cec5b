"""Request payload builders for the generate and chat endpoints."""

from ollama_stream_cli.config import Settings
from ollama_stream_cli.stream.models import (
    ChatRequest,
    ChatTurn,
    GenerateRequest,
    Mode,
)

GENERATE_PATH = "/api/generate"
CHAT_PATH = "/api/chat"

TRANSLATE_SYSTEM_PROMPT = "Translate the following text to {target_language}"


def endpoint_url(settings: Settings, mode: Mode) -> str:
    """Full URL of the endpoint serving ``mode``."""
    path = CHAT_PATH if mode is Mode.CHAT else GENERATE_PATH
    return f"{settings.base_url}{path}"


def build_generate_request(
    settings: Settings,
    prompt: str,
    json_response: bool = False,
) -> GenerateRequest:
    """Build a generate request.

    With ``json_response`` the server is asked for a single JSON document
    (``format=json``, ``stream=false``) instead of a line stream.
    """
    if json_response:
        return GenerateRequest(
            model=settings.model, prompt=prompt, format="json", stream=False
        )
    return GenerateRequest(model=settings.model, prompt=prompt)


def build_chat_request(settings: Settings, turns: list[ChatTurn]) -> ChatRequest:
    return ChatRequest(model=settings.model, messages=tuple(turns))


def build_translation_turns(text: str, target_language: str = "English") -> list[ChatTurn]:
    return [
        ChatTurn(
            role="system",
            content=TRANSLATE_SYSTEM_PROMPT.format(target_language=target_language),
        ),
        ChatTurn(role="user", content=text),
    ]
