"""Tests for request payload builders."""

import pytest
from pydantic import ValidationError

from ollama_stream_cli.stream.models import ChatTurn, Mode
from ollama_stream_cli.stream.payloads import (
    build_chat_request,
    build_generate_request,
    build_translation_turns,
    endpoint_url,
)


def test_endpoint_urls(settings):
    assert endpoint_url(settings, Mode.GENERATE) == "http://127.0.0.1:11434/api/generate"
    assert endpoint_url(settings, Mode.CHAT) == "http://127.0.0.1:11434/api/chat"


def test_endpoint_url_follows_settings(settings):
    remote = settings.model_copy(update={"host": "gpu-box", "port": 8080})
    assert endpoint_url(remote, Mode.CHAT) == "http://gpu-box:8080/api/chat"


def test_streaming_generate_request_omits_optional_fields(settings):
    request = build_generate_request(settings, "why is the sky blue")

    assert request.is_streaming
    assert request.to_wire() == {"model": "llama2", "prompt": "why is the sky blue"}


def test_json_generate_request(settings):
    request = build_generate_request(settings, "list colors", json_response=True)

    assert not request.is_streaming
    assert request.to_wire() == {
        "model": "llama2",
        "prompt": "list colors",
        "format": "json",
        "stream": False,
    }


def test_chat_request_preserves_turn_order(settings):
    turns = [
        ChatTurn(role="system", content="be brief"),
        ChatTurn(role="user", content="hi"),
        ChatTurn(role="assistant", content="hello"),
        ChatTurn(role="user", content="bye"),
    ]
    wire = build_chat_request(settings, turns).to_wire()

    assert wire["model"] == "llama2"
    assert [(m["role"], m["content"]) for m in wire["messages"]] == [
        ("system", "be brief"),
        ("user", "hi"),
        ("assistant", "hello"),
        ("user", "bye"),
    ]


def test_requests_are_immutable(settings):
    request = build_generate_request(settings, "hi")

    with pytest.raises(ValidationError):
        request.prompt = "changed"


def test_chat_turn_rejects_unknown_role():
    with pytest.raises(ValidationError, match="role"):
        ChatTurn(role="tool", content="x")


def test_translation_turns():
    turns = build_translation_turns("Bonjour", "German")

    assert turns == [
        ChatTurn(role="system", content="Translate the following text to German"),
        ChatTurn(role="user", content="Bonjour"),
    ]


def test_translation_turns_default_to_english():
    assert build_translation_turns("Hola")[0].content == "Translate the following text to English"
