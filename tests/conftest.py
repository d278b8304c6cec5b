"""Pytest fixtures for ollama-stream-cli tests."""

import json
import os
from unittest.mock import patch

import httpx
import pytest

from ollama_stream_cli.config import Settings
from ollama_stream_cli.stream.assembler import ResponseAssembler


@pytest.fixture
def mock_env_vars():
    """Mock environment variables for testing."""
    env_vars = {
        "OLLAMA_HOST": "127.0.0.1",
        "OLLAMA_PORT": "11434",
        "OLLAMA_MODEL": "llama2",
        "LOG_LEVEL": "DEBUG",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def settings(mock_env_vars) -> Settings:
    """Create Settings instance with mocked environment."""
    return Settings()


def ndjson(*objects) -> bytes:
    """Encode objects as newline-delimited JSON, one frame per object."""
    return b"".join(json.dumps(obj).encode() + b"\n" for obj in objects)


class RecordingSink:
    """Sink that keeps every fragment it receives."""

    def __init__(self) -> None:
        self.fragments: list[str] = []

    def accept(self, fragment: str) -> None:
        self.fragments.append(fragment)


@pytest.fixture
def make_assembler(settings):
    """Build a ResponseAssembler whose HTTP client is served by ``handler``.

    Requests seen by the handler are appended to the returned list.
    """

    def _make(handler, settings_override: Settings | None = None):
        requests: list[httpx.Request] = []

        def _recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_recording_handler))
        assembler = ResponseAssembler(settings_override or settings, http_client=client)
        return assembler, requests

    return _make
