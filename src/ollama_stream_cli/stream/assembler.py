"""Drives a request against the inference server and assembles the response."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import structlog

from ollama_stream_cli.config import Settings
from ollama_stream_cli.stream.decoder import StreamDecoder
from ollama_stream_cli.stream.exceptions import (
    DecodeError,
    RepeatedDecodeError,
    StreamError,
    TransportError,
)
from ollama_stream_cli.stream.models import (
    AssembledResult,
    ChatRequest,
    GenerateRequest,
    Mode,
    RequestPayload,
)
from ollama_stream_cli.stream.payloads import endpoint_url
from ollama_stream_cli.stream.sinks import FragmentSink

logger = structlog.get_logger()


class ResponseAssembler:
    """Async client for the generate and chat endpoints.

    Each ``run`` issues one POST, forwards every fragment to the sink in
    arrival order and returns the concatenated text. The assembler depends
    only on the sink's ``accept`` method, so the same code path serves direct
    printing and the channel hand-off used by translation.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=settings.timeout
        )

    async def __aenter__(self) -> ResponseAssembler:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    async def run(
        self,
        mode: Mode,
        payload: RequestPayload,
        sink: FragmentSink,
        capture_metrics: bool = True,
    ) -> AssembledResult:
        """Send ``payload`` and assemble the response.

        Args:
            mode: Generate or chat; selects the endpoint and fragment field.
            payload: Request body matching ``mode``.
            sink: Receives each non-empty fragment before the next is read.
            capture_metrics: Keep the terminal frame's metrics on the result.

        Returns:
            AssembledResult with the full text.

        Raises:
            TransportError, IncompleteStreamError, RepeatedDecodeError,
            ServerStreamError. The text assembled before the failure is
            available as ``partial_text`` on the exception.
        """
        self._check_payload(mode, payload)
        url = endpoint_url(self._settings, mode)
        parts: list[str] = []

        logger.info(
            "stream_request_start",
            mode=mode.value,
            url=url,
            model=payload.model,
            streaming=payload.is_streaming,
        )

        try:
            async with self._http_client.stream(
                "POST", url, json=payload.to_wire()
            ) as response:
                if response.status_code != httpx.codes.OK:
                    raise TransportError(
                        f"received non-200 response status: {response.status_code}",
                        status_code=response.status_code,
                    )

                if not payload.is_streaming:
                    return await self._read_document(response, mode)

                return await self._assemble(
                    response, mode, sink, parts, capture_metrics
                )
        except httpx.HTTPError as e:
            logger.error("stream_transport_error", mode=mode.value, url=url, error=str(e))
            raise TransportError(
                f"request to {url} failed: {e}", partial_text="".join(parts)
            ) from e
        except StreamError as e:
            e.partial_text = "".join(parts)
            logger.error(
                "stream_request_failed",
                mode=mode.value,
                error_type=type(e).__name__,
                error=str(e),
                partial_length=len(e.partial_text),
            )
            raise

    async def _read_document(
        self, response: httpx.Response, mode: Mode
    ) -> AssembledResult:
        """Non-streaming JSON mode: the body is one document, passed through as is."""
        body = await response.aread()
        text = body.decode("utf-8", errors="replace")
        logger.info("stream_document_complete", mode=mode.value, length=len(text))
        return AssembledResult(text=text, mode=mode)

    async def _assemble(
        self,
        response: httpx.Response,
        mode: Mode,
        sink: FragmentSink,
        parts: list[str],
        capture_metrics: bool,
    ) -> AssembledResult:
        decoder = StreamDecoder(
            response.aiter_lines(),
            mode,
            on_decode_error=self._decode_error_limit(),
        )

        # The decoder ends right after the done event, or raises.
        terminal = None
        async for event in decoder:
            # Empty fragments (e.g. the chat terminal event) are not forwarded.
            if event.fragment:
                parts.append(event.fragment)
                sink.accept(event.fragment)
            if event.done:
                terminal = event

        text = "".join(parts)
        logger.info(
            "stream_complete",
            mode=mode.value,
            fragments=len(parts),
            length=len(text),
            decode_errors=len(decoder.decode_errors),
        )

        return AssembledResult(
            text=text,
            mode=mode,
            metrics=terminal.metrics if capture_metrics else None,
            raw_terminal_frame=terminal.raw,
        )

    def _decode_error_limit(self) -> Callable[[DecodeError], None]:
        """Callback that fails the stream once too many frames are malformed."""
        tolerated = self._settings.max_decode_errors
        errors: list[DecodeError] = []

        def on_decode_error(error: DecodeError) -> None:
            errors.append(error)
            if len(errors) > tolerated:
                raise RepeatedDecodeError(errors)

        return on_decode_error

    @staticmethod
    def _check_payload(mode: Mode, payload: RequestPayload) -> None:
        expected = ChatRequest if mode is Mode.CHAT else GenerateRequest
        if not isinstance(payload, expected):
            raise TypeError(
                f"{mode.value} mode expects {expected.__name__}, got {type(payload).__name__}"
            )
