"""Command-line entrypoint - stream generations from a local inference server."""

import argparse
import asyncio
import logging
import sys
from typing import TextIO

import structlog

from ollama_stream_cli.config import Settings, get_settings
from ollama_stream_cli.stream.assembler import ResponseAssembler
from ollama_stream_cli.stream.exceptions import StreamError
from ollama_stream_cli.stream.formatter import format_summary
from ollama_stream_cli.stream.models import Mode
from ollama_stream_cli.stream.payloads import build_generate_request
from ollama_stream_cli.stream.sinks import NullSink, PrintSink
from ollama_stream_cli.stream.translate import translate


def configure_logging(
    log_level: str = "WARNING",
    log_file: str = "",
    log_file_max_bytes: int = 10_485_760,
    log_file_backup_count: int = 5,
) -> None:
    """Configure structlog and standard library logging.

    Console output goes to stderr; stdout carries the generated text.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file. Empty string = console only.
        log_file_max_bytes: Max size per log file before rotation (default: 10 MB)
        log_file_backup_count: Number of rotated backup files to keep (default: 5)
    """
    from logging.handlers import RotatingFileHandler
    from pathlib import Path

    level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.root
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=log_file_max_bytes,
            backupCount=log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            # Use JSONRenderer for file, ConsoleRenderer for console
            structlog.processors.JSONRenderer() if log_file else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollama-stream",
        description="Send a prompt to a local inference server and stream the reply.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument("-h", "--host", default=settings.host, help="Inference server host")
    parser.add_argument("-p", "--port", type=int, default=settings.port, help="Inference server port")
    parser.add_argument("-m", "-model", "--model", default=settings.model, help="Model name")
    parser.add_argument("-s", "--summary", action="store_true", help="Show summary metrics after the reply")
    parser.add_argument(
        "-j", "--json", dest="json_response", action="store_true",
        help="Ask for a single JSON document instead of a stream and print it as is",
    )
    parser.add_argument("-t", "--translate", action="store_true", help="Translate the text instead of generating")
    parser.add_argument(
        "--target-language", default=settings.translate_target_language,
        help="Target language for translate mode",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("words", nargs="*", help="Prompt text")
    return parser


async def generate(
    settings: Settings,
    prompt: str,
    output: TextIO,
    json_response: bool = False,
    show_summary: bool = False,
) -> None:
    """Run one generate request and write the reply to ``output``."""
    request = build_generate_request(settings, prompt, json_response=json_response)

    async with ResponseAssembler(settings) as assembler:
        if json_response:
            result = await assembler.run(Mode.GENERATE, request, NullSink())
            output.write(result.text)
            output.flush()
            return

        output.write(">>>\n")
        result = await assembler.run(
            Mode.GENERATE, request, PrintSink(output), capture_metrics=show_summary
        )
        if show_summary:
            output.write(format_summary(result))
        output.flush()


async def run(args: argparse.Namespace, settings: Settings, output: TextIO) -> None:
    text = " ".join(args.words)
    if args.translate:
        await translate(text, settings, output)
        output.write("\n")
        return
    await generate(
        settings,
        text,
        output,
        json_response=args.json_response,
        show_summary=args.summary,
    )


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the request, and return the process exit code."""
    base_settings = get_settings()
    args = build_parser(base_settings).parse_args(argv)

    settings = base_settings.model_copy(
        update={
            "host": args.host,
            "port": args.port,
            "model": args.model,
            "translate_target_language": args.target_language,
            "log_level": args.log_level,
        }
    )

    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_file_max_bytes=settings.log_file_max_bytes,
        log_file_backup_count=settings.log_file_backup_count,
    )

    logger.debug(
        "cli_start",
        host=settings.host,
        port=settings.port,
        model=settings.model,
        translate=args.translate,
        json_response=args.json_response,
    )

    try:
        asyncio.run(run(args, settings, sys.stdout))
    except StreamError as e:
        # Partial text is already on stdout; the diagnostic goes to stderr.
        sys.stdout.flush()
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
