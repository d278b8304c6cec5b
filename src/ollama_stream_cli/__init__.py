"""Command-line client for streaming generations from a local inference server."""

__version__ = "0.1.0"
