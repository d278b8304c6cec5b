"""Format response metrics for display."""

from ollama_stream_cli.stream.models import AssembledResult, StreamMetrics, seconds


def format_metrics(metrics: StreamMetrics) -> str:
    """Render metrics one per line, durations in seconds to 2 decimal places."""
    lines = [
        f"Total Duration: {seconds(metrics.total_duration):.2f} seconds",
        f"Load Duration: {seconds(metrics.load_duration):.2f} seconds",
        f"Prompt Eval Count: {metrics.prompt_eval_count}",
        f"Prompt Eval Duration: {seconds(metrics.prompt_eval_duration):.2f} seconds",
        f"Eval Count: {metrics.eval_count}",
        f"Eval Duration: {seconds(metrics.eval_duration):.2f} seconds",
    ]
    return "\n".join(lines) + "\n"


def format_summary(result: AssembledResult) -> str:
    """Summary block printed after a streamed response.

    Echoes the raw terminal frame, then the metrics. Returns an empty string
    when the result carries no metrics (non-streaming JSON mode, or metrics
    not captured).
    """
    if result.metrics is None:
        return ""
    parts = ["\n\n"]
    if result.raw_terminal_frame:
        parts.append(f"line: {result.raw_terminal_frame}\n")
    parts.append(format_metrics(result.metrics))
    return "".join(parts)
