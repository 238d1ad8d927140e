"""Single-pass correlation over an input line stream."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog
from rich.text import Text

from evtrace.config.models import EvtraceConfig
from evtrace.core.errors import InputError
from evtrace.spans.correlator import SpanCorrelator
from evtrace.spans.models import Correlation
from evtrace.spans.normalize import line_to_event
from evtrace.spans.stream import format_raw, format_stream_line, should_emit

logger = structlog.get_logger()

Emitter = Callable[[str | Text], None]


def _live_formatter(config: EvtraceConfig) -> Callable[[Correlation], str | Text] | None:
    """Pick the live line formatter for the configured mode, or None for no live output."""
    mode = config.output.mode
    if mode in ("stream", "stream+report"):
        width = config.output.host_width
        return lambda c: format_stream_line(c, host_width=width)
    if mode == "raw":
        return format_raw
    return None


def correlate_lines(
    lines: Iterable[str],
    config: EvtraceConfig,
    *,
    emit: Emitter | None = None,
    source: str = "<stdin>",
) -> SpanCorrelator:
    """Feed every line through normalize -> correlate, emitting live output.

    Args:
        lines: Newline-delimited JSON records (the input stream)
        config: Resolved configuration (mode, filters, debug)
        emit: Sink for live output lines; required for raw/stream modes
        source: Input name used in errors

    Returns:
        The correlator, holding per-request spans for report/timeline stages.

    Raises:
        InputError: If the underlying stream fails mid-read.
        InternalError: On an event with an unhandled phase.
    """
    correlator = SpanCorrelator()
    formatter = _live_formatter(config) if emit is not None else None
    min_duration = config.filters.min_duration_ms
    debug = config.debug.enabled

    lineno = 0
    skipped = 0
    try:
        for lineno, line in enumerate(lines, start=1):
            event = line_to_event(line)
            if event is None:
                skipped += 1
                if debug and line.strip():
                    logger.debug("record_skipped", line=lineno, record=line.rstrip()[:200])
                continue

            correlation = correlator.handle(event)
            if formatter is not None and emit is not None and should_emit(
                correlation, min_duration
            ):
                emit(formatter(correlation))
    except (OSError, UnicodeDecodeError) as e:
        raise InputError.read_failed(source, str(e)) from e

    if debug:
        for sig in correlator.unmatched():
            logger.debug("unmatched_begin", signature=str(sig))
    logger.debug(
        "input_done",
        lines=lineno,
        skipped=skipped,
        requests=len(correlator.request_spans),
        open=correlator.open_count,
    )
    return correlator
