"""Live per-event output: raw JSON dump and the condensed stream format."""

from __future__ import annotations

import json

from rich.text import Text

from evtrace.config.constants import DEFAULT_HOST_WIDTH, ELAPSED_WIDTH
from evtrace.core.formatting import format_elapsed, iso_time, pad_hostname
from evtrace.spans.models import Correlation, Outcome, Phase

_MARKERS = {
    Phase.BEGIN: ("B", "bold green"),
    Phase.END: ("E", "bold red"),
}


def should_emit(correlation: Correlation, min_duration_ms: int | None = None) -> bool:
    """Whether a correlation produces a live output line.

    Duplicate begins and orphan ends never do. With a minimum duration set,
    begins are suppressed since their duration is not known yet.
    """
    if correlation.outcome is Outcome.OPENED:
        return min_duration_ms is None
    if correlation.outcome is Outcome.CLOSED and correlation.span is not None:
        return min_duration_ms is None or correlation.span.elapsed >= min_duration_ms
    return False


def format_raw(correlation: Correlation) -> str:
    """One JSON object per event; ends carry their elapsed time."""
    data = correlation.event.to_dict()
    if correlation.span is not None:
        data["elapsed"] = correlation.span.elapsed
    return json.dumps(data)


def format_stream_line(
    correlation: Correlation,
    *,
    host_width: int = DEFAULT_HOST_WIDTH,
) -> Text:
    """Condensed line: time, host, B/E marker, right-justified elapsed, identity."""
    event = correlation.event
    marker, style = _MARKERS[event.phase]
    if correlation.span is not None:
        elapsed = format_elapsed(correlation.span.elapsed)
    else:
        elapsed = " " * (ELAPSED_WIDTH + 2)

    text = Text(f"{iso_time(event.time)} {pad_hostname(event.hostname, host_width)} ")
    text.append(marker, style=style)
    text.append(f" {elapsed} {event.identity}")
    return text
