"""Single-request timeline with nesting reconstructed from interval containment.

Spans are walked in start order while a min-heap keyed by end time tracks the
spans still open. Before each start, every open span that has already ended is
closed, which is what moves the nesting depth back out.
"""

from __future__ import annotations

import heapq
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from evtrace.config.constants import TIMELINE_INDENT
from evtrace.core.formatting import format_elapsed, format_offset, iso_time
from evtrace.spans.models import Span

_TIME_WIDTH = len("2015-01-01T00:00:00.000Z")


class Mark(Enum):
    START = "START"
    END = "END"


@dataclass(frozen=True, slots=True)
class TimelineEntry:
    """One printed timeline line."""

    mark: Mark
    label: str  # identity, with [n] suffix from its second occurrence on
    time: int
    depth: int
    elapsed: int | None = None  # END lines only


def _start_order(span: Span) -> tuple[int, int]:
    return (span.start, len(span.identity))


def build_timeline(spans: Iterable[Span]) -> list[TimelineEntry]:
    """Order START/END entries chronologically with nesting depth."""
    entries: list[TimelineEntry] = []
    # (end, -len(identity), push order, label, span); push order keeps the heap stable
    ends: list[tuple[int, int, int, str, Span]] = []
    occurrences: Counter[str] = Counter()
    depth = 0

    def close_next() -> None:
        nonlocal depth
        _, _, _, label, span = heapq.heappop(ends)
        depth -= 1
        entries.append(TimelineEntry(Mark.END, label, span.end, depth, span.elapsed))

    for order, span in enumerate(sorted(spans, key=_start_order)):
        while ends and ends[0][0] <= span.start:
            close_next()

        occurrences[span.identity] += 1
        n = occurrences[span.identity]
        label = span.identity if n == 1 else f"{span.identity}[{n}]"

        entries.append(TimelineEntry(Mark.START, label, span.start, depth))
        heapq.heappush(ends, (span.end, -len(span.identity), order, label, span))
        depth += 1

    while ends:
        close_next()
    return entries


def render_timeline(entries: list[TimelineEntry]) -> list[str]:
    """Format entries: absolute time on the first line, +offsets afterwards."""
    if not entries:
        return []
    origin = entries[0].time
    lines = []
    for i, entry in enumerate(entries):
        when = iso_time(entry.time) if i == 0 else format_offset(entry.time - origin)
        elapsed = format_elapsed(entry.elapsed) if entry.elapsed is not None else ""
        indent = TIMELINE_INDENT * entry.depth
        lines.append(
            f"{when:<{_TIME_WIDTH}} {elapsed:>10}  {indent}{entry.mark.value:<5} {entry.label}"
        )
    return lines
