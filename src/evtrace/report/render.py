"""Text rendering of the aggregate report."""

from __future__ import annotations

import json

from evtrace.config.constants import HISTOGRAM_BAR_WIDTH, HISTOGRAM_VALUE_WIDTH
from evtrace.core.formatting import format_ms, pluralize
from evtrace.report.models import ChildStats, Report, ReportEntry
from evtrace.report.stats import child_stats, histogram_rows


def render_histogram(buckets: dict[int, int], *, indent: str = "    ") -> list[str]:
    """Render power-of-two buckets as an @-bar distribution."""
    rows = histogram_rows(buckets)
    total = sum(buckets.values())
    title = " Distribution "
    dashes = HISTOGRAM_BAR_WIDTH - len(title)
    header = "-" * (dashes // 2) + title + "-" * (dashes - dashes // 2)
    lines = [f"{indent}{'value':>{HISTOGRAM_VALUE_WIDTH}}  {header} count"]
    for bucket, count in rows:
        width = round(HISTOGRAM_BAR_WIDTH * count / total) if total else 0
        bar = ("@" * width).ljust(HISTOGRAM_BAR_WIDTH)
        lines.append(f"{indent}{bucket:>{HISTOGRAM_VALUE_WIDTH}} |{bar} {count}")
    return lines


def ordered_children(entry: ReportEntry) -> list[ChildStats]:
    """Child statistics sorted by descending max duration."""
    stats = [child_stats(identity, values) for identity, values in entry.children.items()]
    return sorted(stats, key=lambda s: s.max, reverse=True)


def render_entry(entry: ReportEntry, *, min_duration_ms: int | None = None) -> list[str]:
    lines = [
        f"{entry.identity}: {pluralize(entry.count, 'request')}, "
        f"min {format_ms(entry.min or 0)}, max {format_ms(entry.max or 0)}",
    ]
    for stats in ordered_children(entry):
        if min_duration_ms is not None and stats.max < min_duration_ms:
            continue
        lines.append("")
        lines.append(
            f"  {stats.identity} ({pluralize(stats.count, 'request')}, "
            f"mean {format_ms(stats.mean)}, median {format_ms(stats.median)}, "
            f"max {format_ms(stats.max)})"
        )
        lines.extend(render_histogram(stats.histogram))
    return lines


def render_report(report: Report, *, min_duration_ms: int | None = None) -> list[str]:
    """Render every top-level bucket in encounter order, then anomaly dumps."""
    lines: list[str] = []
    for entry in report.entries.values():
        if lines:
            lines.append("")
        lines.extend(render_entry(entry, min_duration_ms=min_duration_ms))

    if report.insane:
        lines.extend(["", "Insane Requests:", json.dumps(report.insane, indent=2)])
    if report.late:
        lines.extend(["", "Late Requests:", json.dumps(report.late, indent=2)])
    return lines
