"""Fold completed spans into the aggregate report.

For each request the earliest-starting span is the top-level span; its identity
is the bucket the whole request is reported under. Every span in the request
(top-level included) is summed per identity, so a retried sub-step counts once
per request with its combined time.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

import structlog

from evtrace.config.constants import INSANE_COUNT_THRESHOLD
from evtrace.report.models import Report, ReportEntry
from evtrace.spans.models import Span

logger = structlog.get_logger()


def span_order(span: Span) -> tuple[int, int, str]:
    """Sort by start; ties put the shorter identity first."""
    return (span.start, len(span.identity), span.identity)


def _fold_request(
    report: Report,
    req_id: str,
    spans: list[Span],
    *,
    identity_pattern: re.Pattern[str] | None,
    min_duration_ms: int | None,
) -> bool:
    """Fold one request into the report. Returns False if it was filtered out."""
    ordered = sorted(spans, key=span_order)
    top = ordered[0]

    if min_duration_ms is not None and top.elapsed < min_duration_ms:
        return False
    if identity_pattern is not None and not identity_pattern.search(top.identity):
        return False

    expected_finish = top.start + top.elapsed
    counts: dict[str, int] = {}
    totals: dict[str, int] = {}

    for span in ordered:
        counts[span.identity] = counts.get(span.identity, 0) + 1
        totals[span.identity] = totals.get(span.identity, 0) + span.elapsed

        if span.start > expected_finish:
            late = report.late.setdefault(req_id, {})
            delay = span.start - expected_finish
            late[span.identity] = max(late.get(span.identity, delay), delay)

    for identity, count in counts.items():
        if count > INSANE_COUNT_THRESHOLD:
            report.insane.setdefault(req_id, {})[identity] = count

    entry = report.entries.get(top.identity)
    if entry is None:
        entry = report.entries[top.identity] = ReportEntry(identity=top.identity)
    entry.add_request(top.elapsed, totals)
    return True


def build_report(
    request_spans: Mapping[str, Iterable[Span]],
    *,
    identity_pattern: re.Pattern[str] | None = None,
    min_duration_ms: int | None = None,
) -> Report:
    """Build the report from per-request spans, in request encounter order.

    Args:
        request_spans: req_id -> completed spans for that request
        identity_pattern: Only report requests whose top-level identity matches
        min_duration_ms: Skip requests whose top-level span is faster than this

    Returns:
        Report with entries keyed by top-level identity plus the insane/late sets.
    """
    report = Report()
    for req_id, spans in request_spans.items():
        span_list = list(spans)
        if not span_list:
            continue
        report.requests_seen += 1
        if not _fold_request(
            report,
            req_id,
            span_list,
            identity_pattern=identity_pattern,
            min_duration_ms=min_duration_ms,
        ):
            report.requests_skipped += 1

    logger.debug(
        "report_built",
        requests=report.requests_seen,
        skipped=report.requests_skipped,
        buckets=len(report.entries),
        insane=len(report.insane),
        late=len(report.late),
    )
    return report
