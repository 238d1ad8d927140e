"""Tests for report/aggregate.py build_report."""

from __future__ import annotations

import re

from evtrace.report.aggregate import build_report, span_order
from evtrace.spans.models import Span


def _span(identity: str, start: int, elapsed: int, req_id: str = "req-1") -> Span:
    return Span(req_id=req_id, identity=identity, hostname="headnode", start=start, elapsed=elapsed)


class TestTopLevelSelection:
    """The earliest-starting span names the report bucket."""

    def test_earliest_span_is_top_level(self) -> None:
        spans = [_span("vmapi.getvm", 10, 20), _span("vmapi", 0, 100)]

        report = build_report({"req-1": spans})

        assert list(report.entries) == ["vmapi"]
        assert report.entries["vmapi"].min == 100

    def test_tie_broken_by_shorter_identity(self) -> None:
        spans = [_span("cloudapi.createmachine", 0, 50), _span("cloudapi", 0, 80)]

        report = build_report({"req-1": spans})

        assert list(report.entries) == ["cloudapi"]

    def test_span_order_key(self) -> None:
        ordered = sorted(
            [_span("bb", 5, 1), _span("a", 5, 1), _span("zzz", 1, 1)], key=span_order
        )
        assert [s.identity for s in ordered] == ["zzz", "a", "bb"]

    def test_requests_in_encounter_order(self) -> None:
        report = build_report(
            {
                "r1": [_span("second", 0, 10, "r1")],
                "r2": [_span("first", 0, 10, "r2")],
            }
        )
        assert list(report.entries) == ["second", "first"]


class TestAccumulation:
    """Per-request totals merged into the top-level bucket."""

    def test_repeated_identity_summed_within_request(self) -> None:
        spans = [_span("top", 0, 100), _span("step", 10, 20), _span("step", 40, 30)]

        report = build_report({"req-1": spans})

        entry = report.entries["top"]
        assert entry.children == {"top": [100], "step": [50]}

    def test_min_max_count_across_requests(self) -> None:
        report = build_report(
            {
                "r1": [_span("top", 0, 10, "r1")],
                "r2": [_span("top", 0, 30, "r2")],
                "r3": [_span("top", 0, 20, "r3")],
            }
        )

        entry = report.entries["top"]
        assert entry.count == 3
        assert entry.min == 10
        assert entry.max == 30
        assert entry.children["top"] == [10, 30, 20]
        assert report.requests_reported == 3

    def test_negative_elapsed_tolerated(self) -> None:
        report = build_report({"req-1": [_span("top", 0, -5)]})
        assert report.entries["top"].min == -5

    def test_empty_request_ignored(self) -> None:
        report = build_report({"req-1": []})
        assert report.entries == {}
        assert report.requests_seen == 0


class TestFilters:
    """Duration and identity filters drop whole requests."""

    def test_min_duration_skips_fast_request(self) -> None:
        report = build_report(
            {
                "fast": [_span("vmapi", 0, 50, "fast")],
                "slow": [_span("cnapi", 0, 150, "slow")],
            },
            min_duration_ms=100,
        )

        assert list(report.entries) == ["cnapi"]
        assert report.requests_skipped == 1

    def test_identity_filter(self) -> None:
        report = build_report(
            {
                "r1": [_span("vmapi.getvm", 0, 10, "r1")],
                "r2": [_span("cnapi.servers", 0, 10, "r2")],
            },
            identity_pattern=re.compile(r"^vmapi"),
        )

        assert list(report.entries) == ["vmapi.getvm"]

    def test_identity_filter_checks_top_level_only(self) -> None:
        spans = [_span("cnapi", 0, 100), _span("vmapi.getvm", 10, 10)]

        report = build_report({"req-1": spans}, identity_pattern=re.compile("vmapi"))

        assert report.entries == {}

    def test_filtered_requests_not_checked_for_anomalies(self) -> None:
        spans = [_span("top", 0, 10), _span("child", 50, 1)]

        report = build_report({"req-1": spans}, min_duration_ms=100)

        assert report.late == {}


class TestAnomalies:
    """Insane (runaway repetition) and late (child after parent finish) requests."""

    def test_given_150_siblings_when_built_then_request_is_insane(self) -> None:
        spans = [_span("top", 0, 1000)]
        spans.extend(_span("moray.get", i + 1, 1) for i in range(150))

        report = build_report({"req-1": spans})

        assert report.insane == {"req-1": {"moray.get": 150}}

    def test_threshold_is_exclusive(self) -> None:
        spans = [_span("top", 0, 1000)]
        spans.extend(_span("moray.get", i + 1, 1) for i in range(100))

        report = build_report({"req-1": spans})

        assert report.insane == {}

    def test_given_child_after_parent_finish_when_built_then_request_is_late(self) -> None:
        spans = [_span("top", 0, 100), _span("inside", 50, 10), _span("leaked", 150, 10)]

        report = build_report({"req-1": spans})

        assert report.late == {"req-1": {"leaked": 50}}

    def test_child_starting_exactly_at_finish_not_late(self) -> None:
        spans = [_span("top", 0, 100), _span("edge", 100, 10)]

        report = build_report({"req-1": spans})

        assert report.late == {}

    def test_late_records_largest_delay(self) -> None:
        spans = [_span("top", 0, 100), _span("leaked", 120, 1), _span("leaked", 180, 1)]

        report = build_report({"req-1": spans})

        assert report.late == {"req-1": {"leaked": 80}}
