"""Tests for report/render.py."""

from __future__ import annotations

import json

from evtrace.report.aggregate import build_report
from evtrace.report.models import Report, ReportEntry
from evtrace.report.render import ordered_children, render_histogram, render_report
from evtrace.spans.models import Span


def _span(identity: str, start: int, elapsed: int, req_id: str = "req-1") -> Span:
    return Span(req_id=req_id, identity=identity, hostname="headnode", start=start, elapsed=elapsed)


class TestRenderHistogram:
    def test_full_bar_for_single_bucket(self) -> None:
        lines = render_histogram({8: 1}, indent="")

        assert "Distribution" in lines[0]
        assert lines[0].rstrip().endswith("count")
        assert lines[1] == f"{4:>12} |{' ' * 40} 0"
        assert lines[2] == f"{8:>12} |{'@' * 40} 1"
        assert lines[3] == f"{16:>12} |{' ' * 40} 0"

    def test_bars_proportional(self) -> None:
        lines = render_histogram({2: 1, 4: 3}, indent="")
        bars = {int(line.split("|")[0]): line.split("|")[1].count("@") for line in lines[1:]}
        assert bars == {1: 0, 2: 10, 4: 30, 8: 0}


class TestOrderedChildren:
    def test_sorted_by_descending_max(self) -> None:
        entry = ReportEntry(identity="t", children={"fast": [5], "t": [100], "slow": [50, 20]})
        assert [s.identity for s in ordered_children(entry)] == ["t", "slow", "fast"]


class TestRenderReport:
    """Whole report layout."""

    def test_buckets_in_encounter_order(self) -> None:
        report = build_report(
            {
                "r1": [_span("b.op", 0, 10, "r1")],
                "r2": [_span("a.op", 0, 10, "r2")],
            }
        )

        lines = render_report(report)

        headers = [line for line in lines if line.endswith("max 10ms")]
        assert headers == ["b.op: 1 request, min 10ms, max 10ms", "a.op: 1 request, min 10ms, max 10ms"]

    def test_child_summary_line(self) -> None:
        report = build_report(
            {
                "r1": [_span("top", 0, 10, "r1")],
                "r2": [_span("top", 0, 20, "r2")],
                "r3": [_span("top", 0, 30, "r3")],
            }
        )

        lines = render_report(report)

        assert "  top (3 requests, mean 20ms, median 30ms, max 30ms)" in lines

    def test_fractional_mean(self) -> None:
        report = build_report(
            {
                "r1": [_span("top", 0, 1, "r1")],
                "r2": [_span("top", 0, 2, "r2")],
                "r3": [_span("top", 0, 2, "r3")],
            }
        )

        assert any("mean 1.67ms" in line for line in render_report(report))

    def test_min_duration_hides_fast_children(self) -> None:
        spans = [_span("top", 0, 200), _span("slow", 10, 150), _span("fast", 20, 5)]
        report = build_report({"req-1": spans}, min_duration_ms=100)

        text = "\n".join(render_report(report, min_duration_ms=100))

        assert "  slow (" in text
        assert "  fast (" not in text

    def test_filtered_request_absent(self) -> None:
        report = build_report({"req-1": [_span("vmapi", 0, 50)]}, min_duration_ms=100)
        assert render_report(report, min_duration_ms=100) == []

    def test_anomaly_sections(self) -> None:
        report = Report(
            entries={"top": ReportEntry(identity="top", count=1, min=1, max=1, children={"top": [1]})},
            insane={"req-1": {"moray.get": 150}},
            late={"req-2": {"leaked": 50}},
        )

        lines = render_report(report)

        insane_at = lines.index("Insane Requests:")
        late_at = lines.index("Late Requests:")
        assert json.loads(lines[insane_at + 1]) == {"req-1": {"moray.get": 150}}
        assert json.loads(lines[late_at + 1]) == {"req-2": {"leaked": 50}}

    def test_no_anomaly_sections_when_clean(self) -> None:
        report = build_report({"req-1": [_span("top", 0, 10)]})
        lines = render_report(report)
        assert "Insane Requests:" not in lines
        assert "Late Requests:" not in lines
