"""Aggregate report over completed spans."""

from evtrace.report.aggregate import build_report
from evtrace.report.models import ChildStats, Report, ReportEntry
from evtrace.report.render import render_report

__all__ = [
    "ChildStats",
    "Report",
    "ReportEntry",
    "build_report",
    "render_report",
]
