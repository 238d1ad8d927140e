"""Span correlation: normalize records, pair begin/end events into spans."""

from evtrace.spans.correlator import SpanCorrelator
from evtrace.spans.models import Correlation, Event, Outcome, Phase, Signature, Span
from evtrace.spans.normalize import derive_identity, line_to_event, record_to_event
from evtrace.spans.ops import correlate_lines

__all__ = [
    "Correlation",
    "Event",
    "Outcome",
    "Phase",
    "Signature",
    "Span",
    "SpanCorrelator",
    "correlate_lines",
    "derive_identity",
    "line_to_event",
    "record_to_event",
]
