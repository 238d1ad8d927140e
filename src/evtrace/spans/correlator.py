"""Begin/end correlation into completed spans.

One SpanCorrelator is built per run and fed events in input order. It owns the
set of open signatures and the per-request span lists consumed by the report
and timeline stages at end of input.
"""

from __future__ import annotations

import structlog

from evtrace.core.errors import InternalError
from evtrace.spans.models import Correlation, Event, Outcome, Phase, Signature, Span

logger = structlog.get_logger()


class SpanCorrelator:
    """Pairs begin and end events by signature.

    Duplicate begin policy: the earlier open timestamp is kept and a warning
    is logged, so only one end can close the signature.
    """

    def __init__(self) -> None:
        self.open_events: dict[Signature, int] = {}
        self.request_spans: dict[str, list[Span]] = {}

    @property
    def open_count(self) -> int:
        return len(self.open_events)

    def unmatched(self) -> list[Signature]:
        """Signatures that saw a begin but no end so far."""
        return list(self.open_events)

    def spans_for(self, req_id: str) -> list[Span]:
        return self.request_spans.get(req_id, [])

    def handle(self, event: Event) -> Correlation:
        """Dispatch one event on its phase.

        Raises:
            InternalError: If the event's phase is neither begin nor end.
        """
        match event.phase:
            case Phase.BEGIN:
                return self.on_begin(event)
            case Phase.END:
                return self.on_end(event)
            case _:
                raise InternalError.unhandled_phase(event.phase)

    def on_begin(self, event: Event) -> Correlation:
        sig = event.signature
        if sig in self.open_events:
            logger.warning(
                "duplicate_begin",
                signature=str(sig),
                open_time=self.open_events[sig],
                time=event.time,
            )
            return Correlation(event=event, outcome=Outcome.DUPLICATE_BEGIN)

        self.open_events[sig] = event.time
        return Correlation(event=event, outcome=Outcome.OPENED)

    def on_end(self, event: Event) -> Correlation:
        sig = event.signature
        start = self.open_events.pop(sig, None)
        if start is None:
            # Truncated or rotated logs routinely start mid-request
            return Correlation(event=event, outcome=Outcome.ORPHAN_END)

        span = Span(
            req_id=event.req_id,
            identity=event.identity,
            hostname=event.hostname,
            start=start,
            elapsed=event.time - start,
        )
        if span.elapsed < 0:
            logger.warning("negative_elapsed", signature=str(sig), elapsed=span.elapsed)
        self.request_spans.setdefault(event.req_id, []).append(span)
        return Correlation(event=event, outcome=Outcome.CLOSED, span=span)
