"""Causal timeline for a single request."""

from evtrace.timeline.ops import Mark, TimelineEntry, build_timeline, render_timeline

__all__ = ["Mark", "TimelineEntry", "build_timeline", "render_timeline"]
