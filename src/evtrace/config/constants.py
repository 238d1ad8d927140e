"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
For configurable values, see models.py (FilterConfig, OutputConfig, etc.).
"""

import re

# =============================================================================
# Report Anomaly Detection
# =============================================================================

INSANE_COUNT_THRESHOLD = 100
"""Per-request occurrences of one identity above which the request is flagged."""

# =============================================================================
# Histogram Rendering
# =============================================================================

HISTOGRAM_BAR_WIDTH = 40
"""Columns used by the widest histogram bar."""

HISTOGRAM_VALUE_WIDTH = 12
"""Width of the bucket value column."""

# =============================================================================
# Stream / Timeline Layout
# =============================================================================

DEFAULT_HOST_WIDTH = 12
"""Default padded width of the hostname column in stream output."""

ELAPSED_WIDTH = 8
"""Right-justified width of the elapsed column (digits, before 'ms')."""

TIMELINE_INDENT = "  "
"""Indentation added per nesting level in timelines."""

UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)
"""Hostnames matching this are shortened to their first segment."""

# =============================================================================
# Input Record Shape
# =============================================================================

BEGIN_MARKERS = frozenset({"b", "begin"})
END_MARKERS = frozenset({"e", "end"})
"""Accepted values of the record's evt.ph field."""

SEQUENCE_FIELDS = ("seq", "ts")
"""Disambiguator fields on the record's evt object, in priority order."""
