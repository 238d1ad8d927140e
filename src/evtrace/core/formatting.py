"""Formatting utilities for consistent terminal output.

Design principles:
- Fixed-width columns so stream lines align when piped through less/grep
- UUID hostnames compressed to their first segment
- Grammatically correct (1 request vs 2 requests)
"""

from __future__ import annotations

from datetime import UTC, datetime

from evtrace.config.constants import DEFAULT_HOST_WIDTH, ELAPSED_WIDTH, UUID_PATTERN


def shorten_hostname(hostname: str) -> str:
    """Shorten UUID hostnames to their first segment.

    Examples:
        0b3a0e6c-3e2b-4a45-8a5c-6c2f1c7e8b9d -> 0b3a0e6c
        headnode -> headnode (unchanged)
    """
    if UUID_PATTERN.fullmatch(hostname):
        return hostname.split("-", 1)[0]
    return hostname


def pad_hostname(hostname: str, width: int = DEFAULT_HOST_WIDTH) -> str:
    """Shorten then left-justify hostname to a fixed column width."""
    return shorten_hostname(hostname).ljust(width)


def format_ms(value: float) -> str:
    """Format a millisecond value, dropping the fraction for whole numbers."""
    if float(value).is_integer():
        return f"{int(value)}ms"
    return f"{value:.2f}ms"


def format_elapsed(elapsed_ms: int, width: int = ELAPSED_WIDTH) -> str:
    """Right-justify an elapsed duration (e.g. '     123ms')."""
    return f"{elapsed_ms:>{width}}ms"


def format_offset(offset_ms: int) -> str:
    """Format an offset from the first event, e.g. '+120ms'."""
    sign = "+" if offset_ms >= 0 else "-"
    return f"{sign}{abs(offset_ms)}ms"


def iso_time(epoch_ms: int) -> str:
    """Render epoch milliseconds as an ISO-8601 UTC timestamp with a 'Z' suffix.

    Examples:
        1420070400000 -> 2015-01-01T00:00:00.000Z
    """
    dt = datetime.fromtimestamp(epoch_ms / 1000, tz=UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "request")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 request" or "3 requests"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"
