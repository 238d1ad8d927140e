"""Statistics helpers for report entries.

The median rule is deliberately non-standard: it takes the value at index
``(n + 1) // 2`` of the sorted values, which is what existing report consumers
compare against.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence

from evtrace.report.models import ChildStats


def mean(values: Sequence[int]) -> float:
    """Arithmetic mean rounded to two decimals."""
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


def median(values: Sequence[int]) -> int:
    """Value at index (n + 1) // 2 of the sorted values, clamped to the last index.

    Examples:
        [10, 20, 30] -> 30
        [10, 20, 30, 40] -> 30
        [10] -> 10
    """
    if not values:
        raise ValueError("median of empty sequence")
    ordered = sorted(values)
    index = min((len(ordered) + 1) // 2, len(ordered) - 1)
    return ordered[index]


def bucket_for(value: int | float) -> int:
    """Smallest power of two >= value. Values <= 0 fall in bucket 0.

    Examples:
        5 -> 8
        8 -> 8
        1 -> 1
        0 -> 0
    """
    if value <= 0:
        return 0
    return 1 << (math.ceil(value) - 1).bit_length()


def histogram(values: Sequence[int]) -> dict[int, int]:
    """Count values per power-of-two bucket, in ascending bucket order."""
    counts = Counter(bucket_for(v) for v in values)
    return dict(sorted(counts.items()))


def histogram_rows(buckets: dict[int, int]) -> list[tuple[int, int]]:
    """Rows to display, from half the smallest bucket to double the largest.

    Empty intermediate buckets are included so gaps are visible.
    """
    if not buckets:
        return []
    rows: list[tuple[int, int]] = []
    if 0 in buckets:
        rows.append((0, buckets[0]))
    positive = [b for b in buckets if b > 0]
    if not positive:
        return rows

    bucket = max(1, min(positive) // 2)
    last = max(positive) * 2
    while bucket <= last:
        rows.append((bucket, buckets.get(bucket, 0)))
        bucket *= 2
    return rows


def child_stats(identity: str, values: Sequence[int]) -> ChildStats:
    return ChildStats(
        identity=identity,
        count=len(values),
        min=min(values),
        max=max(values),
        mean=mean(values),
        median=median(values),
        histogram=histogram(values),
    )
