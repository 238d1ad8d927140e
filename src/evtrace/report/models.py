"""Report models - per top-level identity buckets and derived statistics."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ReportEntry:
    """Accumulated data for one top-level identity across requests."""

    identity: str
    count: int = 0
    min: int | None = None
    max: int | None = None
    # child identity -> one summed elapsed per request that contained it
    children: dict[str, list[int]] = field(default_factory=dict)

    def add_request(self, elapsed: int, totals: dict[str, int]) -> None:
        self.count += 1
        self.min = elapsed if self.min is None else min(self.min, elapsed)
        self.max = elapsed if self.max is None else max(self.max, elapsed)
        for identity, total in totals.items():
            self.children.setdefault(identity, []).append(total)


@dataclass(frozen=True)
class ChildStats:
    """Summary statistics for one child identity within a report entry."""

    identity: str
    count: int
    min: int
    max: int
    mean: float
    median: int
    histogram: dict[int, int]


@dataclass
class Report:
    """Full aggregate report over all requests."""

    entries: dict[str, ReportEntry] = field(default_factory=dict)
    # req_id -> identity -> occurrences, for identities above the repetition threshold
    insane: dict[str, dict[str, int]] = field(default_factory=dict)
    # req_id -> identity -> ms the child started after the parent's expected finish
    late: dict[str, dict[str, int]] = field(default_factory=dict)
    requests_seen: int = 0
    requests_skipped: int = 0

    @property
    def requests_reported(self) -> int:
        return sum(entry.count for entry in self.entries.values())
