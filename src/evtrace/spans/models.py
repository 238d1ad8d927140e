"""Span models - events, signatures and completed spans."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple


class Phase(Enum):
    """Which edge of an operation a record marks."""

    BEGIN = "begin"
    END = "end"


class Signature(NamedTuple):
    """Correlation key pairing a begin with its end."""

    req_id: str
    hostname: str
    key: str

    def __str__(self) -> str:
        return f"{self.req_id}:{self.hostname}:{self.key}"


@dataclass(frozen=True, slots=True)
class Event:
    """One normalized begin/end record."""

    identity: str  # e.g. vmapi.getvm
    req_id: str
    hostname: str
    time: int  # ms since Unix epoch
    phase: Phase
    sequence: str | None = None  # per-occurrence disambiguator from the record

    @property
    def key(self) -> str:
        """Identity with the disambiguator folded in, used for pairing only."""
        if self.sequence is None:
            return self.identity
        return f"{self.identity}@{self.sequence}"

    @property
    def signature(self) -> Signature:
        return Signature(self.req_id, self.hostname, self.key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.identity,
            "req_id": self.req_id,
            "hostname": self.hostname,
            "time": self.time,
            "phase": self.phase.value,
        }


@dataclass(frozen=True, slots=True)
class Span:
    """A completed begin/end pair. Elapsed may be negative under clock skew."""

    req_id: str
    identity: str
    hostname: str
    start: int
    elapsed: int

    @property
    def end(self) -> int:
        return self.start + self.elapsed

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.identity,
            "req_id": self.req_id,
            "hostname": self.hostname,
            "time": self.end,
            "phase": Phase.END.value,
            "elapsed": self.elapsed,
        }


class Outcome(Enum):
    """What the correlator did with one event."""

    OPENED = "opened"
    DUPLICATE_BEGIN = "duplicate_begin"
    CLOSED = "closed"
    ORPHAN_END = "orphan_end"


@dataclass(frozen=True, slots=True)
class Correlation:
    """Result of feeding one event to the correlator."""

    event: Event
    outcome: Outcome
    span: Span | None = None  # Set only when outcome is CLOSED
