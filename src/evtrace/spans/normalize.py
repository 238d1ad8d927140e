"""Normalize decoded log records into Events.

Records are bunyan-style objects. Only records carrying an ``evt`` object with a
begin/end phase marker and a ``req_id`` are recognized; everything else is noise
and yields ``None``.
"""

from __future__ import annotations

import json
import posixpath
from datetime import UTC, datetime
from typing import Any

from evtrace.config.constants import BEGIN_MARKERS, END_MARKERS, SEQUENCE_FIELDS
from evtrace.spans.models import Event, Phase


def derive_identity(module: str, operation: str, stack: str | None = None) -> str:
    """Derive the operation identity from the record's naming fields.

    Usage across services is inconsistent, so in priority order:
    an explicit call-stack path, the bare module name, an operation already
    prefixed by the module, otherwise ``module.operation``.

    Examples:
        ("vmapi", "vmapi") -> vmapi
        ("vmapi", "vmapi.getvm") -> vmapi.getvm
        ("vmapi", "getvm") -> vmapi.getvm
    """
    if stack:
        return stack
    if operation == module:
        return module
    if operation.startswith(module):
        return operation
    return f"{module}.{operation}"


def parse_time(value: Any) -> int | None:
    """Parse an ISO-8601 string or epoch-ms number into integer epoch ms."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return int(value)
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def _phase_from_marker(marker: Any) -> Phase | None:
    if not isinstance(marker, str):
        return None
    marker = marker.lower()
    if marker in BEGIN_MARKERS:
        return Phase.BEGIN
    if marker in END_MARKERS:
        return Phase.END
    return None


def _sequence(evt: dict[str, Any]) -> str | None:
    for name in SEQUENCE_FIELDS:
        value = evt.get(name)
        if value is not None and not isinstance(value, dict | list):
            return str(value)
    return None


def record_to_event(record: Any) -> Event | None:
    """Convert one decoded record to an Event, or None if it isn't one."""
    if not isinstance(record, dict):
        return None

    evt = record.get("evt")
    req_id = record.get("req_id")
    if not isinstance(evt, dict) or not req_id:
        return None

    phase = _phase_from_marker(evt.get("ph"))
    if phase is None:
        return None

    operation = evt.get("name")
    name = record.get("name")
    hostname = record.get("hostname")
    if not isinstance(operation, str) or not isinstance(name, str) or not hostname:
        return None

    time = parse_time(record.get("time"))
    if time is None:
        return None

    stack = record.get("stack")
    identity = derive_identity(
        posixpath.basename(name),
        operation,
        stack if isinstance(stack, str) else None,
    )
    return Event(
        identity=identity,
        req_id=str(req_id),
        hostname=str(hostname),
        time=time,
        phase=phase,
        sequence=_sequence(evt),
    )


def line_to_event(line: str) -> Event | None:
    """Decode one JSON line and normalize it. Blank or undecodable lines give None."""
    line = line.strip()
    if not line:
        return None
    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        return None
    return record_to_event(record)
