"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides record/span builders shared across test packages.
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local evtrace package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of evtrace modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("evtrace"):
        del sys.modules[module_name]

BASE_TIME_MS = 1420070400000  # 2015-01-01T00:00:00.000Z


def make_record(
    ph: str = "b",
    *,
    name: str = "vmapi",
    op: str = "getvm",
    req_id: str = "req-1",
    hostname: str = "headnode",
    offset_ms: int = 0,
    **extra: Any,
) -> dict[str, Any]:
    """Build a bunyan-style begin/end record offset_ms after BASE_TIME_MS."""
    evt: dict[str, Any] = {"name": op, "ph": ph}
    if "seq" in extra:
        evt["seq"] = extra.pop("seq")
    record: dict[str, Any] = {
        "name": name,
        "hostname": hostname,
        "pid": 1234,
        "req_id": req_id,
        "time": BASE_TIME_MS + offset_ms,
        "evt": evt,
    }
    record.update(extra)
    return record


@pytest.fixture
def record() -> Callable[..., dict[str, Any]]:
    return make_record


@pytest.fixture
def nested_request_lines() -> list[str]:
    """One request: vmapi (0..100) wrapping vmapi.getvm (10..30)."""
    records = [
        make_record("b", op="vmapi", offset_ms=0),
        make_record("b", op="getvm", offset_ms=10),
        make_record("e", op="getvm", offset_ms=30),
        make_record("e", op="vmapi", offset_ms=100),
    ]
    return [json.dumps(r) for r in records]
