"""evtrace error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Input
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004
    CONFIG_CONFLICTING_MODES = 2005

    # Input (3xxx)
    INPUT_READ_ERROR = 3001

    # Internal (9xxx)
    UNHANDLED_PHASE = 9003


@dataclass(frozen=True, slots=True)
class EvtraceError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(EvtraceError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def conflicting_modes(cls, *modes: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_CONFLICTING_MODES,
            message=f"Cannot combine output modes: {', '.join(modes)}",
            details={"modes": list(modes)},
        )


class InputError(EvtraceError):
    """Errors reading the input stream itself (not malformed records)."""

    @classmethod
    def read_failed(cls, source: str, reason: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_READ_ERROR,
            message=f"Failed to read {source}: {reason}",
            details={"source": source, "reason": reason},
        )


class InternalError(EvtraceError):
    """Internal/unexpected errors. These indicate a logic defect, not bad input."""

    @classmethod
    def unhandled_phase(cls, phase: Any) -> "InternalError":
        return cls(
            code=ErrorCode.UNHANDLED_PHASE,
            message=f"Unhandled phase: {phase!r}",
            details={"phase": repr(phase)},
        )
