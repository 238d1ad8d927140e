"""Core module exports."""

from evtrace.core.errors import (
    ConfigError,
    ErrorCode,
    EvtraceError,
    InputError,
    InternalError,
)
from evtrace.core.logging import configure_logging, get_log_file_path

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "EvtraceError",
    "InputError",
    "InternalError",
    # Logging
    "configure_logging",
    "get_log_file_path",
]
