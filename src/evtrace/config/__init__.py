"""Config module exports."""

from evtrace.config.loader import load_config, validate_output_modes
from evtrace.config.models import (
    DebugConfig,
    EvtraceConfig,
    FilterConfig,
    LoggingConfig,
    OutputConfig,
)

__all__ = [
    "load_config",
    "validate_output_modes",
    "EvtraceConfig",
    "DebugConfig",
    "FilterConfig",
    "LoggingConfig",
    "OutputConfig",
]
