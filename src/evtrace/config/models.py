"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (command-line options)
2. Environment variables (EVTRACE__SECTION__KEY)
3. YAML config (--config PATH or ~/.config/evtrace/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    EVTRACE__<SECTION>__<KEY>=<VALUE>

Examples:
    EVTRACE__LOGGING__LEVEL=DEBUG
    EVTRACE__FILTERS__MIN_DURATION_MS=100
    EVTRACE__OUTPUT__NO_COLOR=true
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from evtrace.config.constants import DEFAULT_HOST_WIDTH

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
OutputMode = Literal["raw", "stream", "report", "stream+report", "timeline"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        EVTRACE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Protocol warnings are emitted at WARNING.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class FilterConfig(BaseModel):
    """Span and request filters.

    Env vars:
        EVTRACE__FILTERS__IDENTITY: Regex restricting reported top-level identities
        EVTRACE__FILTERS__MIN_DURATION_MS: Hide spans/requests faster than this
    """

    identity: str | None = Field(
        default=None,
        description="Regular expression matched (re.search) against top-level identities.",
    )
    min_duration_ms: int | None = Field(
        default=None,
        description="Minimum elapsed time. Enables time-filtered mode: begin lines are "
        "suppressed in live output because duration is unknown until the end.",
    )

    @field_validator("identity")
    @classmethod
    def validate_identity(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regular expression {v!r}: {e}") from e
        return v

    @field_validator("min_duration_ms")
    @classmethod
    def validate_min_duration(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"Minimum duration must be >= 0, got {v}")
        return v

    @property
    def identity_pattern(self) -> re.Pattern[str] | None:
        return re.compile(self.identity) if self.identity else None


class OutputConfig(BaseModel):
    """Output configuration.

    Env vars:
        EVTRACE__OUTPUT__NO_COLOR: Disable ANSI styling
        EVTRACE__OUTPUT__HOST_WIDTH: Hostname column width in stream output
    """

    stream: bool = Field(default=False, description="Condensed one-line-per-event output.")
    report: bool = Field(default=False, description="Aggregate report at end of input.")
    timeline: list[str] = Field(
        default_factory=list,
        description="Request ids to render as timelines. Exclusive with stream/report.",
    )
    no_color: bool = Field(default=False, description="Disable colorized markers.")
    host_width: int = Field(default=DEFAULT_HOST_WIDTH, ge=1)

    @property
    def mode(self) -> OutputMode:
        if self.timeline:
            return "timeline"
        if self.stream and self.report:
            return "stream+report"
        if self.stream:
            return "stream"
        if self.report:
            return "report"
        return "raw"


class DebugConfig(BaseModel):
    """Debug configuration.

    Env vars:
        EVTRACE__DEBUG__ENABLED: Log every ignored/skipped record
    """

    enabled: bool = Field(
        default=False,
        description="Log skipped records and unmatched begins. Very verbose on real logs.",
    )


class EvtraceConfig(BaseModel):
    """Root configuration for evtrace."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    filters: FilterConfig = Field(default_factory=FilterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)
