"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from evtrace.config.loader import load_config
from evtrace.config.models import EvtraceConfig
from evtrace.core.errors import ConfigError


def config_overrides(
    *,
    identity: str | None,
    min_duration: int | None,
    report: bool,
    stream: bool,
    timeline: tuple[str, ...],
    no_color: bool,
    debug: bool,
) -> dict[str, Any]:
    """Map command-line options onto config sections.

    Only options the user actually set are included, so env vars and the YAML
    file still apply for everything else.
    """
    filters: dict[str, Any] = {}
    if identity is not None:
        filters["identity"] = identity
    if min_duration is not None:
        filters["min_duration_ms"] = min_duration

    output: dict[str, Any] = {}
    if report:
        output["report"] = True
    if stream:
        output["stream"] = True
    if timeline:
        output["timeline"] = list(timeline)
    if no_color:
        output["no_color"] = True

    overrides: dict[str, Any] = {}
    if filters:
        overrides["filters"] = filters
    if output:
        overrides["output"] = output
    if debug:
        overrides["debug"] = {"enabled": True}
    return overrides


def resolve_config(config_path: Path | None, **options: Any) -> EvtraceConfig:
    """Load config with CLI overrides, turning config problems into usage errors.

    Raises:
        click.UsageError: Conflicting modes, bad values or unreadable config file.
    """
    try:
        return load_config(config_path, **config_overrides(**options))
    except ConfigError as e:
        raise click.UsageError(e.message) from e
