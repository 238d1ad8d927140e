"""evtrace CLI - correlate begin/end log events into spans."""

from pathlib import Path
from typing import IO

import click
import structlog

from evtrace.cli.utils import resolve_config
from evtrace.config.models import EvtraceConfig
from evtrace.core.console import get_console, set_no_color, status
from evtrace.core.errors import InputError, InternalError
from evtrace.core.logging import configure_logging, get_log_file_path
from evtrace.report.aggregate import build_report
from evtrace.report.render import render_report
from evtrace.spans.correlator import SpanCorrelator
from evtrace.spans.ops import correlate_lines
from evtrace.timeline.ops import build_timeline, render_timeline

logger = structlog.get_logger()


def _print_report(correlator: SpanCorrelator, config: EvtraceConfig) -> None:
    filters = config.filters
    report = build_report(
        correlator.request_spans,
        identity_pattern=filters.identity_pattern,
        min_duration_ms=filters.min_duration_ms,
    )
    console = get_console()
    for line in render_report(report, min_duration_ms=filters.min_duration_ms):
        console.print(line)


def _print_timelines(correlator: SpanCorrelator, req_ids: list[str]) -> None:
    console = get_console()
    printed = 0
    for req_id in req_ids:
        spans = correlator.spans_for(req_id)
        if not spans:
            logger.debug("timeline_request_not_found", req_id=req_id)
            status(f"No spans recorded for request {req_id}", style="error")
            continue
        if printed:
            console.print()
        for line in render_timeline(build_timeline(spans)):
            console.print(line)
        printed += 1


@click.command()
@click.version_option(version="0.1.0", prog_name="evtrace")
@click.argument("input_file", default="-", type=click.File("r", errors="replace"))
@click.option(
    "-i", "--identity", metavar="REGEX", help="Only report top-level identities matching REGEX"
)
@click.option(
    "-d",
    "--min-duration",
    type=click.IntRange(min=0),
    metavar="MS",
    help="Hide spans and requests faster than MS milliseconds",
)
@click.option("-r", "--report", is_flag=True, help="Print an aggregate report at end of input")
@click.option("-s", "--stream", is_flag=True, help="Print one condensed line per event")
@click.option(
    "-t",
    "--timeline",
    multiple=True,
    metavar="REQ_ID",
    help="Print the timeline of a request (repeatable)",
)
@click.option("--no-color", is_flag=True, help="Disable colorized output")
@click.option("--debug", is_flag=True, help="Log skipped records and unmatched begins")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML config file",
)
def cli(
    input_file: IO[str],
    identity: str | None,
    min_duration: int | None,
    report: bool,
    stream: bool,
    timeline: tuple[str, ...],
    no_color: bool,
    debug: bool,
    verbose: bool,
    config_path: Path | None,
) -> None:
    """Correlate begin/end events from INPUT_FILE (default: stdin).

    Without --stream, --report or --timeline every matched event is dumped
    as one JSON object per line.
    """
    if timeline and (report or stream):
        raise click.UsageError("--timeline cannot be combined with --report or --stream")

    config = resolve_config(
        config_path,
        identity=identity,
        min_duration=min_duration,
        report=report,
        stream=stream,
        timeline=timeline,
        no_color=no_color,
        debug=debug,
    )

    logging_config = config.logging
    if verbose or config.debug.enabled:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    set_no_color(config.output.no_color)

    console = get_console()
    try:
        correlator = correlate_lines(
            input_file,
            config,
            emit=console.print,
            source=getattr(input_file, "name", "<stdin>"),
        )
    except (InputError, InternalError) as e:
        logger.error("correlation_failed", **e.to_dict())
        message = str(e)
        if log_path := get_log_file_path():
            message += f"\nSee {log_path} for details"
        raise click.ClickException(message) from e

    mode = config.output.mode
    if mode in ("report", "stream+report"):
        _print_report(correlator, config)
    elif mode == "timeline":
        _print_timelines(correlator, config.output.timeline)


if __name__ == "__main__":
    cli()
