"""Entry point for ``python -m evtrace``."""

from evtrace.cli.main import cli

if __name__ == "__main__":
    cli()
