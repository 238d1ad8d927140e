"""Rich consoles for primary output (stdout) and user-facing messages (stderr).

Usage::

    from evtrace.core.console import get_console, status

    get_console().print(text)          # primary output
    status("No spans for request", style="error")  # ✗ No spans for request
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.text import Text

# Style prefixes
_STYLES = {
    "success": ("✓ ", "green"),
    "error": ("✗ ", "red"),
    "warning": ("! ", "yellow"),
    "info": ("  ", ""),
    "none": ("", ""),
}

_no_color = False


def set_no_color(no_color: bool) -> None:
    """Disable ANSI styling on every console handed out afterwards."""
    global _no_color
    _no_color = no_color


def get_console(*, stderr: bool = False) -> Console:
    """Build a console bound to the current stdout/stderr.

    A fresh console per call keeps output going to whatever sys.stdout is at
    the time (click's CliRunner swaps it during tests).
    """
    stream = sys.stderr if stderr else sys.stdout
    return Console(
        file=stream,
        no_color=_no_color,
        highlight=False,
        soft_wrap=True,
        emoji=False,
        markup=False,
    )


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix, color = _STYLES.get(style, ("", ""))
    text = Text(" " * indent)
    text.append(prefix, style=color or None)
    text.append(message)
    get_console(stderr=True).print(text)
