"""Rich Console factory and theme for hnstories output.

Creates Console instances that render to a StringIO buffer, so renderers
return plain strings. In non-TTY environments (tests, pipes) Rich
automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

HN_THEME = Theme(
    {
        "hn.ok": "bold green",
        "hn.error": "bold red",
        "hn.warning": "bold yellow",
        "hn.op": "bold cyan",
        "hn.key": "dim",
        "hn.id": "bold blue",
        "hn.title": "bold",
        "hn.author": "cyan",
        "hn.url": "dim underline",
        "hn.score": "magenta",
        "hn.status.loading": "yellow",
        "hn.status.failure": "bold red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=HN_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
