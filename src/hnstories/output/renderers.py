"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from hnstories.output.console import create_console, get_output
from hnstories.services.view import LOADING_MESSAGE

if TYPE_CHECKING:
    from rich.console import Console

    from hnstories.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: story IDs only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if item.get("id"))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="hn.ok")
    op = Text(f"  {result.op}", style="hn.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="hn.key")
    if key == "url":
        v = Text(str(value), style="hn.url")
    elif key == "term":
        v = Text(repr(value), style="hn.title")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def story_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table of stories in list order."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="hn.id", no_wrap=True)
    table.add_column("Title", style="hn.title")
    table.add_column("Author", style="hn.author")
    table.add_column("Comments", justify="right")
    table.add_column("Points", style="hn.score", justify="right")
    if verbose:
        table.add_column("URL", style="hn.url")

    for item in items:
        row = [
            str(item.get("id", "")),
            str(item.get("title", "")),
            str(item.get("author", "")),
            str(item.get("comment_count", 0)),
            str(item.get("score", 0)),
        ]
        if verbose:
            row.append(str(item.get("url", "")))
        table.add_row(*row)
    return table


def _render_items(console: Console, data: dict[str, Any], *, verbose: bool) -> None:
    items = data.get("items", [])
    if items:
        console.print(story_table(items, verbose=verbose))
    count = data.get("count", len(items))
    shown = len(items)
    suffix = f" (showing {shown})" if shown < count else ""
    console.print(f"\n{count} stories{suffix}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="hn.error")
    op = Text(f"  {result.op}", style="hn.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")

    # Stale data from an earlier success stays visible under the error.
    if result.data.get("items"):
        console.print(Text("  showing stale results:", style="hn.warning"))
        _render_items(console, result.data, verbose=verbose)


# ── Story renderers ───────────────────────────────────────────────────


def _render_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "term", d.get("term", ""))
    _field(console, "mode", d.get("mode", ""))
    if verbose:
        _field(console, "url", d.get("url", ""))
    console.print()
    if d.get("status") == "loading":
        # The indicator replaces the list until the fetch settles.
        console.print(Text(d.get("message") or LOADING_MESSAGE, style="hn.status.loading"))
        return
    _render_items(console, d, verbose=verbose)


def _render_remove(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "removed", d.get("removed") or "nothing")
    console.print()
    _render_items(console, d, verbose=verbose)


def _render_term(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("term", "url", "can_submit"):
        if key in result.data:
            _field(console, key, result.data[key])


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "search": _render_search,
    "list": _render_search,
    "remove": _render_remove,
    "get_term": _render_term,
    "set_term": _render_term,
}
