"""Command: show or set the saved search term."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from hnstories.commands._base import HnCommand

if TYPE_CHECKING:
    from hnstories.commands._context import AppContext


@click.command(
    cls=HnCommand,
    examples="""\
  hnstories term
  hnstories term "machine learning"
  hnstories term ''                     # clear it""",
)
@click.argument("text", required=False)
@click.pass_obj
def term(app: AppContext, text: str | None) -> None:
    """Show the saved search term, or save TEXT without searching."""
    svc = app.local()
    app.emit(svc.get_term() if text is None else svc.set_term(text))
