"""Command: one-shot search against the search API."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from hnstories.commands._base import HnCommand
from hnstories.domain.filtering import ListMode

if TYPE_CHECKING:
    from hnstories.commands._context import AppContext
    from hnstories.services.result import ServiceResult
    from hnstories.services.stories import StoriesService


@click.command(
    cls=HnCommand,
    examples="""\
  hnstories search redux
  hnstories search                      # re-run the saved term
  hnstories search react --mode client  # narrow locally by title
  hnstories -v search "rust async" --limit 5
  hnstories --json search python""",
)
@click.argument("term", required=False)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in ListMode]),
    default=None,
    help="Server-side query filtering or client-side title filtering.",
)
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Max rows shown.")
@click.pass_obj
def search(app: AppContext, term: str | None, mode: str | None, limit: int | None) -> None:
    """Search stories for TERM (default: the saved search term)."""
    limit = limit or app.settings.view.limit

    async def _search(svc: StoriesService) -> ServiceResult:
        return await svc.search(term, mode=mode, limit=limit)

    app.emit(app.run(_search))
