"""Command: interactive browse session.

Loads the saved query on start, then reads one command per line. Fetches
run in the background, so typing continues while a request is in flight;
``wait`` blocks until outstanding fetches resolve.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

import click

from hnstories.commands._base import HnCommand
from hnstories.domain.filtering import ListMode
from hnstories.services.view import LOADING_MESSAGE

if TYPE_CHECKING:
    from hnstories.commands._context import AppContext
    from hnstories.domain.lifecycle import ListState
    from hnstories.services.result import ServiceResult
    from hnstories.services.stories import StoriesService

BROWSE_HELP = """\
  type <text>     edit the search term (saved, not submitted)
  submit          search for the current term
  remove <id>     drop a story from the list
  list            show the current list
  mode <m>        server | client
  wait            wait for in-flight searches
  term            show the current term
  help            this message
  quit            leave"""


class BrowseLoop:
    """Line-oriented driver for one StoriesService."""

    def __init__(self, app: AppContext, svc: StoriesService, *, limit: int | None = None) -> None:
        self._app = app
        self._svc = svc
        self._limit = limit
        self._pending: set[asyncio.Task[ServiceResult]] = set()
        self._was_loading = False
        self._unsubscribe = svc.session.lifecycle.subscribe(self._on_state)

    def _emit(self, result: ServiceResult) -> None:
        self._app.emit(result, exit_on_error=False)

    def _on_state(self, state: ListState) -> None:
        if state.is_loading and not self._was_loading:
            click.echo(LOADING_MESSAGE)
        self._was_loading = state.is_loading

    def _on_search_done(self, task: asyncio.Task[ServiceResult]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        result = task.result()
        # A newer search owns the list now and reports it when it settles.
        if not result.data.get("superseded"):
            self._emit(result)

    def _start(self, search: Coroutine[Any, Any, ServiceResult]) -> None:
        task = asyncio.get_running_loop().create_task(search)
        self._pending.add(task)
        task.add_done_callback(self._on_search_done)

    def submit(self) -> None:
        if not self._svc.session.controller.can_submit:
            click.echo("Enter a search term first (type <text>).", err=True)
            return
        self._start(self._svc.search(limit=self._limit))

    async def wait(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the loop should stop."""
        command, _, arg = line.strip().partition(" ")
        arg = arg.strip()
        session = self._svc.session

        match command.lower():
            case "":
                pass
            case "quit" | "exit":
                return False
            case "type":
                self._svc.set_term(arg)
                if session.view.mode is ListMode.CLIENT:
                    self._emit(self._svc.list_items(limit=self._limit))
            case "submit":
                self.submit()
            case "remove":
                if not arg:
                    click.echo("Usage: remove <id>", err=True)
                else:
                    self._emit(self._svc.remove(arg))
            case "list":
                self._emit(self._svc.list_items(limit=self._limit))
            case "mode":
                try:
                    session.view.mode = ListMode(arg)
                except ValueError:
                    click.echo(f"Unknown mode {arg!r}; use server or client.", err=True)
                else:
                    click.echo(f"mode: {session.view.mode}")
            case "wait":
                await self.wait()
            case "term":
                self._emit(self._svc.get_term())
            case "help" | "?":
                click.echo(BROWSE_HELP)
            case _:
                click.echo(f"Unknown command {command!r}; try 'help'.", err=True)
        return True

    async def run(self) -> ServiceResult:
        """Load the active query, then read commands until quit or EOF."""
        click.echo(BROWSE_HELP)
        self._start(self._svc.load_active(limit=self._limit))
        while True:
            try:
                line = await asyncio.to_thread(click.prompt, "hn", default="", show_default=False)
            except (click.Abort, EOFError):
                break
            if not await self.handle(line):
                break
        await self.wait()
        self._unsubscribe()
        return self._svc.list_items(limit=self._limit)


@click.command(
    cls=HnCommand,
    examples="""\
  hnstories browse
  hnstories --no-persist browse --limit 10""",
)
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Max rows shown.")
@click.pass_obj
def browse(app: AppContext, limit: int | None) -> None:
    """Interactive search session: type, submit, remove, list."""
    limit = limit or app.settings.view.limit

    async def _browse(svc: StoriesService) -> ServiceResult:
        return await BrowseLoop(app, svc, limit=limit).run()

    app.run(_browse)
