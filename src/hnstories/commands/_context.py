"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Opens the store lazily, builds a session per
invocation, and centralizes result emission (stdout/stderr routing +
exit codes).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import click

from hnstories.domain.errors import StoreError
from hnstories.infrastructure.store import MemoryStore, SqliteStore
from hnstories.infrastructure.transport import (
    HttpTransport,
    OfflineTransport,
    RetryingTransport,
    Transport,
    build_async_client,
)
from hnstories.output.formatters import OutputSettings, format_result
from hnstories.services.persisted import PersistedValue
from hnstories.services.session import StoriesSession
from hnstories.services.stories import StoriesService

if TYPE_CHECKING:
    from hnstories.config.settings import HnSettings
    from hnstories.infrastructure.store import KeyValueStore
    from hnstories.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is opened on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: HnSettings) -> None:
        self.settings = settings
        self._store: KeyValueStore | None = None

        from hnstories.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> KeyValueStore:
        """The search-term store (created lazily on first access).

        Falls back to an in-memory store when the database cannot be
        opened; persistence is best-effort.
        """
        if self._store is None:
            if self.settings.no_persist:
                self._store = MemoryStore()
            else:
                try:
                    self._store = SqliteStore.open(self.settings.storage.data_dir)
                except StoreError:
                    logger.warning("Store unavailable; search term will not persist", exc_info=True)
                    self._store = MemoryStore()
        return self._store

    def close(self) -> None:
        """Release the database engine, if one was opened."""
        if isinstance(self._store, SqliteStore):
            self._store.close()

    def search_term(self) -> PersistedValue[str]:
        storage = self.settings.storage
        return PersistedValue(self.store, storage.search_key, storage.initial_term)

    def build_session(self, transport: Transport) -> StoriesSession:
        fetch = self.settings.fetch
        return StoriesSession(
            transport,
            self.search_term(),
            endpoint=self.settings.api.endpoint,
            mode=self.settings.view.mode,
            timeout_seconds=fetch.timeout_seconds,
            discard_stale=fetch.discard_stale,
        )

    def local(self) -> StoriesService:
        """A StoriesService over the store alone; it opens no HTTP client."""
        return StoriesService(self.build_session(OfflineTransport()))

    @asynccontextmanager
    async def stories(self) -> AsyncIterator[StoriesService]:
        """Yield a StoriesService over a fresh HTTP transport, closing it after."""
        api, fetch = self.settings.api, self.settings.fetch
        client = build_async_client(
            user_agent=api.user_agent,
            timeout_seconds=fetch.timeout_seconds,
        )
        async with HttpTransport(client) as http:
            transport: Transport = http
            if fetch.retries:
                transport = RetryingTransport(
                    http,
                    retries=fetch.retries,
                    backoff_seconds=fetch.backoff_seconds,
                )
            yield StoriesService(self.build_session(transport))

    def run(self, operation: Callable[[StoriesService], Awaitable[ServiceResult]]) -> ServiceResult:
        """Run *operation* against a StoriesService on a new event loop."""

        async def _run() -> ServiceResult:
            async with self.stories() as svc:
                return await operation(svc)

        return asyncio.run(_run())

    def emit(self, result: ServiceResult, *, exit_on_error: bool = True) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr and exits with code 1, unless
          *exit_on_error* is False (interactive use).
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            if exit_on_error:
                raise SystemExit(1)
