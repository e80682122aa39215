"""StoriesSession — one user's search session.

Wires the persisted search term, the query controller, the fetch lifecycle,
and the list view around a transport. The only write entry points are
:meth:`type_term`, :meth:`submit`, and :meth:`remove_item`.

Control flow::

    submit() -> QueryController.submit() -> load(query)
      -> lifecycle.begin()                        # loading
      -> await transport.fetch(query.url)         # suspends here only
      -> lifecycle.succeed() | lifecycle.fail()   # success | failure

Concurrent ``load`` calls are not cancelled; generation tagging in the
lifecycle decides whether a late response may still commit.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hnstories.domain.errors import TransportError
from hnstories.domain.filtering import ListMode
from hnstories.domain.query import DEFAULT_ENDPOINT, Query
from hnstories.services.controller import QueryController
from hnstories.services.fetch import FetchLifecycle
from hnstories.services.view import ListView

if TYPE_CHECKING:
    from hnstories.domain.items import Item
    from hnstories.domain.lifecycle import ListState
    from hnstories.infrastructure.transport import Transport
    from hnstories.services.controller import SubmitEvent
    from hnstories.services.persisted import PersistedValue

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class LoadOutcome:
    """How one load ended.

    ``committed`` is False when a newer fetch superseded this one and its
    outcome was dropped; ``state`` then belongs to the newer fetch.
    """

    query: Query
    state: ListState
    committed: bool


class StoriesSession:
    """Session-scoped state for searching and pruning a story list."""

    def __init__(
        self,
        transport: Transport,
        term: PersistedValue[str],
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        mode: ListMode = ListMode.SERVER,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
        discard_stale: bool = True,
    ) -> None:
        self._transport = transport
        self._timeout = timeout_seconds
        self.controller = QueryController(term, endpoint=endpoint)
        self.lifecycle = FetchLifecycle(discard_stale=discard_stale)
        self.view = ListView(self.lifecycle, self.controller, mode=mode)

    @property
    def state(self) -> ListState:
        return self.lifecycle.state

    def visible_items(self) -> list[Item]:
        return self.view.visible_items()

    # --- User commands ---

    def type_term(self, text: str) -> None:
        """Update (and persist) the typed term. Does not fetch."""
        self.controller.update_term(text)

    async def submit(self, event: SubmitEvent | None = None) -> LoadOutcome:
        """Submit the typed term and fetch the new query's results."""
        query = self.controller.submit(event)
        return await self.load(query)

    def remove_item(self, item_id: str) -> bool:
        """Remove the item with *item_id*. Returns False if it was not listed."""
        for item in self.lifecycle.state.items:
            if item.id == item_id:
                self.view.remove_item(item)
                return True
        return False

    # --- Fetching ---

    async def load_active(self) -> LoadOutcome:
        """Fetch the active query without a new submission, as on startup."""
        return await self.load(self.controller.active_query)

    async def load(self, query: Query) -> LoadOutcome:
        """Run one fetch for *query* through the lifecycle.

        Transport failures and timeouts are recorded as ``is_error`` and
        never raised.
        """
        generation = self.lifecycle.begin()
        logger.debug("Fetch %d started: %s", generation, query.url)
        try:
            items = await asyncio.wait_for(self._transport.fetch(query.url), self._timeout)
        except TransportError as exc:
            logger.warning("Fetch %d failed: %s", generation, exc.reason)
            committed = self.lifecycle.fail(generation, exc.reason)
        except TimeoutError:
            reason = f"Timed out after {self._timeout}s"
            logger.warning("Fetch %d failed: %s", generation, reason)
            committed = self.lifecycle.fail(generation, reason)
        else:
            committed = self.lifecycle.succeed(generation, items)
        return LoadOutcome(query=query, state=self.lifecycle.state, committed=committed)
