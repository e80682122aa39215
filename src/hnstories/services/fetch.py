"""FetchLifecycle — owns one ListState and applies actions in dispatch order.

Each fetch is tagged with a generation number. With ``discard_stale``
enabled (the default) only the outcome of the most recent fetch commits;
a late response from a superseded request is dropped. With it disabled,
whichever response arrives last overwrites the state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from hnstories.domain.items import Item
from hnstories.domain.lifecycle import (
    Action,
    BeginFetch,
    FetchFailed,
    FetchSucceeded,
    ListState,
    RemoveItem,
    is_valid_transition,
    reduce,
)

logger = logging.getLogger(__name__)

Listener = Callable[[ListState], None]


class FetchLifecycle:
    """Reducer-backed state holder for one session's story list."""

    def __init__(self, *, discard_stale: bool = True, state: ListState | None = None) -> None:
        self._state = state if state is not None else ListState()
        self._discard_stale = discard_stale
        self._generation = 0
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def generation(self) -> int:
        """The generation of the most recently started fetch (0 before any)."""
        return self._generation

    def dispatch(self, action: Action) -> ListState:
        """Apply *action* and notify listeners. Unknown actions raise."""
        previous = self._state
        self._state = reduce(previous, action)
        if not isinstance(action, RemoveItem) and not is_valid_transition(
            previous.status, self._state.status, allow_late=not self._discard_stale
        ):
            logger.warning(
                "Unexpected fetch transition %s -> %s on %s",
                previous.status,
                self._state.status,
                type(action).__name__,
            )
        logger.debug(
            "%s: %s -> %s (%d items)",
            type(action).__name__,
            previous.status,
            self._state.status,
            len(self._state.items),
        )
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every dispatch. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Generation-tagged fetch transitions ---

    def begin(self) -> int:
        """Enter loading and return the generation tag for this fetch."""
        self._generation += 1
        self.dispatch(BeginFetch())
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def succeed(self, generation: int, items: Sequence[Item]) -> bool:
        """Commit a successful payload. Returns False if dropped as stale."""
        if not self._accepts(generation):
            return False
        self.dispatch(FetchSucceeded(items=tuple(items)))
        return True

    def fail(self, generation: int, reason: str = "") -> bool:
        """Commit a failure. Returns False if dropped as stale."""
        if not self._accepts(generation):
            return False
        self.dispatch(FetchFailed(reason=reason))
        return True

    def remove(self, item_id: str) -> ListState:
        return self.dispatch(RemoveItem(item_id=item_id))

    def _accepts(self, generation: int) -> bool:
        if self.is_current(generation) or not self._discard_stale:
            return True
        logger.debug(
            "Dropping stale response for generation %d (current %d)",
            generation,
            self._generation,
        )
        return False
