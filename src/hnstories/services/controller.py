"""QueryController — typed term versus active query.

The typed term changes on every keystroke and is persisted; it never
starts a fetch by itself. ``submit`` snapshots it into a new active
:class:`Query`; the caller then fetches the new URL.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from hnstories.domain.query import DEFAULT_ENDPOINT, Query

if TYPE_CHECKING:
    from hnstories.services.persisted import PersistedValue


@dataclass
class SubmitEvent:
    """The UI action that triggered a submission."""

    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class QueryController:
    """Owns the search term and the last submitted query."""

    def __init__(self, term: PersistedValue[str], *, endpoint: str = DEFAULT_ENDPOINT) -> None:
        self._term = term
        self.endpoint = endpoint
        self._active = Query(endpoint=endpoint, term=term.value)

    @property
    def typed_term(self) -> str:
        return self._term.value

    @property
    def active_query(self) -> Query:
        return self._active

    @property
    def can_submit(self) -> bool:
        """False for an empty term. Callers use this to disable submission."""
        return bool(self._term.value)

    def update_term(self, text: str) -> None:
        self._term.set(text)

    def submit(self, event: SubmitEvent | None = None) -> Query:
        """Make the typed term the active query and return it.

        An empty term is accepted here; rejecting it is the caller's call.
        """
        if event is not None:
            event.prevent_default()
        self._active = Query(endpoint=self.endpoint, term=self._term.value)
        return self._active
