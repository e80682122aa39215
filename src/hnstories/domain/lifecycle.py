"""Fetch lifecycle: list state, actions, and the reducer.

One remote retrieval moves through idle -> loading -> (success | failure).
Success and failure are terminal until the next fetch begins, which
re-enters loading. ``ListState`` only changes through :func:`reduce`.

Status is derived from the two flags plus whether a fetch has ever
completed, so the model never carries an independent status field that
could disagree with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator

from hnstories.domain.errors import UnknownActionError
from hnstories.domain.items import Item


class FetchStatus(StrEnum):
    """Observable status of the list retrieval."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


FETCH_TRANSITIONS: dict[str, list[str]] = {
    "idle": ["loading"],
    "loading": ["loading", "success", "failure"],
    "success": ["loading"],
    "failure": ["loading"],
}

# Edges only reachable when a superseded fetch is allowed to commit late.
LATE_COMMIT_TRANSITIONS: dict[str, list[str]] = {
    "success": ["success", "failure"],
    "failure": ["success", "failure"],
}


def is_valid_transition(current: str, target: str, *, allow_late: bool = False) -> bool:
    """Check if moving from *current* to *target* status is allowed.

    With *allow_late*, a response arriving after a newer fetch settled may
    also move a terminal status to another terminal status.
    """
    if target in FETCH_TRANSITIONS.get(current, []):
        return True
    return allow_late and target in LATE_COMMIT_TRANSITIONS.get(current, [])


class ListState(BaseModel):
    """The fetched list and its loading/error flags.

    INVARIANT: ``is_loading`` and ``is_error`` are never both true.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[Item, ...] = ()
    is_loading: bool = False
    is_error: bool = False
    fetched: bool = False

    @model_validator(mode="after")
    def _check_flags(self) -> ListState:
        if self.is_loading and self.is_error:
            msg = "ListState cannot be loading and errored at the same time"
            raise ValueError(msg)
        return self

    @property
    def status(self) -> FetchStatus:
        if self.is_loading:
            return FetchStatus.LOADING
        if self.is_error:
            return FetchStatus.FAILURE
        if self.fetched:
            return FetchStatus.SUCCESS
        return FetchStatus.IDLE


# --- Actions (closed set) ---


@dataclass(frozen=True)
class BeginFetch:
    """A new retrieval started."""


@dataclass(frozen=True)
class FetchSucceeded:
    """The retrieval resolved with a payload."""

    items: tuple[Item, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FetchFailed:
    """The retrieval was rejected."""

    reason: str = ""


@dataclass(frozen=True)
class RemoveItem:
    """Drop the item with ``item_id`` from the list."""

    item_id: str


Action = BeginFetch | FetchSucceeded | FetchFailed | RemoveItem


def reduce(state: ListState, action: Action) -> ListState:
    """Apply *action* to *state* and return the next state.

    Raises:
        UnknownActionError: If *action* is not one of the lifecycle actions.
    """
    match action:
        case BeginFetch():
            # Previous items stay visible while the refetch is in flight.
            return state.model_copy(update={"is_loading": True, "is_error": False})
        case FetchSucceeded(items=items):
            return state.model_copy(
                update={
                    "items": tuple(items),
                    "is_loading": False,
                    "is_error": False,
                    "fetched": True,
                }
            )
        case FetchFailed():
            return state.model_copy(update={"is_loading": False, "is_error": True})
        case RemoveItem(item_id=item_id):
            kept = tuple(item for item in state.items if item.id != item_id)
            if len(kept) == len(state.items):
                return state
            return state.model_copy(update={"items": kept})
        case _:
            msg = f"Unknown lifecycle action: {action!r}"
            raise UnknownActionError(msg)
