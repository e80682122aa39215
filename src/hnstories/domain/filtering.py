"""Client-side narrowing of a fetched list."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from hnstories.domain.items import Item


class ListMode(StrEnum):
    """Where list narrowing happens.

    ``server``: the submitted query already filtered the list remotely.
    ``client``: the live typed term filters the fetched list locally.
    """

    SERVER = "server"
    CLIENT = "client"


def filter_by_title(items: Sequence[Item], term: str) -> list[Item]:
    """Items whose title contains *term*, ignoring case.

    Uses ``str.casefold`` so the match is Unicode case-insensitive.
    An empty term returns every item in order.
    """
    if not term:
        return list(items)
    needle = term.casefold()
    return [item for item in items if needle in item.title.casefold()]
