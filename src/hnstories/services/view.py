"""ListView — the displayed list derived from lifecycle state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hnstories.domain.filtering import ListMode, filter_by_title

if TYPE_CHECKING:
    from hnstories.domain.items import Item
    from hnstories.services.controller import QueryController
    from hnstories.services.fetch import FetchLifecycle

ERROR_MESSAGE = "Data could not be loaded."
LOADING_MESSAGE = "Loading data ..."


class ListView:
    """Pure derivation over the lifecycle's items.

    In ``server`` mode the list is shown as fetched. In ``client`` mode it is
    narrowed by the live typed term on every call; nothing is cached.
    """

    def __init__(
        self,
        lifecycle: FetchLifecycle,
        controller: QueryController,
        *,
        mode: ListMode = ListMode.SERVER,
    ) -> None:
        self._lifecycle = lifecycle
        self._controller = controller
        self.mode = ListMode(mode)

    def visible_items(self) -> list[Item]:
        items = self._lifecycle.state.items
        if self.mode is ListMode.CLIENT:
            return filter_by_title(items, self._controller.typed_term)
        return list(items)

    def remove_item(self, item: Item) -> None:
        self._lifecycle.remove(item.id)

    def status_message(self) -> str | None:
        state = self._lifecycle.state
        if state.is_error:
            return ERROR_MESSAGE
        if state.is_loading:
            return LOADING_MESSAGE
        return None
