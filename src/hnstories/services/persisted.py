"""PersistedValue — an in-memory value mirrored to a key/value store.

The store is a best-effort durability aid: the in-memory value is the
source of truth while the session runs, and store failures are logged
and swallowed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar, cast

from hnstories.domain.errors import StoreError

if TYPE_CHECKING:
    from hnstories.infrastructure.store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(raw: str) -> str:
    return raw


class PersistedValue(Generic[T]):
    """A value cell seeded from, and written through to, *store* under *key*.

    Args:
        store: The durable key/value store.
        key: Unique namespace for this value in the store.
        initial: Used when the store has no entry for *key*.
        serialize: Converts the value to the stored string. Defaults to ``str``.
        deserialize: Converts a stored string back. Defaults to identity,
            which is only correct when ``T`` is ``str``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        initial: T,
        *,
        serialize: Callable[[T], str] = str,
        deserialize: Callable[[str], T] | None = None,
    ) -> None:
        self._store = store
        self.key = key
        self._serialize = serialize
        self._deserialize = deserialize or cast(Callable[[str], T], _identity)
        self._value = self._seed(initial)

    def _seed(self, initial: T) -> T:
        try:
            raw = self._store.get(self.key)
        except StoreError:
            logger.warning("Could not read %r from store; using initial value", self.key, exc_info=True)
            return initial
        if raw is None:
            return initial
        return self._deserialize(raw)

    @property
    def value(self) -> T:
        return self._value

    def set(self, new_value: T) -> bool:
        """Replace the value and write it through to the store.

        Returns True when the store write committed. A failed write is
        logged and the new in-memory value is kept.
        """
        self._value = new_value
        try:
            self._store.set(self.key, self._serialize(new_value))
        except StoreError:
            logger.warning("Could not persist %r; keeping in-memory value", self.key, exc_info=True)
            return False
        return True
