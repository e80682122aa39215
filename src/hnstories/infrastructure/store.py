"""Durable key/value stores backing persisted values.

Stores expose two operations, ``get(key) -> str | None`` and
``set(key, value)``. Failures are raised as :class:`StoreError`; deciding
whether a failure matters is the caller's job.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from hnstories.domain.errors import StoreError
from hnstories.infrastructure.database.engine import init_database
from hnstories.infrastructure.database.schema import kv_store

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Anything with string get/set semantics."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store. Used by tests and ``--no-persist``."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqliteStore:
    """Key/value entries in the ``kv_store`` table of ``hnstories.db``."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, data_dir: Path) -> SqliteStore:
        """Initialize the database under *data_dir* and return a store on it."""
        try:
            engine = init_database(data_dir)
        except (SQLAlchemyError, OSError) as exc:
            msg = f"Cannot open store in {data_dir}: {exc}"
            raise StoreError(msg) from exc
        return cls(engine)

    def get(self, key: str) -> str | None:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(select(kv_store.c.value).where(kv_store.c.key == key)).first()
        except SQLAlchemyError as exc:
            msg = f"Cannot read {key!r}: {exc}"
            raise StoreError(msg) from exc
        return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        modified = datetime.now(UTC).isoformat()
        stmt = insert(kv_store).values(key=key, value=value, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_store.c.key],
            set_={"value": stmt.excluded.value, "modified": stmt.excluded.modified},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            msg = f"Cannot write {key!r}: {exc}"
            raise StoreError(msg) from exc
        logger.debug("Stored %s", key)

    def close(self) -> None:
        """Release the engine's pooled connections."""
        self._engine.dispose()
