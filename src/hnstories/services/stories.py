"""StoriesService — CLI-facing operations over a StoriesSession."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from hnstories.domain.filtering import ListMode
from hnstories.services.result import ServiceError, ServiceResult
from hnstories.services.view import ERROR_MESSAGE

if TYPE_CHECKING:
    from hnstories.services.session import LoadOutcome, StoriesSession

events = structlog.get_logger("hnstories.search")


class StoriesService:
    """Search, show, and persist the search term for one session."""

    def __init__(self, session: StoriesSession) -> None:
        self._session = session

    @property
    def session(self) -> StoriesSession:
        return self._session

    async def search(
        self,
        term: str | None = None,
        *,
        mode: ListMode | str | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        """Submit *term* (or the persisted term) and report the resulting list.

        A failed fetch yields ``ok=False`` with code ``FETCH_FAILED``; any
        stale items still held by the session are reported alongside. A
        search overtaken by a newer one reports ``data["superseded"]``.
        """
        session = self._session
        if term is not None:
            session.type_term(term)
        if mode is not None:
            session.view.mode = ListMode(mode)

        started = time.perf_counter()
        outcome = await session.submit()
        return self._report(outcome, started=started, limit=limit)

    async def load_active(self, *, limit: int | None = None) -> ServiceResult:
        """Fetch the already active query, as a session does when it starts."""
        started = time.perf_counter()
        outcome = await self._session.load_active()
        return self._report(outcome, started=started, limit=limit)

    def _report(self, outcome: LoadOutcome, *, started: float, limit: int | None) -> ServiceResult:
        data = self.snapshot(limit=limit)
        events.debug(
            "search.complete",
            term=outcome.query.term,
            status=data["status"],
            count=data["count"],
            committed=outcome.committed,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )

        if not outcome.committed:
            return ServiceResult(
                ok=True,
                op="search",
                data={**data, "superseded": True},
                warnings=[f"Search for {outcome.query.term!r} was superseded by a newer search"],
            )
        if outcome.state.is_error:
            return ServiceResult(
                ok=False,
                op="search",
                data=data,
                error=ServiceError(
                    code="FETCH_FAILED",
                    message=ERROR_MESSAGE,
                    detail={"url": outcome.query.url},
                ),
            )
        return ServiceResult(ok=True, op="search", data=data)

    def remove(self, item_id: str) -> ServiceResult:
        """Drop one story from the current list."""
        removed = self._session.remove_item(item_id)
        data = self.snapshot()
        warnings = [] if removed else [f"No story with id {item_id} in the list"]
        return ServiceResult(
            ok=True,
            op="remove",
            data={**data, "removed": item_id if removed else None},
            warnings=warnings,
        )

    def list_items(self, *, limit: int | None = None) -> ServiceResult:
        """Report the current list without fetching."""
        data = self.snapshot(limit=limit)
        if self._session.state.is_error:
            return ServiceResult(
                ok=False,
                op="list",
                data=data,
                error=ServiceError(code="FETCH_FAILED", message=ERROR_MESSAGE),
            )
        return ServiceResult(ok=True, op="list", data=data)

    def get_term(self) -> ServiceResult:
        controller = self._session.controller
        return ServiceResult(
            ok=True,
            op="get_term",
            data={"term": controller.typed_term, "url": controller.active_query.url},
        )

    def set_term(self, text: str) -> ServiceResult:
        """Persist *text* as the search term without fetching."""
        self._session.type_term(text)
        controller = self._session.controller
        return ServiceResult(
            ok=True,
            op="set_term",
            data={"term": controller.typed_term, "can_submit": controller.can_submit},
        )

    def snapshot(self, *, limit: int | None = None) -> dict[str, Any]:
        """The session's visible list and status as plain data."""
        session = self._session
        query = session.controller.active_query
        visible = session.visible_items()
        shown = visible[:limit] if limit else visible
        return {
            "term": query.term,
            "url": query.url,
            "mode": str(session.view.mode),
            "status": str(session.state.status),
            "message": session.view.status_message(),
            "items": [item.to_dict() for item in shown],
            "count": len(visible),
        }
