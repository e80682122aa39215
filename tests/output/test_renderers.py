"""Tests for operation-specific Rich renderers."""

from __future__ import annotations

from typing import Any

from hnstories.output.renderers import render_quiet, render_result
from hnstories.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _story(item_id: str, title: str = "A story", **extra: Any) -> dict[str, Any]:
    return {
        "id": item_id,
        "title": title,
        "url": f"https://example.com/{item_id}",
        "author": "pg",
        "comment_count": 3,
        "score": 7,
        **extra,
    }


def _search(*items: dict[str, Any], count: int | None = None, **data: Any) -> ServiceResult:
    payload = {
        "term": "redux",
        "url": "https://hn.algolia.com/api/v1/search?query=redux",
        "mode": "server",
        "status": "success",
        "items": list(items),
        "count": len(items) if count is None else count,
        **data,
    }
    return ServiceResult(ok=True, op="search", data=payload)


# ── Story lists ──────────────────────────────────────────────────────


class TestSearchRenderer:
    def test_table_columns(self) -> None:
        output = render_result(_search(_story("1", "Redux basics")))
        assert "OK" in output
        assert "search" in output
        for header in ("ID", "Title", "Author", "Comments", "Points"):
            assert header in output
        assert "Redux basics" in output
        assert "1 stories" in output

    def test_verbose_shows_urls(self) -> None:
        output = render_result(_search(_story("1")), verbose=True)
        assert "https://example.com/1" in output
        assert "URL" in output

    def test_url_hidden_by_default(self) -> None:
        output = render_result(_search(_story("1")))
        assert "https://example.com/1" not in output

    def test_truncated_list_says_so(self) -> None:
        output = render_result(_search(_story("1"), _story("2"), count=9))
        assert "9 stories (showing 2)" in output

    def test_empty_list(self) -> None:
        output = render_result(_search())
        assert "0 stories" in output
        assert "Title" not in output

    def test_list_op_uses_same_renderer(self) -> None:
        result = ServiceResult(ok=True, op="list", data=_search(_story("5", "Listed")).data)
        assert "Listed" in render_result(result)

    def test_loading_shows_indicator_not_table(self) -> None:
        result = _search(_story("1", "Stale story"), status="loading", message="Loading data ...")
        output = render_result(result)
        assert "Loading data ..." in output
        assert "Stale story" not in output
        assert "Title" not in output

    def test_loading_without_message(self) -> None:
        output = render_result(_search(status="loading"))
        assert "Loading data ..." in output
        assert "0 stories" not in output


class TestRemoveRenderer:
    def test_removed(self) -> None:
        data = {**_search(_story("2")).data, "removed": "1"}
        output = render_result(ServiceResult(ok=True, op="remove", data=data))
        assert "removed" in output
        assert "1 stories" in output

    def test_nothing_removed(self) -> None:
        data = {**_search().data, "removed": None}
        output = render_result(ServiceResult(ok=True, op="remove", data=data))
        assert "nothing" in output


class TestTermRenderer:
    def test_get_term(self) -> None:
        result = ServiceResult(
            ok=True, op="get_term", data={"term": "redux", "url": "https://x/?query=redux"}
        )
        output = render_result(result)
        assert "'redux'" in output
        assert "https://x/?query=redux" in output

    def test_set_term(self) -> None:
        result = ServiceResult(ok=True, op="set_term", data={"term": "", "can_submit": False})
        output = render_result(result)
        assert "can_submit: False" in output


# ── Errors ───────────────────────────────────────────────────────────


class TestErrorRenderer:
    def test_fetch_failed(self) -> None:
        result = ServiceResult(
            ok=False,
            op="search",
            error=ServiceError(code="FETCH_FAILED", message="Data could not be loaded."),
        )
        output = render_result(result)
        assert "ERROR" in output
        assert "Data could not be loaded." in output

    def test_stale_items_shown(self) -> None:
        result = ServiceResult(
            ok=False,
            op="search",
            data=_search(_story("1", "Old news")).data,
            error=ServiceError(code="FETCH_FAILED", message="Data could not be loaded."),
        )
        output = render_result(result)
        assert "stale" in output
        assert "Old news" in output

    def test_verbose_shows_detail(self) -> None:
        result = ServiceResult(
            ok=False,
            op="search",
            error=ServiceError(code="FETCH_FAILED", message="x", detail={"url": "https://x"}),
        )
        output = render_result(result, verbose=True)
        assert "detail" in output
        assert "https://x" in output

    def test_no_error_object(self) -> None:
        output = render_result(ServiceResult(ok=False, op="search"))
        assert "Unknown error" in output


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        result = ServiceResult(ok=True, op="stats", data={"total": 3, "ids": ["a", "b"]})
        output = render_result(result)
        assert "total: 3" in output
        assert '["a","b"]' in output


class TestQuiet:
    def test_ids_only(self) -> None:
        assert render_quiet(_search(_story("1"), _story("2"))) == "1\n2"

    def test_no_items(self) -> None:
        result = ServiceResult(ok=True, op="set_term", data={"term": "x"})
        assert render_quiet(result) == "OK: set_term"

    def test_error(self) -> None:
        result = ServiceResult(
            ok=False, op="search", error=ServiceError(code="FETCH_FAILED", message="nope")
        )
        assert render_quiet(result).startswith("ERROR: search")
