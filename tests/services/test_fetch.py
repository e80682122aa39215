"""Tests for the FetchLifecycle service and generation tagging."""

from __future__ import annotations

import logging

import pytest

from hnstories.domain.errors import UnknownActionError
from hnstories.domain.lifecycle import BeginFetch, FetchStatus, FetchSucceeded, ListState
from hnstories.services.fetch import FetchLifecycle


class TestDispatch:
    def test_starts_idle(self) -> None:
        lifecycle = FetchLifecycle()
        assert lifecycle.state == ListState()
        assert lifecycle.generation == 0

    def test_applies_in_order(self, make_item) -> None:
        lifecycle = FetchLifecycle()
        gen = lifecycle.begin()
        assert lifecycle.state.status is FetchStatus.LOADING
        lifecycle.succeed(gen, [make_item("1"), make_item("2")])
        lifecycle.remove("1")
        assert [i.id for i in lifecycle.state.items] == ["2"]

    def test_unknown_action_raises(self) -> None:
        with pytest.raises(UnknownActionError):
            FetchLifecycle().dispatch({"type": "STORIES_FETCH_INIT"})  # type: ignore[arg-type]

    def test_listeners_notified(self) -> None:
        lifecycle = FetchLifecycle()
        seen: list[FetchStatus] = []
        unsubscribe = lifecycle.subscribe(lambda state: seen.append(state.status))
        gen = lifecycle.begin()
        lifecycle.fail(gen, "boom")
        unsubscribe()
        lifecycle.begin()
        assert seen == [FetchStatus.LOADING, FetchStatus.FAILURE]

    def test_unsubscribe_twice_is_safe(self) -> None:
        lifecycle = FetchLifecycle()
        unsubscribe = lifecycle.subscribe(lambda state: None)
        unsubscribe()
        unsubscribe()

    def test_dispatch_returns_new_state(self) -> None:
        lifecycle = FetchLifecycle()
        assert lifecycle.dispatch(BeginFetch()) is lifecycle.state


class TestGenerations:
    def test_begin_increments(self) -> None:
        lifecycle = FetchLifecycle()
        assert lifecycle.begin() == 1
        assert lifecycle.begin() == 2
        assert lifecycle.is_current(2)
        assert not lifecycle.is_current(1)

    def test_stale_success_dropped(self, make_item) -> None:
        lifecycle = FetchLifecycle()
        old = lifecycle.begin()
        new = lifecycle.begin()
        assert lifecycle.succeed(new, [make_item("new")]) is True
        assert lifecycle.succeed(old, [make_item("old")]) is False
        assert [i.id for i in lifecycle.state.items] == ["new"]

    def test_stale_failure_dropped(self, make_item) -> None:
        lifecycle = FetchLifecycle()
        old = lifecycle.begin()
        new = lifecycle.begin()
        lifecycle.succeed(new, [make_item("new")])
        assert lifecycle.fail(old, "late") is False
        assert lifecycle.state.is_error is False

    def test_stale_response_overwrites_when_not_discarding(self, make_item) -> None:
        # Known race kept for compatibility: no generation check.
        lifecycle = FetchLifecycle(discard_stale=False)
        old = lifecycle.begin()
        new = lifecycle.begin()
        lifecycle.succeed(new, [make_item("new")])
        assert lifecycle.succeed(old, [make_item("old")]) is True
        assert [i.id for i in lifecycle.state.items] == ["old"]


class TestTransitionCheck:
    def test_resolving_from_idle_warns(self, caplog, make_item) -> None:
        lifecycle = FetchLifecycle()
        with caplog.at_level(logging.WARNING, logger="hnstories.services.fetch"):
            lifecycle.dispatch(FetchSucceeded(items=(make_item("1"),)))
        assert "Unexpected fetch transition idle -> success" in caplog.text

    def test_normal_cycle_is_quiet(self, caplog, make_item) -> None:
        lifecycle = FetchLifecycle()
        with caplog.at_level(logging.WARNING, logger="hnstories.services.fetch"):
            gen = lifecycle.begin()
            lifecycle.succeed(gen, [make_item("1")])
            lifecycle.remove("1")
            gen = lifecycle.begin()
            lifecycle.fail(gen, "boom")
        assert caplog.records == []

    def test_late_commit_quiet_when_not_discarding(self, caplog, make_item) -> None:
        lifecycle = FetchLifecycle(discard_stale=False)
        with caplog.at_level(logging.WARNING, logger="hnstories.services.fetch"):
            old = lifecycle.begin()
            new = lifecycle.begin()
            lifecycle.succeed(new, [make_item("new")])
            lifecycle.fail(old, "late")
        assert caplog.records == []
        assert lifecycle.state.is_error is True
