"""Shared pytest fixtures and test helpers for hnstories tests."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

from hnstories.domain.items import Item
from hnstories.infrastructure.store import MemoryStore
from hnstories.services.persisted import PersistedValue
from hnstories.services.session import StoriesSession

HitFactory = Callable[..., dict[str, Any]]
ItemFactory = Callable[..., Item]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None]:
    """CLI invocations reconfigure the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Story data
# ---------------------------------------------------------------------------


def _hit(
    object_id: str,
    title: str = "A story",
    *,
    url: str | None = None,
    author: str = "pg",
    num_comments: int = 0,
    points: int = 1,
) -> dict[str, Any]:
    return {
        "objectID": object_id,
        "title": title,
        "url": url if url is not None else f"https://example.com/{object_id}",
        "author": author,
        "num_comments": num_comments,
        "points": points,
    }


@pytest.fixture
def make_hit() -> HitFactory:
    """Build a raw search API hit."""
    return _hit


@pytest.fixture
def make_item() -> ItemFactory:
    """Build a validated Item from hit-style arguments."""

    def factory(object_id: str, title: str = "A story", **kwargs: Any) -> Item:
        return Item.model_validate(_hit(object_id, title, **kwargs))

    return factory


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------


class FakeTransport:
    """Programmable in-process transport.

    ``responses`` maps a URL to a list of items or an exception to raise.
    ``gates`` maps a URL to an ``asyncio.Event`` the fetch waits on, so
    tests control when each response arrives.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[Item] | Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []
        self.default: list[Item] | Exception = []

    def respond(self, url: str, response: list[Item] | Exception) -> None:
        self.responses[url] = response

    def gate(self, url: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[url] = event
        return event

    async def fetch(self, url: str) -> list[Item]:
        self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        response = self.responses.get(url, self.default)
        if isinstance(response, Exception):
            raise response
        return list(response)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def session(transport: FakeTransport, store: MemoryStore) -> StoriesSession:
    """A server-mode session over the fake transport and a memory store."""
    return StoriesSession(transport, PersistedValue(store, "search", ""))


# ---------------------------------------------------------------------------
# CLI isolation
# ---------------------------------------------------------------------------


class ApiStub:
    """Request handler for ``httpx.MockTransport`` used by CLI tests.

    ``delay`` holds each response back, keeping a fetch in flight.
    """

    def __init__(self) -> None:
        self.hits: list[dict[str, Any]] = []
        self.status_code = 200
        self.requests: list[httpx.Request] = []
        self.delay = 0.0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "unavailable"})
        return httpx.Response(200, json={"hits": self.hits})


@pytest.fixture
def api(monkeypatch: pytest.MonkeyPatch) -> ApiStub:
    """Route every CLI HTTP request to an in-process stub."""
    import hnstories.commands._context as context_module

    stub = ApiStub()
    real_builder = context_module.build_async_client

    def build_with_stub(**kwargs: Any) -> httpx.AsyncClient:
        return real_builder(transport=httpx.MockTransport(stub), **kwargs)

    monkeypatch.setattr(context_module, "build_async_client", build_with_stub)
    return stub


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the store at a temp directory and isolate config discovery."""
    target = tmp_path / "data"
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("HNSTORIES_CONFIG", raising=False)
    monkeypatch.setenv("HNSTORIES_STORAGE__DATA_DIR", str(target))
    return target
