"""Remote list retrieval over HTTP.

A transport is anything with ``async fetch(url) -> list[Item]`` that raises
:class:`TransportError` when the list cannot be produced. The HTTP
implementation validates the payload here, at the boundary, so a body with
the wrong shape fails the fetch rather than a later render.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from pydantic import ValidationError

from hnstories.domain.errors import PayloadError, TransportError
from hnstories.domain.items import Item, items_from_hits

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "hnstories/0.1 (+https://github.com/hnstories/hnstories)"


class Transport(Protocol):
    """Fetch a list of items from *url*."""

    async def fetch(self, url: str) -> list[Item]: ...


def build_async_client(
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout_seconds: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with the client's standard headers and timeout.

    *transport* lets tests plug in ``httpx.MockTransport``.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": user_agent, "Accept": "application/json"},
        transport=transport,
    )


def parse_payload(body: Any, *, url: str | None = None) -> list[Item]:
    """Extract and validate the ``hits`` array of a search response.

    Raises:
        PayloadError: If the body has no ``hits`` list or a hit is malformed.
    """
    if not isinstance(body, dict):
        raise PayloadError("Response body is not a JSON object", url=url)
    hits = body.get("hits")
    if not isinstance(hits, list):
        raise PayloadError("Response body has no 'hits' list", url=url)
    if not all(isinstance(hit, dict) for hit in hits):
        raise PayloadError("Response 'hits' contains non-object entries", url=url)
    try:
        return items_from_hits(hits)
    except ValidationError as exc:
        msg = f"Malformed story record: {exc.error_count()} validation error(s)"
        raise PayloadError(msg, url=url) from exc


class OfflineTransport:
    """Transport for sessions that only read or write the search term.

    Any fetch fails with :class:`TransportError`.
    """

    async def fetch(self, url: str) -> list[Item]:
        raise TransportError("No transport configured for this session", url=url)


class HttpTransport:
    """Search API transport backed by an ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> list[Item]:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"HTTP {exc.response.status_code} from search API"
            raise TransportError(msg, url=url) from exc
        except httpx.HTTPError as exc:
            msg = f"Request failed: {exc.__class__.__name__}"
            raise TransportError(msg, url=url) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise PayloadError("Response body is not valid JSON", url=url) from exc

        items = parse_payload(body, url=url)
        logger.debug("Fetched %d items from %s", len(items), url)
        return items

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class RetryingTransport:
    """Retry a transport's :class:`TransportError` with exponential backoff.

    Sits outside the lifecycle: callers see one outcome per ``fetch`` no
    matter how many attempts were made underneath.
    """

    def __init__(
        self,
        inner: Transport,
        *,
        retries: int = 0,
        backoff_seconds: float = 0.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._inner = inner
        self._retries = max(0, retries)
        self._backoff = backoff_seconds
        self._sleep = sleep

    async def fetch(self, url: str) -> list[Item]:
        attempt = 0
        while True:
            try:
                return await self._inner.fetch(url)
            except PayloadError:
                # The same URL will return the same malformed body.
                raise
            except TransportError as exc:
                if attempt >= self._retries:
                    raise
                delay = self._backoff * (2**attempt)
                logger.info(
                    "Fetch attempt %d failed (%s); retrying in %.2fs",
                    attempt + 1,
                    exc.reason,
                    delay,
                )
                attempt += 1
                await self._sleep(delay)
