"""Error taxonomy shared by every layer."""

from __future__ import annotations


class HnStoriesError(Exception):
    """Base class for all hnstories errors."""


class TransportError(HnStoriesError):
    """The remote list could not be retrieved.

    Recovered by the session into ``is_error=True``; never raised past the
    lifecycle boundary.
    """

    def __init__(self, reason: str, *, url: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.url = url


class PayloadError(TransportError):
    """The transport answered, but the body is not a list of stories."""


class StoreError(HnStoriesError):
    """The key/value store rejected a read or write."""


class UnknownActionError(HnStoriesError, TypeError):
    """An object that is not a lifecycle action reached the reducer."""
