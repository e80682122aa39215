"""Search queries and URL construction."""

from __future__ import annotations

from urllib.parse import quote_plus

from pydantic import BaseModel

DEFAULT_ENDPOINT = "https://hn.algolia.com/api/v1/search?query="


def build_url(endpoint: str, term: str) -> str:
    """Append the url-encoded *term* to *endpoint*. *term* may be empty."""
    return f"{endpoint}{quote_plus(term)}"


class Query(BaseModel):
    """An immutable submitted search. A new submission builds a new Query."""

    model_config = {"frozen": True}

    endpoint: str = DEFAULT_ENDPOINT
    term: str = ""

    @property
    def url(self) -> str:
        return build_url(self.endpoint, self.term)
