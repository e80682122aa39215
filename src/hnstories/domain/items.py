"""Story items as returned by the search API.

The API record shape is ``{objectID, title, url, author, num_comments,
points}``. Records are validated into :class:`Item` at the transport
boundary so a malformed payload fails the fetch instead of surfacing
later during rendering.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    """A single story. Identity is ``id``."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    id: str = Field(alias="objectID", min_length=1)
    title: str = ""
    url: str = ""
    author: str = ""
    comment_count: int = Field(default=0, ge=0, alias="num_comments")
    score: int = Field(default=0, alias="points")

    @field_validator("title", "url", "author", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        # Ask HN posts and comments carry null url/title.
        return "" if value is None else value

    @field_validator("comment_count", "score", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    def to_dict(self) -> dict[str, Any]:
        """Serialize with python-side field names (``comment_count``, ``score``)."""
        return self.model_dump(by_alias=False)


def items_from_hits(hits: Iterable[dict[str, Any]]) -> list[Item]:
    """Validate raw API hits into items, preserving server order.

    Raises:
        pydantic.ValidationError: If any record is structurally incompatible.
    """
    return [Item.model_validate(hit) for hit in hits]
