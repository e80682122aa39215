"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``hnstories.toml`` only
contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from hnstories.domain.filtering import ListMode
from hnstories.domain.query import DEFAULT_ENDPOINT
from hnstories.infrastructure.transport import DEFAULT_USER_AGENT


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    endpoint: str = Field(default=DEFAULT_ENDPOINT, min_length=8)
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)


class FetchConfig(BaseModel):
    """[fetch] section."""

    model_config = {"frozen": True}

    timeout_seconds: float = Field(default=10.0, gt=0)
    retries: int = Field(default=0, ge=0, le=10)
    backoff_seconds: float = Field(default=0.5, ge=0)
    discard_stale: bool = True


class ViewConfig(BaseModel):
    """[view] section."""

    model_config = {"frozen": True}

    mode: ListMode = ListMode.SERVER
    limit: int | None = Field(default=None, ge=1)


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".hnstories")
    search_key: str = Field(default="search", min_length=1)
    initial_term: str = ""

    @field_validator("data_dir", mode="after")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()
