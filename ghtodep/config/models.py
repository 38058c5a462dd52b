"""Pydantic models used across the ghtodep configuration flow."""

from __future__ import annotations

import os
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
GITHUB_BASE_URL = "https://github.com"


class DependentType(str, Enum):
    """Listing filter accepted by the dependents page."""

    REPOSITORY = "REPOSITORY"
    PACKAGE = "PACKAGE"


def default_cache_dir() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".cache"
    return base / "ghtodep"


class CacheConfig(BaseModel):
    """On-disk response cache settings."""

    enabled: bool = True
    directory: Path | None = None
    expiry_hours: float = 24.0

    @field_validator("directory", mode="before")
    @classmethod
    def _coerce_dir(cls, value: Any) -> Path | None:
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @field_validator("expiry_hours")
    @classmethod
    def _positive_expiry(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("expiry_hours must be > 0")
        return value

    @property
    def expiry(self) -> timedelta:
        return timedelta(hours=self.expiry_hours)

    def resolved_directory(self) -> Path:
        return self.directory or default_cache_dir()


class FetchConfig(BaseModel):
    """HTTP, retry and politeness controls."""

    base_url: str = GITHUB_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 20.0
    max_retries: int = 3
    initial_backoff: float = 1.0
    politeness_delay: float = 1.0
    description_concurrency: int = 5

    @model_validator(mode="after")
    def _validate_ranges(self) -> "FetchConfig":
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_backoff < 0:
            raise ValueError("initial_backoff must be >= 0")
        if self.politeness_delay < 0:
            raise ValueError("politeness_delay must be >= 0")
        if self.description_concurrency < 1:
            raise ValueError("description_concurrency must be >= 1")
        self.base_url = self.base_url.rstrip("/")
        return self


class GlobalConfig(BaseModel):
    """Settings shared by every run."""

    cache: CacheConfig = Field(default_factory=CacheConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    enable_progress_bar: bool = True


class RunConfig(BaseModel):
    """Parameters of one dependents lookup."""

    owner: str
    repo: str
    top_n: int = 10
    max_pages: int = 100
    min_stars: float = 0.0
    dependent_type: DependentType = DependentType.REPOSITORY
    fetch_descriptions: bool = False
    use_cache: bool = True
    output_format: Literal["text", "table", "json"] = "table"

    @model_validator(mode="after")
    def _validate_limits(self) -> "RunConfig":
        if not self.owner or not self.repo:
            raise ValueError("owner and repo cannot be empty")
        if self.top_n < 1:
            raise ValueError("top_n must be >= 1")
        if self.max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        return self

    def listing_url(self, base_url: str = GITHUB_BASE_URL) -> str:
        return (
            f"{base_url.rstrip('/')}/{self.owner}/{self.repo}/network/dependents"
            f"?dependent_type={self.dependent_type.value}"
        )


__all__ = [
    "CacheConfig",
    "DEFAULT_USER_AGENT",
    "DependentType",
    "FetchConfig",
    "GITHUB_BASE_URL",
    "GlobalConfig",
    "RunConfig",
    "default_cache_dir",
]
