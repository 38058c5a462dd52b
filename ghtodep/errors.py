"""Exception hierarchy shared by the fetch, cache and pipeline layers."""

from __future__ import annotations


class GhtodepError(Exception):
    """Base class for every error raised by ghtodep."""


class NetworkError(GhtodepError):
    """Transport-level failure (DNS, connection reset, timeout)."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Network error for {url}: {message}")
        self.url = url


class HttpStatusError(GhtodepError):
    """Non-2xx response other than 429."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP error {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class RateLimitedError(GhtodepError):
    """429 responses kept coming after the retry budget ran out."""

    def __init__(self, retries: int, url: str) -> None:
        super().__init__(f"Rate limited after {retries} retries: {url}")
        self.retries = retries
        self.url = url


class CacheError(GhtodepError):
    """Base class for on-disk cache failures."""


class CacheIOError(CacheError):
    """The cache file could not be read or written."""


class CacheNotFoundError(CacheError):
    """No cache file exists for the requested location."""


class CacheCorruptError(CacheError):
    """The cache file exists but cannot be decoded."""


class InvalidInputError(GhtodepError):
    """User supplied input (repository reference, options) is malformed."""


__all__ = [
    "CacheCorruptError",
    "CacheError",
    "CacheIOError",
    "CacheNotFoundError",
    "GhtodepError",
    "HttpStatusError",
    "InvalidInputError",
    "NetworkError",
    "RateLimitedError",
]
