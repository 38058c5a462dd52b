"""HTTP fetching with exponential backoff and an on-disk cache in front of it."""

from __future__ import annotations

import time
from typing import Callable

import httpx
import structlog

from ..config import FetchConfig
from ..errors import CacheError, HttpStatusError, NetworkError, RateLimitedError
from ..infra import ResponseCache

TOO_MANY_REQUESTS = 429


class FetchClient:
    """GET pages with a browser user agent, backing off on 429 and request errors.

    Any ``httpx.RequestError`` (transport failures, redirect loops, undecodable
    bodies) is retried and finally surfaces as ``NetworkError``.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config or FetchConfig()
        self._sleep = sleep
        self.logger = logger or structlog.get_logger("ghtodep.fetcher")
        # The listing pages reject non-browser agents.
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FetchClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def fetch_with_retry(self, url: str, max_retries: int | None = None) -> str:
        budget = self.config.max_retries if max_retries is None else max_retries
        retries = 0
        delay = self.config.initial_backoff
        while True:
            try:
                response = self._client.get(url)
            except httpx.RequestError as exc:
                if retries >= budget:
                    raise NetworkError(url, str(exc)) from exc
                self.logger.warning(
                    "network_error_retry", url=url, attempt=retries + 1, delay=delay, error=str(exc)
                )
            else:
                if response.is_success:
                    return response.text
                if response.status_code != TOO_MANY_REQUESTS:
                    raise HttpStatusError(response.status_code, url)
                if retries >= budget:
                    raise RateLimitedError(retries, url)
                self.logger.warning("rate_limited_retry", url=url, attempt=retries + 1, delay=delay)
            self._sleep(delay)
            delay *= 2
            retries += 1


class CachedFetcher:
    """Serve fresh cache entries, otherwise fetch and store the body."""

    def __init__(
        self,
        client: FetchClient,
        cache: ResponseCache,
        use_cache: bool = True,
        max_retries: int | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.use_cache = use_cache
        self.max_retries = max_retries
        self.logger = logger or structlog.get_logger("ghtodep.cache")

    def fetch(self, url: str) -> str:
        path = self.cache.path_for(url)
        if self.use_cache and self.cache.is_valid(path):
            try:
                content = self.cache.read(path)
            except CacheError as exc:
                self.logger.warning("cache_read_failed", url=url, path=str(path), error=str(exc))
            else:
                self.logger.debug("cache_hit", url=url)
                return content

        body = self.client.fetch_with_retry(url, self.max_retries)
        if self.use_cache:
            try:
                self.cache.write(path, body)
            except CacheError as exc:
                self.logger.warning("cache_write_failed", url=url, path=str(path), error=str(exc))
        return body


__all__ = ["CachedFetcher", "FetchClient"]
