"""Bounded-concurrency description fetching for the selected dependents."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from threading import BoundedSemaphore
from typing import Sequence

import structlog

from ..config.models import GITHUB_BASE_URL
from .models import Dependent
from .paginator import PageFetcher
from .parser import PageParser

DEFAULT_CONCURRENCY = 5


class EnrichmentPool:
    """Attach a description to each dependent with at most ``concurrency`` fetches in flight."""

    def __init__(
        self,
        fetcher: PageFetcher,
        parser: PageParser,
        origin: str = GITHUB_BASE_URL,
        concurrency: int = DEFAULT_CONCURRENCY,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.fetcher = fetcher
        self.parser = parser
        self.origin = origin.rstrip("/")
        self.concurrency = concurrency
        self._permits = BoundedSemaphore(concurrency)
        self.logger = logger or structlog.get_logger("ghtodep.enrichment")

    def enrich(self, dependents: Sequence[Dependent]) -> list[Dependent]:
        """Return one enriched copy per input, in completion order."""

        if not dependents:
            return []
        results: list[Dependent] = []
        with ThreadPoolExecutor(
            max_workers=min(self.concurrency, len(dependents)),
            thread_name_prefix="ghtodep-enrich",
        ) as executor:
            futures = {executor.submit(self._describe, dep): dep for dep in dependents}
            for future in as_completed(futures):
                dep = futures[future]
                results.append(
                    Dependent(key=dep.key, stars_text=dep.stars_text, description=future.result())
                )
        return results

    def _describe(self, dependent: Dependent) -> str | None:
        url = f"{self.origin}/{dependent.key}"
        try:
            with self._permits:
                html = self.fetcher.fetch(url)
            return self.parser.parse_description(html)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("description_failed", repo=dependent.key, url=url, error=str(exc))
            return None


__all__ = ["DEFAULT_CONCURRENCY", "EnrichmentPool"]
