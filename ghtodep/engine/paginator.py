"""Sequential walk over the paginated dependents listing."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Protocol
from urllib.parse import urlparse

import structlog

from ..config.models import GITHUB_BASE_URL
from ..errors import GhtodepError
from .models import RawRecord
from .parser import PageParser


class PageFetcher(Protocol):
    def fetch(self, url: str) -> str:
        """Return the body of ``url``."""


# Called after each successfully parsed page with (pages_visited, records_so_far).
PageListener = Callable[[int, int], None]


def resolve_next_link(origin: str, link: str) -> str:
    """Turn a pagination href into an absolute URL on ``origin``."""

    if urlparse(link).scheme:
        return link
    origin = origin.rstrip("/")
    if link.startswith("/"):
        return f"{origin}{link}"
    return f"{origin}/{link}"


@dataclass(slots=True)
class PaginationState:
    current_url: str
    pages_visited: int = 0
    accumulated: list[RawRecord] = field(default_factory=list)


@dataclass(slots=True)
class PaginationResult:
    records: list[RawRecord]
    pages_visited: int
    first_page_failed: bool = False
    error: GhtodepError | None = None


class Paginator:
    """Fetch → parse → advance until the listing ends or ``max_pages`` is reached."""

    def __init__(
        self,
        fetcher: PageFetcher,
        parser: PageParser,
        max_pages: int,
        origin: str = GITHUB_BASE_URL,
        politeness_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        listener: PageListener | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        self.fetcher = fetcher
        self.parser = parser
        self.max_pages = max_pages
        self.origin = origin
        self.politeness_delay = politeness_delay
        self._sleep = sleep
        self.listener = listener
        self.logger = logger or structlog.get_logger("ghtodep.paginator")

    def probe_total_count(self, url: str) -> int:
        """Best-effort read of the displayed dependents total; 0 when unknown."""

        try:
            return self.parser.parse_total_count(self.fetcher.fetch(url))
        except Exception as exc:  # noqa: BLE001
            self.logger.info("total_count_unavailable", url=url, error=str(exc))
            return 0

    def run(self, start_url: str) -> PaginationResult:
        state = PaginationState(current_url=start_url)
        error: GhtodepError | None = None
        succeeded = 0
        while state.pages_visited < self.max_pages:
            state.pages_visited += 1
            try:
                html = self.fetcher.fetch(state.current_url)
            except GhtodepError as exc:
                self.logger.error(
                    "page_fetch_failed",
                    url=state.current_url,
                    page=state.pages_visited,
                    error=str(exc),
                )
                error = exc
                break
            succeeded += 1

            page = self.parser.parse_listing(html)
            if not page.records:
                self.logger.debug("empty_page", url=state.current_url, page=state.pages_visited)
                break
            state.accumulated.extend(page.records)
            if self.listener is not None:
                self.listener(state.pages_visited, len(state.accumulated))

            if not page.next_link:
                break
            state.current_url = resolve_next_link(self.origin, page.next_link)
            if state.pages_visited < self.max_pages:
                self._sleep(self.politeness_delay)

        self.logger.info(
            "pagination_finished",
            pages=state.pages_visited,
            records=len(state.accumulated),
        )
        return PaginationResult(
            records=state.accumulated,
            pages_visited=state.pages_visited,
            first_page_failed=succeeded == 0 and error is not None,
            error=error,
        )


__all__ = [
    "PageFetcher",
    "PageListener",
    "PaginationResult",
    "PaginationState",
    "Paginator",
    "resolve_next_link",
]
