"""Pipeline wiring cache, fetching, pagination, ranking and enrichment together."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

import structlog

from .config import DependentType, GlobalConfig, RunConfig
from .engine import (
    CachedFetcher,
    Dependent,
    EnrichmentPool,
    FetchClient,
    GitHubPageParser,
    PageParser,
    Paginator,
    rank,
)
from .errors import GhtodepError
from .infra import ResponseCache
from .ui import PageProgressReporter

REPOS_PER_PAGE = 30


@dataclass(slots=True)
class PipelineResult:
    dependents: list[Dependent] = field(default_factory=list)
    total_distinct_count: int = 0
    above_threshold_count: int = 0
    total_known_count: int = 0
    pages_visited: int = 0
    first_page_failed: bool = False
    error: GhtodepError | None = None


class DependentsPipeline:
    """Run one dependents lookup end to end."""

    def __init__(
        self,
        global_config: GlobalConfig | None = None,
        client: FetchClient | None = None,
        cache: ResponseCache | None = None,
        parser: PageParser | None = None,
        progress_factory: Callable[[], PageProgressReporter] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.global_config = global_config or GlobalConfig()
        fetch_cfg = self.global_config.fetch
        self._owns_client = client is None
        self.client = client or FetchClient(fetch_cfg, sleep=sleep)
        self.cache = cache or ResponseCache(
            self.global_config.cache.resolved_directory(), self.global_config.cache.expiry
        )
        self.parser = parser or GitHubPageParser()
        self.progress_factory = progress_factory
        self._sleep = sleep
        self.logger = structlog.get_logger("ghtodep.pipeline")

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "DependentsPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def run_config(self, config: RunConfig) -> PipelineResult:
        return self.run(
            owner=config.owner,
            repo=config.repo,
            top_n=config.top_n,
            max_pages=config.max_pages,
            min_stars=config.min_stars,
            dependent_type=config.dependent_type,
            fetch_descriptions=config.fetch_descriptions,
            use_cache=config.use_cache,
        )

    def run(
        self,
        owner: str,
        repo: str,
        top_n: int = 10,
        max_pages: int = 100,
        min_stars: float = 0.0,
        dependent_type: DependentType | str = DependentType.REPOSITORY,
        fetch_descriptions: bool = False,
        use_cache: bool = True,
    ) -> PipelineResult:
        fetch_cfg = self.global_config.fetch
        config = RunConfig(
            owner=owner,
            repo=repo,
            top_n=top_n,
            max_pages=max_pages,
            min_stars=min_stars,
            dependent_type=DependentType(dependent_type),
            fetch_descriptions=fetch_descriptions,
            use_cache=use_cache and self.global_config.cache.enabled,
        )
        log = self.logger.bind(owner=owner, repo=repo, dependent_type=config.dependent_type.value)
        fetcher = CachedFetcher(
            self.client,
            self.cache,
            use_cache=config.use_cache,
            max_retries=fetch_cfg.max_retries,
        )
        progress = self.progress_factory() if self.progress_factory else None
        paginator = Paginator(
            fetcher,
            self.parser,
            max_pages=config.max_pages,
            origin=fetch_cfg.base_url,
            politeness_delay=fetch_cfg.politeness_delay,
            sleep=self._sleep,
            listener=progress.on_page if progress else None,
        )
        start_url = config.listing_url(fetch_cfg.base_url)

        try:
            total_known = paginator.probe_total_count(start_url)
            if progress is not None:
                expected = min(total_known, config.max_pages * REPOS_PER_PAGE) if total_known else None
                progress.start(expected)
            pages = paginator.run(start_url)
        finally:
            if progress is not None:
                progress.close()

        if pages.first_page_failed:
            log.error("first_page_failed", url=start_url, error=str(pages.error))

        ranked = rank(pages.records, config.min_stars, config.top_n)
        log.info(
            "ranking_finished",
            raw=len(pages.records),
            distinct=ranked.total_distinct_count,
            above_threshold=ranked.above_threshold_count,
        )

        dependents = ranked.selected
        if config.fetch_descriptions and dependents:
            pool = EnrichmentPool(
                fetcher,
                self.parser,
                origin=fetch_cfg.base_url,
                concurrency=fetch_cfg.description_concurrency,
            )
            position = {dep.key: index for index, dep in enumerate(dependents)}
            dependents = sorted(pool.enrich(dependents), key=lambda dep: position[dep.key])

        return PipelineResult(
            dependents=dependents,
            total_distinct_count=ranked.total_distinct_count,
            above_threshold_count=ranked.above_threshold_count,
            total_known_count=total_known,
            pages_visited=pages.pages_visited,
            first_page_failed=pages.first_page_failed,
            error=pages.error,
        )


def run(
    owner: str,
    repo: str,
    top_n: int = 10,
    max_pages: int = 100,
    min_stars: float = 0.0,
    dependent_type: DependentType | str = DependentType.REPOSITORY,
    fetch_descriptions: bool = False,
    use_cache: bool = True,
    global_config: GlobalConfig | None = None,
) -> PipelineResult:
    with DependentsPipeline(global_config) as pipeline:
        return pipeline.run(
            owner,
            repo,
            top_n=top_n,
            max_pages=max_pages,
            min_stars=min_stars,
            dependent_type=dependent_type,
            fetch_descriptions=fetch_descriptions,
            use_cache=use_cache,
        )


__all__ = ["DependentsPipeline", "PipelineResult", "REPOS_PER_PAGE", "run"]
