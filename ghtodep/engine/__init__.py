"""Engine components orchestrating fetch → paginate → rank → enrich."""

from .enrichment import EnrichmentPool
from .fetcher import CachedFetcher, FetchClient
from .models import Dependent, ListingPage, RankResult, RawRecord
from .paginator import PaginationResult, Paginator, resolve_next_link
from .parser import GitHubPageParser, PageParser, SelectorSet
from .ranking import dedupe_keep_max, rank, stars_to_number

__all__ = [
    "CachedFetcher",
    "Dependent",
    "EnrichmentPool",
    "FetchClient",
    "GitHubPageParser",
    "ListingPage",
    "PageParser",
    "PaginationResult",
    "Paginator",
    "RankResult",
    "RawRecord",
    "SelectorSet",
    "dedupe_keep_max",
    "rank",
    "resolve_next_link",
    "stars_to_number",
]
