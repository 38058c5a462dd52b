"""Records flowing through the fetch → parse → rank → enrich pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config.models import GITHUB_BASE_URL


@dataclass(frozen=True, slots=True)
class RawRecord:
    """One listing row as displayed: lower-cased ``owner/name`` and star text."""

    key: str
    stars_text: str


@dataclass(frozen=True, slots=True)
class Dependent:
    """Final ranked record, optionally carrying the repository description."""

    key: str
    stars_text: str
    description: str | None = None

    @property
    def url(self) -> str:
        return f"{GITHUB_BASE_URL}/{self.key}"

    def to_dict(self) -> dict[str, str | None]:
        return {"repo": self.key, "stars": self.stars_text, "description": self.description}


@dataclass(slots=True)
class ListingPage:
    """Parsed listing page: its rows and the raw next-page link, if any."""

    records: list[RawRecord] = field(default_factory=list)
    next_link: str | None = None


@dataclass(slots=True)
class RankResult:
    selected: list[Dependent]
    total_distinct_count: int
    above_threshold_count: int


__all__ = ["Dependent", "ListingPage", "RankResult", "RawRecord"]
