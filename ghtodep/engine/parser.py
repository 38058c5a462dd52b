"""HTML parsing for the dependents listing and repository pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from selectolax.parser import HTMLParser, Node

from .models import ListingPage, RawRecord


class PageParser(Protocol):
    """Markup knowledge the pipeline needs; implementations must be side-effect free."""

    def parse_listing(self, html: str) -> ListingPage:
        """Return the dependents listed on a page and its next-page link."""

    def parse_description(self, html: str) -> str | None:
        """Return the repository description shown on a repository page."""

    def parse_total_count(self, html: str) -> int:
        """Return the total dependents count displayed above the listing, 0 if unknown."""


@dataclass(frozen=True, slots=True)
class SelectorSet:
    """CSS selectors for one version of the listing page template."""

    name: str
    row: str
    link: str
    stars: str
    pagination: str
    # Star text used when a row has no star element; None drops the row.
    default_stars: str | None = None


CURRENT_TEMPLATE = SelectorSet(
    name="current",
    row="div.Box-row.flex-items-center",
    link="a[data-hovercard-type='repository']",
    stars="span.color-fg-muted.text-bold",
    pagination="div.paginate-container a",
)

LEGACY_TEMPLATE = SelectorSet(
    name="legacy",
    row="div.Box > div.flex-items-center",
    link="span > a.text-bold",
    stars="span.text-gray-light",
    pagination="div.paginate-container > div > a",
    default_stars="0",
)

DESCRIPTION_SELECTORS = ("div.BorderGrid-cell p.f4", "div.BorderGrid-cell p")
DESCRIPTION_META = "meta[property='og:description']"
TOTAL_COUNT_SELECTOR = ".table-list-header-toggle .btn-link.selected"


class GitHubPageParser:
    """Parse GitHub dependents pages, trying each known template in order."""

    def __init__(self, templates: Sequence[SelectorSet] = (CURRENT_TEMPLATE, LEGACY_TEMPLATE)) -> None:
        if not templates:
            raise ValueError("At least one selector set is required")
        self.templates = tuple(templates)

    def parse_listing(self, html: str) -> ListingPage:
        tree = HTMLParser(html)
        for template in self.templates:
            records = self._extract_records(tree, template)
            if records:
                return ListingPage(records=records, next_link=self._next_link(tree, template))
        return ListingPage()

    def parse_description(self, html: str) -> str | None:
        tree = HTMLParser(html)
        for selector in DESCRIPTION_SELECTORS:
            node = tree.css_first(selector)
            if node is None:
                continue
            text = node.text(separator=" ", strip=True)
            if text:
                return " ".join(text.split())
        meta = tree.css_first(DESCRIPTION_META)
        if meta is not None:
            content = " ".join((meta.attributes.get("content") or "").split())
            if content:
                return content
        return None

    def parse_total_count(self, html: str) -> int:
        node = HTMLParser(html).css_first(TOTAL_COUNT_SELECTOR)
        if node is None:
            return 0
        tokens = node.text(strip=True).split()
        if not tokens:
            return 0
        try:
            return max(int(tokens[0].replace(",", "")), 0)
        except ValueError:
            return 0

    @staticmethod
    def _extract_records(tree: HTMLParser, template: SelectorSet) -> list[RawRecord]:
        records: list[RawRecord] = []
        for row in tree.css(template.row):
            link = row.css_first(template.link)
            if link is None:
                continue
            href = (link.attributes.get("href") or "").strip()
            key = href.lstrip("/").lower()
            if not key:
                continue
            stars_node = row.css_first(template.stars)
            if stars_node is not None:
                stars = stars_node.text(strip=True)
            elif template.default_stars is not None:
                stars = template.default_stars
            else:
                continue
            records.append(RawRecord(key=key, stars_text=stars))
        return records

    @staticmethod
    def _next_link(tree: HTMLParser, template: SelectorSet) -> str | None:
        anchors: list[Node] = [node for node in tree.css(template.pagination) if node.attributes.get("href")]
        for anchor in anchors:
            if anchor.text(strip=True) == "Next":
                return anchor.attributes["href"]
        # Unlabelled pagination renders as [Previous, Next] once past page one.
        if len(anchors) == 2:
            return anchors[1].attributes["href"]
        return None


__all__ = [
    "CURRENT_TEMPLATE",
    "GitHubPageParser",
    "LEGACY_TEMPLATE",
    "PageParser",
    "SelectorSet",
]
