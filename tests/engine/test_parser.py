from __future__ import annotations

from ghtodep.engine import GitHubPageParser, RawRecord
from ghtodep.engine.parser import CURRENT_TEMPLATE, LEGACY_TEMPLATE

LEGACY_HTML = """
<div class="Box">
    <div class="flex-items-center">
        <span><a class="text-bold" href="/User1/Repo1">User1/Repo1</a></span>
        <div><span class="text-gray-light">100</span></div>
    </div>
    <div class="flex-items-center">
        <span><a class="text-bold" href="/user2/repo2">user2/repo2</a></span>
        <div></div>
    </div>
</div>
<div class="paginate-container">
    <div><a href="/prev-page">Previous</a><a href="/next-page">Next</a></div>
</div>
"""


def test_parse_listing_current_markup(listing_html) -> None:
    html = listing_html(
        [("Alice/Tool", "1,234"), ("bob/lib", "1.2k"), ("carol/app", "")],
        next_href="/o/r/network/dependents?dependents_after=abc",
    )
    page = GitHubPageParser().parse_listing(html)
    assert page.records == [
        RawRecord("alice/tool", "1,234"),
        RawRecord("bob/lib", "1.2k"),
        RawRecord("carol/app", ""),
    ]
    assert page.next_link == "/o/r/network/dependents?dependents_after=abc"


def test_parse_listing_skips_rows_without_stars_in_current_markup(listing_html) -> None:
    html = listing_html([("a/b", None), ("c/d", "5")])
    page = GitHubPageParser(templates=(CURRENT_TEMPLATE,)).parse_listing(html)
    assert page.records == [RawRecord("c/d", "5")]


def test_parse_listing_falls_back_to_legacy_markup() -> None:
    page = GitHubPageParser().parse_listing(LEGACY_HTML)
    assert page.records == [RawRecord("user1/repo1", "100"), RawRecord("user2/repo2", "0")]
    assert page.next_link == "/next-page"


def test_next_link_absent_on_last_page(listing_html) -> None:
    html = listing_html([("a/b", "1")], prev_href="/o/r/network/dependents?dependents_before=x")
    assert GitHubPageParser().parse_listing(html).next_link is None


def test_next_link_prefers_labelled_anchor(listing_html) -> None:
    html = listing_html([("a/b", "1")], next_href="/n", prev_href="/p")
    assert GitHubPageParser().parse_listing(html).next_link == "/n"


def test_unlabelled_pagination_uses_second_button() -> None:
    html = LEGACY_HTML.replace(">Previous<", ">&lt;<").replace(">Next<", ">&gt;<")
    page = GitHubPageParser(templates=(LEGACY_TEMPLATE,)).parse_listing(html)
    assert page.next_link == "/next-page"


def test_parse_listing_without_rows() -> None:
    page = GitHubPageParser().parse_listing("<html><body><p>Nothing here</p></body></html>")
    assert page.records == []
    assert page.next_link is None


def test_parse_description(repo_html) -> None:
    parser = GitHubPageParser()
    assert parser.parse_description(repo_html("A fast   HTML parser")) == "A fast HTML parser"
    assert parser.parse_description(repo_html(None)) is None


def test_parse_total_count(listing_html) -> None:
    parser = GitHubPageParser()
    assert parser.parse_total_count(listing_html([("a/b", "1")], total="12,345")) == 12345
    assert parser.parse_total_count(listing_html([("a/b", "1")])) == 0
    assert parser.parse_total_count(listing_html([("a/b", "1")], total="lots")) == 0


def test_parse_description_falls_back_to_meta() -> None:
    html = (
        '<html><head><meta property="og:description" content="Meta  summary"></head>'
        '<body><div class="BorderGrid-cell"><h2>About</h2></div></body></html>'
    )
    assert GitHubPageParser().parse_description(html) == "Meta summary"
