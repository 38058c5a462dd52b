"""Shared fixtures: temporary cache/config, fake fetchers and listing HTML builders."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Sequence

import pytest

from ghtodep.config import CacheConfig, ConfigLocator, ConfigRepository, FetchConfig, GlobalConfig
from ghtodep.infra import ResponseCache


def _row_html(key: str, stars: str | None) -> str:
    owner, _, name = key.partition("/")
    counters = ""
    if stars is not None:
        counters = (
            '<div class="d-flex flex-auto flex-justify-end">'
            '<span class="color-fg-muted text-bold pl-3">'
            f'<svg class="octicon octicon-star" height="16"></svg> {stars} </span>'
            '<span class="color-fg-muted text-bold pl-3">'
            '<svg class="octicon octicon-repo-forked" height="16"></svg> 0 </span>'
            "</div>"
        )
    return (
        '<div class="Box-row d-flex flex-items-center" data-test-id="dg-repo-pkg-dependent">'
        '<img class="avatar mr-2" src="avatar.png" width="20" height="20">'
        '<span class="f5 color-fg-muted">'
        f'<a data-hovercard-type="user" href="/{owner}">{owner}</a> / '
        f'<a class="text-bold" data-hovercard-type="repository" href="/{key}">{name}</a>'
        "</span>"
        f"{counters}"
        "</div>"
    )


def build_listing_html(
    rows: Sequence[tuple[str, str | None]],
    next_href: str | None = None,
    prev_href: str | None = None,
    total: str | None = None,
) -> str:
    """Render a dependents listing page in the current GitHub markup."""

    header = ""
    if total is not None:
        header = (
            '<div class="table-list-header-toggle states flex-auto pl-0">'
            f'<a class="btn-link selected" href="?dependent_type=REPOSITORY">{total} Repositories</a>'
            '<a class="btn-link" href="?dependent_type=PACKAGE">0 Packages</a>'
            "</div>"
        )
    prev_html = (
        f'<a class="btn BtnGroup-item" href="{prev_href}">Previous</a>'
        if prev_href
        else '<button class="btn BtnGroup-item" disabled="disabled">Previous</button>'
    )
    next_html = (
        f'<a class="btn BtnGroup-item" href="{next_href}">Next</a>'
        if next_href
        else '<button class="btn BtnGroup-item" disabled="disabled">Next</button>'
    )
    body = "".join(_row_html(key, stars) for key, stars in rows)
    return (
        "<html><body><div id='dependents'>"
        f"{header}"
        f'<div class="Box"><div class="Box-header">Dependents</div>{body}</div>'
        f'<div class="paginate-container"><div class="BtnGroup">{prev_html}{next_html}</div></div>'
        "</div></body></html>"
    )


def build_repo_html(description: str | None) -> str:
    about = f'<p class="f4 my-3">\n  {description}\n</p>' if description else ""
    return (
        "<html><body><div class='Layout-sidebar'>"
        f'<div class="BorderGrid-cell"><h2 class="mb-3 h4">About</h2>{about}</div>'
        "</div></body></html>"
    )


class FakeFetcher:
    """Page fetcher serving canned bodies; exceptions in ``pages`` are raised."""

    def __init__(self, pages: dict[str, str | Exception]) -> None:
        self.pages = pages
        self.calls: list[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.pages:
            raise KeyError(url)
        value = self.pages[url]
        if isinstance(value, Exception):
            raise value
        return value


class FakeFetchClient:
    """Stand-in for FetchClient counting fetch_with_retry calls per URL."""

    def __init__(self, pages: dict[str, str | Exception]) -> None:
        self.pages = pages
        self.calls: list[str] = []

    def fetch_with_retry(self, url: str, max_retries: int | None = None) -> str:
        self.calls.append(url)
        value = self.pages.get(url)
        if value is None:
            raise AssertionError(f"unexpected url {url}")
        if isinstance(value, Exception):
            raise value
        return value

    def close(self) -> None:
        return


@pytest.fixture
def listing_html() -> Callable[..., str]:
    return build_listing_html


@pytest.fixture
def repo_html() -> Callable[[str | None], str]:
    return build_repo_html


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def record_sleep(sleeps: list[float]) -> Callable[[float], None]:
    return sleeps.append


@pytest.fixture
def cache(tmp_path: Path) -> ResponseCache:
    return ResponseCache(tmp_path / "cache")


@pytest.fixture
def sample_global_config(tmp_path: Path) -> GlobalConfig:
    return GlobalConfig(
        cache=CacheConfig(directory=tmp_path / "cache"),
        fetch=FetchConfig(max_retries=3, initial_backoff=1.0, politeness_delay=1.0),
        enable_progress_bar=False,
    )


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterable[ConfigRepository]:
    monkeypatch.setenv("GHTODEP_HOME", str(tmp_path))
    locator = ConfigLocator(project_root=tmp_path)
    yield ConfigRepository(locator)
