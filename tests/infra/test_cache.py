from __future__ import annotations

import gzip
import os
import time

import pytest

from ghtodep.errors import CacheCorruptError, CacheNotFoundError
from ghtodep.infra import ResponseCache


def test_path_for_is_stable_and_distinct(cache: ResponseCache) -> None:
    first = cache.path_for("https://github.com/test/repo")
    again = cache.path_for("https://github.com/test/repo")
    other = cache.path_for("https://github.com/test/repo2")
    assert first == again
    assert first != other
    assert first.parent == cache.directory
    assert first.name.endswith(".json.gz")


def test_write_read_roundtrip_multibyte(cache: ResponseCache) -> None:
    content = "<p>héllo wörld 世界 🚀</p>\n" * 50
    path = cache.path_for("https://example.com/unicode")
    cache.write(path, content)
    assert path.exists()
    assert cache.read(path) == content


def test_written_file_is_compressed_json(cache: ResponseCache) -> None:
    path = cache.path_for("https://example.com/format")
    cache.write(path, "body")
    payload = gzip.decompress(path.read_bytes()).decode("utf-8")
    assert '"content":"body"' in payload.replace(" ", "")
    assert '"timestamp"' in payload


def test_freshness_window(cache: ResponseCache) -> None:
    path = cache.path_for("https://example.com/fresh")
    assert not cache.is_valid(path)
    cache.write(path, "fresh")
    assert cache.is_valid(path)

    stale = time.time() - 25 * 3600
    os.utime(path, (stale, stale))
    assert not cache.is_valid(path)


def test_read_missing_entry(cache: ResponseCache) -> None:
    with pytest.raises(CacheNotFoundError):
        cache.read(cache.path_for("https://example.com/missing"))


@pytest.mark.parametrize(
    "raw",
    [
        b"not gzip at all",
        gzip.compress(b"{not json"),
        gzip.compress(b'{"timestamp": "soon"}'),
    ],
)
def test_read_corrupt_entry(cache: ResponseCache, raw: bytes) -> None:
    path = cache.path_for("https://example.com/corrupt")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(raw)
    with pytest.raises(CacheCorruptError):
        cache.read(path)


def test_write_overwrites_previous_entry(cache: ResponseCache) -> None:
    path = cache.path_for("https://example.com/overwrite")
    cache.write(path, "old")
    cache.write(path, "new")
    assert cache.read(path) == "new"
    assert list(cache.directory.glob("*.tmp")) == []


def test_clear_removes_entries(cache: ResponseCache) -> None:
    assert cache.clear() == 0
    for index in range(3):
        cache.write(cache.path_for(f"https://example.com/{index}"), "x")
    assert cache.clear() == 3
    assert list(cache.directory.iterdir()) == []
