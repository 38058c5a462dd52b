"""Expiring, gzip-compressed response cache keyed by source URL."""

from __future__ import annotations

import gzip
import hashlib
import os
import tempfile
import time
import zlib
from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, ValidationError

from ..errors import CacheCorruptError, CacheIOError, CacheNotFoundError

CACHE_SUFFIX = ".json.gz"
DEFAULT_EXPIRY = timedelta(hours=24)


class CacheEntry(BaseModel):
    """Serialised form of one cached response body."""

    timestamp: int
    content: str


class ResponseCache:
    """One file per URL below ``directory``; entries expire by file age."""

    def __init__(self, directory: Path, expiry: timedelta = DEFAULT_EXPIRY) -> None:
        self.directory = Path(directory)
        self.expiry = expiry

    def path_for(self, url: str) -> Path:
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{CACHE_SUFFIX}"

    def is_valid(self, path: Path) -> bool:
        try:
            modified = path.stat().st_mtime
        except OSError:
            return False
        age = time.time() - modified
        return 0 <= age < self.expiry.total_seconds()

    def read(self, path: Path) -> str:
        try:
            raw = path.read_bytes()
        except FileNotFoundError as exc:
            raise CacheNotFoundError(f"No cache entry at {path}") from exc
        except OSError as exc:
            raise CacheIOError(f"Cannot read cache entry {path}: {exc}") from exc
        try:
            payload = gzip.decompress(raw)
            entry = CacheEntry.model_validate_json(payload)
        except (OSError, EOFError, zlib.error, ValidationError) as exc:
            raise CacheCorruptError(f"Corrupt cache entry {path}: {exc}") from exc
        return entry.content

    def write(self, path: Path, content: str) -> None:
        entry = CacheEntry(timestamp=int(time.time()), content=content)
        data = gzip.compress(entry.model_dump_json().encode("utf-8"))
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as stream:
                    stream.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise CacheIOError(f"Cannot write cache entry {path}: {exc}") from exc

    def clear(self) -> int:
        if not self.directory.exists():
            return 0
        removed = 0
        for path in self.directory.glob(f"*{CACHE_SUFFIX}"):
            try:
                path.unlink()
            except OSError as exc:
                raise CacheIOError(f"Cannot remove cache entry {path}: {exc}") from exc
            removed += 1
        return removed


__all__ = ["CACHE_SUFFIX", "CacheEntry", "ResponseCache"]
