"""Infra layer utilities (response cache)."""

from .cache import CacheEntry, ResponseCache

__all__ = ["CacheEntry", "ResponseCache"]
