"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository, parse_repo_reference
from .models import (
    CacheConfig,
    DependentType,
    FetchConfig,
    GlobalConfig,
    RunConfig,
)

__all__ = [
    "CacheConfig",
    "ConfigLocator",
    "ConfigRepository",
    "DependentType",
    "FetchConfig",
    "GlobalConfig",
    "RunConfig",
    "parse_repo_reference",
]
