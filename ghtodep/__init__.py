"""Rank the repositories and packages that depend on a GitHub repository."""

__version__ = "0.1.0"
