"""User interaction helpers."""

from .progress import PageProgressReporter
from .render import render_json, render_results

__all__ = ["PageProgressReporter", "render_json", "render_results"]
