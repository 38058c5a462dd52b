"""Render pipeline results as text, a Rich table or JSON."""

from __future__ import annotations

import json

from rich import box
from rich.console import Console
from rich.table import Table

from ..config import RunConfig


def _format_stars(value: float) -> str:
    return f"{value:g}"


def render_json(result, elapsed: float) -> str:
    payload = {
        "dependents": [dep.to_dict() for dep in result.dependents],
        "stats": {
            "total_repositories": result.total_distinct_count,
            "repositories_with_stars": result.above_threshold_count,
            "total_known": result.total_known_count,
            "elapsed_seconds": round(elapsed, 3),
        },
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def build_table(result, show_description: bool) -> Table:
    table = Table(box=box.SIMPLE_HEAD, show_lines=False)
    table.add_column("url", style="cyan", no_wrap=True)
    table.add_column("stars", style="yellow", justify="right")
    if show_description:
        table.add_column("description", overflow="fold")
    for dep in result.dependents:
        row = [dep.url, dep.stars_text]
        if show_description:
            row.append(dep.description or "")
        table.add_row(*row)
    return table


def render_results(result, config: RunConfig, elapsed: float, console: Console) -> None:
    kind = config.dependent_type.value.lower()
    if config.output_format == "json":
        console.print(render_json(result, elapsed), markup=False, highlight=False, soft_wrap=True)
        return

    if config.output_format == "table":
        console.print(build_table(result, config.fetch_descriptions))
        private_note = ""
        if result.total_distinct_count < result.total_known_count:
            private_note = ", others are private"
        console.print(f"found {result.total_distinct_count} repositories{private_note}")
        console.print(
            f"found {result.above_threshold_count} repositories with at least "
            f"{_format_stars(config.min_stars)} stars"
        )
        console.print(f"Completed in {elapsed:.2f} seconds", style="dim")
        return

    if not result.dependents:
        console.print(f"No {kind} dependents found or access denied.", style="yellow")
        return
    console.print(
        f"\nTop {len(result.dependents)} {kind} dependents "
        f"(min {_format_stars(config.min_stars)} stars):",
        style="bold",
    )
    for index, dep in enumerate(result.dependents, start=1):
        console.print(f"{index}. {dep.key} (⭐ {dep.stars_text})", markup=False, highlight=False)
        if config.fetch_descriptions and dep.description:
            console.print(f"   {dep.description}", markup=False, highlight=False)
    console.print(f"\nFound {result.total_distinct_count} total repositories")
    console.print(f"Found {result.above_threshold_count} repositories with stars")
    console.print(f"Completed in {elapsed:.2f} seconds", style="dim")


__all__ = ["build_table", "render_json", "render_results"]
