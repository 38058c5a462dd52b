"""Typer CLI entrypoint for ghtodep."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .config import ConfigLocator, ConfigRepository, DependentType, GlobalConfig, RunConfig, parse_repo_reference
from .errors import CacheError, HttpStatusError, InvalidInputError, RateLimitedError
from .infra import ResponseCache
from .logging_conf import configure_logging
from .pipeline import DependentsPipeline
from .ui import PageProgressReporter, render_results

app = typer.Typer(
    help="List the most starred repositories or packages depending on a GitHub repository.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()
err_console = Console(stderr=True)

OUTPUT_FORMATS = ("text", "table", "json")


def load_global_config(config_path: Path | None) -> GlobalConfig:
    repository = ConfigRepository()
    return repository.load_global_config(config_path)


def save_global_config(global_config: GlobalConfig) -> Path:
    return ConfigRepository().save_global_config(global_config)


def resolve_log_dir(enabled: bool) -> Path | None:
    return ConfigLocator().logs_dir if enabled else None


def build_pipeline(global_config: GlobalConfig, show_progress: bool) -> DependentsPipeline:
    progress_factory = None
    if show_progress and global_config.enable_progress_bar:
        progress_factory = lambda: PageProgressReporter(enabled=True)  # noqa: E731
    return DependentsPipeline(global_config, progress_factory=progress_factory)


@app.command(help="Rank dependents of REPO (owner/repo or https://github.com/owner/repo).")
def main(
    repo: str = typer.Argument(..., help="GitHub repository URL or owner/repo."),
    rows: int = typer.Option(10, "--rows", "-n", help="Number of top dependents to show."),
    max_pages: int = typer.Option(100, "--max-pages", "--max_pages", help="Maximum number of listing pages to fetch."),
    min_stars: float = typer.Option(0.0, "--minstar", help="Minimum number of stars."),
    packages: bool = typer.Option(False, "--packages", help="List package dependents instead of repositories."),
    description: bool = typer.Option(False, "--description", help="Fetch repository descriptions."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the response cache."),
    output_format: str = typer.Option("table", "--format", help="Output format: text, table or json."),
    table: bool = typer.Option(False, "--table", help="Shorthand for --format table."),
    clear_cache: bool = typer.Option(False, "--clear-cache", help="Delete cached pages before running."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to a YAML config file."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    log_to_file: bool = typer.Option(False, "--log-file", help="Also write JSON logs below the ghtodep home directory."),
    save_config: bool = typer.Option(False, "--save-config", help="Write the effective configuration to config.yaml."),
) -> None:
    configure_logging(verbose=verbose, log_dir=resolve_log_dir(log_to_file))
    fmt = "table" if table else output_format.lower()
    try:
        if fmt not in OUTPUT_FORMATS:
            raise InvalidInputError(f"Unsupported format '{output_format}', expected one of {', '.join(OUTPUT_FORMATS)}")
        owner, name = parse_repo_reference(repo)
        run_config = RunConfig(
            owner=owner,
            repo=name,
            top_n=rows,
            max_pages=max_pages,
            min_stars=min_stars,
            dependent_type=DependentType.PACKAGE if packages else DependentType.REPOSITORY,
            fetch_descriptions=description,
            use_cache=not no_cache,
            output_format=fmt,
        )
        global_config = load_global_config(config_path)
    except (InvalidInputError, FileNotFoundError, ValueError) as exc:
        err_console.print(f"Error: {exc}", style="red", markup=False)
        raise typer.Exit(code=2)

    if save_config:
        try:
            saved = save_global_config(global_config)
        except OSError as exc:
            err_console.print(f"Warning: cannot save configuration: {exc}", style="yellow", markup=False)
        else:
            err_console.print(f"Configuration saved to {saved}", style="dim", markup=False)

    if clear_cache:
        cache = ResponseCache(global_config.cache.resolved_directory(), global_config.cache.expiry)
        try:
            removed = cache.clear()
        except CacheError as exc:
            err_console.print(f"Warning: {exc}", style="yellow", markup=False)
        else:
            err_console.print(f"Removed {removed} cached pages.", style="dim")

    kind = run_config.dependent_type.value.lower()
    if fmt != "json":
        err_console.print(f"Fetching {kind} dependents for {owner}/{name}...", style="dim")

    started = time.perf_counter()
    with build_pipeline(global_config, show_progress=fmt != "json") as pipeline:
        result = pipeline.run_config(run_config)
    elapsed = time.perf_counter() - started

    if result.first_page_failed and isinstance(result.error, (RateLimitedError, HttpStatusError)):
        err_console.print(f"Error: {result.error}", style="red", markup=False)
        raise typer.Exit(code=1)

    render_results(result, run_config, elapsed, console)


__all__ = ["app", "build_pipeline", "load_global_config", "resolve_log_dir", "save_global_config"]
