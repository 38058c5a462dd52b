"""Terminal progress helpers with Rich-based rendering."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass
class PageProgressState:
    expected: int | None
    pages: int = 0
    records: int = 0


class PageProgressReporter:
    """Follow pagination through the paginator listener hook.

    The bar is sized in records when the listing reports a total, otherwise it
    shows an indeterminate spinner. Non-interactive consoles stay silent.
    """

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self._console = console
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self.state: PageProgressState | None = None

    def start(self, expected: int | None) -> None:
        self.state = PageProgressState(expected=expected)
        if not self.enabled:
            return
        console = self._console or Console(stderr=True)
        if not console.is_terminal:
            self.enabled = False
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]dependents"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green", pulse_style="cyan"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            TextColumn("[dim]page {task.fields[pages]}", justify="right"),
            console=console,
            transient=True,
            expand=True,
        )
        try:
            self._progress.__enter__()
        except LiveError:
            # Another live display owns the console.
            self.enabled = False
            self._progress = None
            return
        self._task_id = self._progress.add_task("pages", total=expected, pages=0)

    def on_page(self, pages_visited: int, records_so_far: int) -> None:
        if self.state is None:
            raise RuntimeError("PageProgressReporter.start must be called before on_page")
        self.state.pages = pages_visited
        self.state.records = records_so_far
        if self._progress is not None and self._task_id is not None:
            completed = records_so_far
            if self.state.expected:
                completed = min(records_so_far, self.state.expected)
            self._progress.update(self._task_id, completed=completed, pages=pages_visited)

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress.__exit__(None, None, None)
            self._progress = None
        self._task_id = None

    def summary(self) -> dict[str, int]:
        if self.state is None:
            return {"pages": 0, "records": 0}
        return {"pages": self.state.pages, "records": self.state.records}


__all__ = ["PageProgressReporter", "PageProgressState"]
