from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .base import Reporter, TaskRecord, TaskStatus, format_stats, get_verbosity

TRANSIENT_ENV = "SRFORMATS_PROGRESS_TRANSIENT"

_STATUS_ICON = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
    TaskStatus.SKIPPED: "→",
}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").lower() in ("1", "true", "yes")


class RichReporter(Reporter):
    """Progress bars on stderr via ``rich``; one bar per counted task."""

    supports_progress = True

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(
            stderr=True, highlight=False, soft_wrap=False
        )
        self.transient = _env_flag(TRANSIENT_ENV)
        self.progress: Optional[Progress] = None
        self._tasks: Dict[str, TaskRecord] = {}
        self._bars: Dict[str, TaskID] = {}
        self._deferred: List[str] = []

    def _ensure_progress(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.description}"),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                TextColumn("[dim]{task.fields[current]}"),
                console=self.console,
                transient=self.transient,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def _stop_progress(self) -> None:
        if self.progress is None:
            return
        self.progress.stop()
        self.progress = None
        self._bars.clear()
        if self._deferred:
            self.console.print("\n".join(self._deferred))
            self._deferred.clear()

    def start_task(
        self, task_id: str, name: str, total: Optional[int] = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        if total is None:
            # Uncounted tasks render as a header only.
            self.console.rule(name)
            return
        progress = self._ensure_progress()
        self._bars[task_id] = progress.add_task(name, total=total, current="")

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        bar = self._bars.get(task_id)
        if bar is not None and self.progress is not None:
            self.progress.update(
                bar,
                completed=rec.completed,
                current=meta.get("current_item", ""),
            )

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return
        rec.finish(status, final_meta)
        count = f" {rec.completed}/{rec.total}" if rec.total is not None else ""
        line = (
            f"{_STATUS_ICON.get(status, '')} {escape(rec.name)}{count}"
            f" ({rec.duration:.2f}s){escape(format_stats(rec.meta))}"
        )
        bar = self._bars.pop(task_id, None)
        if bar is not None and self.progress is not None:
            self.progress.update(bar, current="")
            if not self.transient:
                self.progress.console.print(line)
            else:
                self._deferred.append(line)
        else:
            self.console.print(line)
        if not self._tasks:
            self._stop_progress()

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {escape(message)}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self.console.print(f"[cyan]VERB{level}[/]: {escape(message)}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {escape(message)}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {escape(message)}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        self._stop_progress()
