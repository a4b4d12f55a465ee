from __future__ import annotations

import sys
from typing import Any, Dict, Optional

from .base import Reporter, TaskRecord, TaskStatus, format_stats, get_verbosity

ICONS = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
    TaskStatus.SKIPPED: "→",
}


class PlainReporter(Reporter):
    """Line-oriented stderr reporter with optional ANSI colour."""

    def __init__(self, stream=None, use_color: Optional[bool] = None):
        self.stream = stream or sys.stderr
        if use_color is None:
            use_color = getattr(self.stream, "isatty", lambda: False)()
        self.use_color = use_color
        self._tasks: Dict[str, TaskRecord] = {}

    def _paint(self, code: str, text: str) -> str:
        if not self.use_color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def _line(self, code: str, label: str, message: str) -> None:
        self.stream.write(f"{self._paint(code, label)}: {message}\n")

    def start_task(
        self, task_id: str, name: str, total: Optional[int] = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        if get_verbosity() < 1:
            return
        item = meta.get("current_item") or f"#{rec.completed}"
        total = rec.total if rec.total is not None else "?"
        self.stream.write(f"   · {item} ({rec.completed}/{total})\n")

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
        self.stream.write(
            f" {ICONS.get(status, '?')} {rec.name}{count}"
            f" ({rec.duration:.2f}s){format_stats(rec.meta)}\n"
        )

    def status(self, message: str, **fields: Any) -> None:
        self._line("32", "INFO", message)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._line("36", f"VERB{level}", message)

    def error(self, message: str, **fields: Any) -> None:
        self._line("31", "ERROR", message)

    def warning(self, message: str, **fields: Any) -> None:
        self._line("33", "WARN", message)

    def section(self, title: str) -> None:
        self.stream.write(f"\n[{title}]\n")
