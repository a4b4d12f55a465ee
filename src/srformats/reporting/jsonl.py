from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

# Status lines "<prefix>: k=v k=v" also produce a structured summary event.
SUMMARY_PREFIXES: Dict[str, str] = {
    "scan summary": "scan",
    "decode summary": "decode",
}


def parse_summary(message: str) -> Optional[Dict[str, str]]:
    head, _, tail = message.partition(":")
    kind = SUMMARY_PREFIXES.get(head.strip().lower())
    if kind is None:
        return None
    pairs = dict(
        token.split("=", 1) for token in tail.split() if "=" in token
    )
    return {"summary_type": kind, **pairs}


class JsonLinesReporter(Reporter):
    """One JSON object per line on stdout, keys sorted."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._tasks: Dict[str, TaskRecord] = {}

    def _emit(self, event: str, **payload: Any) -> None:
        payload["event"] = event
        self.stream.write(json.dumps(payload, sort_keys=True, default=str) + "\n")

    def start_task(
        self, task_id: str, name: str, total: Optional[int] = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        self._emit("task_start", id=task_id, name=name, total=total, **meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        self._emit("task_progress", id=task_id, completed=rec.completed, **meta)

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
        meta = {
            k: v for k, v in rec.meta.items() if k not in ("current_item",)
        }
        self._emit(
            "task_end",
            id=task_id,
            status=status.name.lower(),
            completed=rec.completed,
            total=rec.total,
            duration_seconds=rec.duration,
            **meta,
        )

    def status(self, message: str, **fields: Any) -> None:
        summary = parse_summary(message)
        if summary is not None:
            self._emit("summary", level="info", raw=message, **summary, **fields)
        self._emit("status", message=message, level="info", **fields)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self._emit(
            "status",
            message=message,
            level=f"verbose{level}",
            vlevel=level,
            **fields,
        )

    def error(self, message: str, **fields: Any) -> None:
        self._emit("status", message=message, level="error", **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit("status", message=message, level="warning", **fields)

    def section(self, title: str) -> None:
        self._emit("section", title=title)
