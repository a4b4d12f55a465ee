from __future__ import annotations

from .base import Reporter, TaskStatus


class SilentReporter(Reporter):
    """Drops every event."""

    def start_task(self, task_id, name, total=None, **meta):
        pass

    def advance(self, task_id, step=1, **meta):
        pass

    def end_task(self, task_id, status=TaskStatus.SUCCESS, **final_meta):
        pass

    def status(self, message, **fields):
        pass

    def error(self, message, **fields):
        pass

    def warning(self, message, **fields):
        pass

    def section(self, title):
        pass
