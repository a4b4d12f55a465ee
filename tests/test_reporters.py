from __future__ import annotations

import io
import json

from rich.console import Console

from srformats.logging import configure_logging, get_logger, step
from srformats.reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    TaskStatus,
    set_reporter,
    set_verbosity,
    task,
)
from srformats.reporting.jsonl import parse_summary


def test_plain_task_line():
    buf = io.StringIO()
    set_reporter(PlainReporter(stream=buf, use_color=False))
    with task("scan", "Decode files", total=2) as stats:
        stats.update(files=2, decoded=2, failed=0, bytes=10)
    line = buf.getvalue()
    assert line.startswith(" ✔ Decode files 0/2")
    assert line.rstrip().endswith("[files=2 decoded=2 failed=0 bytes=10]")


def test_failed_stats_mark_task_failed():
    buf = io.StringIO()
    set_reporter(JsonLinesReporter(stream=buf))
    with task("scan", "Decode files", total=1) as stats:
        stats.update(files=1, failed=1)
    end = json.loads(buf.getvalue().splitlines()[-1])
    assert end["event"] == "task_end"
    assert end["status"] == TaskStatus.FAILED.name.lower()


def test_plain_progress_only_when_verbose():
    buf = io.StringIO()
    rep = PlainReporter(stream=buf, use_color=False)
    rep.start_task("t", "Work", total=2)
    rep.advance("t", current_item="a.bms")
    assert buf.getvalue() == ""
    set_verbosity(1)
    rep.advance("t", current_item="b.bms")
    assert "b.bms (2/2)" in buf.getvalue()


def test_parse_summary():
    assert parse_summary("Scan summary: files=3 decoded=2 failed=1 bytes=9") == {
        "summary_type": "scan",
        "files": "3",
        "decoded": "2",
        "failed": "1",
        "bytes": "9",
    }
    assert parse_summary("Decoded 3 files") is None


def test_logging_routes_to_reporter():
    buf = io.StringIO()
    set_reporter(PlainReporter(stream=buf, use_color=False))
    configure_logging(0)
    log = get_logger()
    log.debug("hidden")
    log.info("shown")
    log.warning("careful")
    log.error("broken")
    step("wrote out.json")
    assert buf.getvalue().splitlines() == [
        "INFO: shown",
        "WARN: careful",
        "ERROR: broken",
        "INFO:   -> wrote out.json",
    ]


def test_verbose_logging():
    buf = io.StringIO()
    set_reporter(PlainReporter(stream=buf, use_color=False))
    set_verbosity(1)
    configure_logging(1)
    get_logger().debug("detail")
    assert buf.getvalue() == "VERB1: detail\n"


def test_rich_reporter_keeps_stats_text():
    buf = io.StringIO()
    console = Console(file=buf, force_terminal=False, width=120)
    rep = RichReporter(console=console)
    rep.start_task("scan", "Decode files", total=1)
    rep.advance("scan", current_item="a.efp")
    rep.end_task("scan", TaskStatus.SUCCESS, files=1, decoded=1, failed=0, bytes=4)
    rep.error("x.bms: [bad]")
    rep.flush()
    out = buf.getvalue()
    assert "[files=1 decoded=1 failed=0 bytes=4]" in out
    assert "x.bms: [bad]" in out
