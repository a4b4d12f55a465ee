"""Command line interface for srformats."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .api import DecodeOptions, decode_file, decode_many, inspect_file, write_output
from .decoding.errors import DecodeError
from .logging import configure_logging, get_logger, step
from .registry import describe
from .reporting import (
    REPORTERS,
    PlainReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)
from .serialize import FORMATS, dumps


def _decode_cmd(args: argparse.Namespace) -> int:
    logger = get_logger()
    try:
        value = decode_file(args.file)
    except DecodeError as exc:
        logger.error("%s: %s", args.file, exc)
        return 1
    get_reporter().flush()
    if args.output is not None:
        write_output(value, args.output, args.format)
        step(f"wrote {args.output}")
    else:
        sys.stdout.write(dumps(value, args.format))
    return 0


def _scan_cmd(args: argparse.Namespace) -> int:
    opts = DecodeOptions(
        paths=args.paths,
        pattern=args.pattern,
        jobs=args.jobs,
        output_dir=args.output_dir,
        output_format=args.format,
        fail_fast=args.fail_fast,
    )
    result = decode_many(opts)
    rep = get_reporter()
    if result.failed:
        rep.section("Failures")
        for outcome in result.failed:
            rep.error(f"{outcome.path}: {outcome.error_code}")
    return 0 if result.ok else 1


def _inspect_cmd(args: argparse.Namespace) -> int:
    try:
        info = inspect_file(args.file)
    except DecodeError as exc:
        get_logger().error("%s: %s", args.file, exc)
        return 1
    get_reporter().flush()
    sys.stdout.write(dumps(info, args.format))
    return 0


def _formats_cmd(args: argparse.Namespace) -> int:
    for entry in describe():
        versions = ",".join(entry["versions"])
        extensions = " ".join(entry["extensions"])
        print(f"{entry['magic']:<8} {versions:<20} {entry['name']:<12} {extensions}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="srformats", description="Decode JMXV binary asset files"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=sorted(REPORTERS),
        default="plain",
        help="Reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    d = sub.add_parser("decode", help="Decode one file to JSON or YAML")
    d.add_argument("file", type=Path)
    d.add_argument("--format", choices=FORMATS, default="json")
    d.add_argument("-o", "--output", type=Path, help="Write to file instead of stdout")
    d.set_defaults(func=_decode_cmd)

    s = sub.add_parser("scan", help="Decode every known file under the given paths")
    s.add_argument("paths", type=Path, nargs="+")
    s.add_argument("--pattern", help="Glob for directory members, e.g. '*.bms'")
    s.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Worker processes (0 = one per CPU)",
    )
    s.add_argument(
        "--output-dir",
        dest="output_dir",
        type=Path,
        help="Write each decoded file as structured output under this directory",
    )
    s.add_argument("--format", choices=FORMATS, default="json")
    s.add_argument(
        "--fail-fast",
        dest="fail_fast",
        action="store_true",
        help="Stop at the first failing file",
    )
    s.set_defaults(func=_scan_cmd)

    i = sub.add_parser("inspect", help="Show signature and header fields")
    i.add_argument("file", type=Path)
    i.add_argument("--format", choices=FORMATS, default="json")
    i.set_defaults(func=_inspect_cmd)

    f = sub.add_parser("formats", help="List supported formats")
    f.set_defaults(func=_formats_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    args = build_parser().parse_args(argv)
    if getattr(args, "jobs", 1) == 0:
        args.jobs = os.cpu_count() or 1
    if args.reporter == "rich" and not sys.stderr.isatty():
        # Progress bars need a terminal.
        set_reporter(PlainReporter())
    else:
        set_reporter(REPORTERS[args.reporter]())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    finally:
        get_reporter().flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
