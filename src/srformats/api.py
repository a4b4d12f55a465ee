"""High-level API: decode buffers, single files and whole directory trees.

Decoders raise on the first structural problem. This module is the only
place that turns a ``DecodeError`` into data: ``decode_many`` records one
outcome per file and keeps going (unless ``fail_fast``).
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from . import registry
from .decoding.errors import DecodeError
from .logging import get_logger
from .reporting import get_reporter, task
from .serialize import dumps
from .utils.paths import discover_files, output_path_for

__all__ = [
    "E_IO",
    "E_INTERNAL",
    "E_OUTPUT",
    "DecodeOptions",
    "DecodeOutcome",
    "ScanResult",
    "decode",
    "decode_file",
    "inspect_file",
    "write_output",
    "decode_many",
]

# Batch-level failure codes, recorded next to the DecodeError codes.
E_IO = "E_IO"  # file unreadable, or output not writable
E_INTERNAL = "E_INTERNAL"  # decoder failed outside DecodeError
E_OUTPUT = "E_OUTPUT"  # structured output could not be rendered


@dataclass(slots=True)
class DecodeOptions:
    paths: List[Path]
    # Glob applied to directory members (e.g. "*.bms").
    pattern: Optional[str] = None
    jobs: int = 1
    # When set, each decoded file is written here as structured output.
    output_dir: Optional[Path] = None
    output_format: str = "json"
    fail_fast: bool = False


@dataclass(slots=True)
class DecodeOutcome:
    path: Path
    format: Optional[str] = None
    size: int = 0
    error: Optional[Dict[str, Any]] = None
    output: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> Optional[str]:
        return self.error["code"] if self.error else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "format": self.format,
            "size": self.size,
            "ok": self.ok,
            "error": self.error,
            "output": str(self.output) if self.output else None,
        }


@dataclass(slots=True)
class ScanResult:
    outcomes: List[DecodeOutcome] = field(default_factory=list)

    @property
    def decoded(self) -> List[DecodeOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[DecodeOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def total_bytes(self) -> int:
        return sum(o.size for o in self.outcomes)

    def summary(self) -> str:
        return (
            f"Scan summary: files={len(self.outcomes)} decoded={len(self.decoded)}"
            f" failed={len(self.failed)} bytes={self.total_bytes}"
        )


def decode(data: bytes) -> Any:
    """Decode one in-memory file; the magic tag selects the format."""
    return registry.decode(data)


def decode_file(path: str | Path) -> Any:
    path = Path(path)
    data = path.read_bytes()
    value = registry.decode(data)
    get_logger().debug("Decoded %s (%d bytes)", path, len(data))
    return value


def inspect_file(path: str | Path) -> Dict[str, Any]:
    """Signature and header fields without decoding any section."""
    data = Path(path).read_bytes()
    info = registry.identify(data)
    return {
        "path": str(path),
        "format": info.name,
        "size": len(data),
        "header": registry.decode_header(data),
    }


def write_output(value: Any, target: Path, fmt: str = "json") -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dumps(value, fmt), encoding="utf-8")
    return target


def _decode_one(
    path: Path,
    output_dir: Optional[Path],
    output_format: str,
    root: Optional[Path],
) -> DecodeOutcome:
    """Worker body; must not raise so it can cross process boundaries."""
    outcome = DecodeOutcome(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        outcome.error = _io_error(exc)
        return outcome
    outcome.size = len(data)
    try:
        info = registry.identify(data)
        outcome.format = info.name
        value = info.decode(data)
    except DecodeError as exc:
        outcome.error = exc.to_dict()
        return outcome
    except Exception as exc:  # failures stay with their file
        outcome.error = _unexpected_error(E_INTERNAL, exc)
        return outcome
    if output_dir is not None:
        target = output_path_for(path, output_dir, output_format, root)
        try:
            outcome.output = write_output(value, target, output_format)
        except OSError as exc:
            outcome.error = _io_error(exc)
        except Exception as exc:
            outcome.error = _unexpected_error(E_OUTPUT, exc)
    return outcome


def _io_error(exc: OSError) -> Dict[str, Any]:
    return {
        "code": E_IO,
        "message": str(exc),
        "context": {"errno": exc.errno, "filename": exc.filename},
    }


def _unexpected_error(code: str, exc: Exception) -> Dict[str, Any]:
    return {
        "code": code,
        "message": str(exc) or type(exc).__name__,
        "context": {"exception": type(exc).__name__},
    }


def _root_for(path: Path, roots: Iterable[Path]) -> Optional[Path]:
    for root in roots:
        if root in path.parents:
            return root
    return None


def decode_many(options: DecodeOptions) -> ScanResult:
    logger = get_logger()
    rep = get_reporter()
    roots = [Path(p) for p in options.paths if Path(p).is_dir()]
    files = discover_files(
        options.paths,
        options.pattern,
        accept=lambda p: registry.format_for_path(p) is not None,
    )
    logger.debug("Discovered %d candidate files", len(files))
    result = ScanResult()

    def record(outcome: DecodeOutcome) -> None:
        result.outcomes.append(outcome)
        rep.advance("scan", current_item=outcome.path.name)
        if outcome.ok:
            logger.debug("%s: ok (%s)", outcome.path, outcome.format)
        else:
            err = outcome.error or {}
            logger.error(
                "%s: %s %s", outcome.path, err.get("code"), err.get("message")
            )

    with task("scan", "Decode files", total=len(files)) as stats:
        args = [
            (path, options.output_dir, options.output_format, _root_for(path, roots))
            for path in files
        ]
        if options.jobs > 1 and len(files) > 1:
            with ProcessPoolExecutor(max_workers=options.jobs) as pool:
                futures = {pool.submit(_decode_one, *a): a[0] for a in args}
                for future in as_completed(futures):
                    try:
                        outcome = future.result()
                    except Exception as exc:  # worker process died
                        outcome = DecodeOutcome(futures[future])
                        outcome.error = _unexpected_error(E_INTERNAL, exc)
                    record(outcome)
                    if options.fail_fast and not outcome.ok:
                        pool.shutdown(wait=True, cancel_futures=True)
                        break
        else:
            for a in args:
                outcome = _decode_one(*a)
                record(outcome)
                if options.fail_fast and not outcome.ok:
                    break
        result.outcomes.sort(key=lambda o: o.path)
        stats.update(
            files=len(result.outcomes),
            decoded=len(result.decoded),
            failed=len(result.failed),
            bytes=result.total_bytes,
        )
    logger.info(result.summary())
    return result
