"""File discovery for batch decoding."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional

__all__ = ["discover_files", "output_path_for"]


def discover_files(
    paths: Iterable[Path],
    pattern: Optional[str] = None,
    accept: Optional[Callable[[Path], bool]] = None,
) -> List[Path]:
    """Expand directories recursively; explicit files are always kept.

    Directory members must match ``pattern`` (a glob, default all files) and
    satisfy ``accept``. The result is sorted and free of duplicates.
    """
    found = set()
    for path in paths:
        path = Path(path)
        if path.is_dir():
            for candidate in path.rglob(pattern or "*"):
                if candidate.is_file() and (accept is None or accept(candidate)):
                    found.add(candidate)
        else:
            found.add(path)
    return sorted(found)


def output_path_for(
    source: Path, output_dir: Path, suffix: str, root: Optional[Path] = None
) -> Path:
    """Mirror ``source`` under ``output_dir`` with ``suffix`` appended."""
    relative = source
    if root is not None:
        try:
            relative = source.relative_to(root)
        except ValueError:
            relative = Path(source.name)
    elif source.is_absolute():
        relative = Path(source.name)
    return output_dir / relative.parent / f"{relative.name}.{suffix}"
