"""Offset-addressed section resolution.

Multi-section formats start with a header whose fields are absolute byte
offsets into the same buffer. Each section is decoded from a fresh cursor at
its offset, independent of how far any other cursor has advanced; whatever
follows a section is ignored. Decode order across sections is irrelevant.

A section marked ``optional`` treats offset 0 as "absent" (offset 0 is the
header itself) and is never read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from .cursor import Cursor

__all__ = ["Section", "resolve", "resolve_sections"]


@dataclass(frozen=True, slots=True)
class Section:
    offset_field: str
    decode: Callable[[Cursor], Any]
    optional: bool = False


def resolve(
    buffer: bytes,
    offset: int,
    decode: Callable[[Cursor], Any],
    *,
    name: str = "section",
    optional: bool = False,
) -> Optional[Any]:
    if optional and offset == 0:
        return None
    return decode(Cursor(buffer).at(offset, name))


def resolve_sections(
    buffer: bytes, header: Any, layout: Mapping[str, Section]
) -> Dict[str, Any]:
    return {
        name: resolve(
            buffer,
            getattr(header, section.offset_field),
            section.decode,
            name=name,
            optional=section.optional,
        )
        for name, section in layout.items()
    }
