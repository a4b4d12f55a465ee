"""Magic tag / version signature handling.

Every JMXV container opens with an 8 byte magic tag followed by a 4 byte
ASCII version. The (magic, version) pair selects the header shape; an unknown
magic or an unknown version of a known magic is a hard failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from .cursor import Cursor
from .errors import tag_mismatch, unsupported_version

__all__ = [
    "MAGIC_SIZE",
    "VERSION_SIZE",
    "SIGNATURE_SIZE",
    "FormatInfo",
    "peek_magic",
    "expect_signature",
]

MAGIC_SIZE = 8
VERSION_SIZE = 4
SIGNATURE_SIZE = MAGIC_SIZE + VERSION_SIZE


@dataclass(frozen=True, slots=True)
class FormatInfo:
    name: str
    magic: bytes
    versions: Tuple[bytes, ...]
    extensions: Tuple[str, ...]
    decode: Callable[[bytes], Any] = field(compare=False)
    decode_header: Optional[Callable[[bytes], Any]] = field(
        default=None, compare=False
    )

    @property
    def label(self) -> str:
        return self.magic.decode("ascii").strip()


def peek_magic(cur: Cursor) -> bytes:
    return cur.data[cur.pos : cur.pos + MAGIC_SIZE]


def expect_signature(
    cur: Cursor, magic: bytes, versions: Tuple[bytes, ...]
) -> bytes:
    """Consume magic + version, returning the version suffix.

    A mismatching magic raises before anything is consumed.
    """
    found = peek_magic(cur)
    if found != magic:
        raise tag_mismatch(found)
    cur.take(MAGIC_SIZE, "magic")
    version = cur.take(VERSION_SIZE, "version")
    if version not in versions:
        raise unsupported_version(magic, version)
    return version
