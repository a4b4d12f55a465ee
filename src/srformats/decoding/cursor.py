"""Buffer cursor with explicit addressing modes.

A ``Cursor`` walks the immutable file buffer sequentially. Jumps never move an
existing cursor; they produce a new one:

- ``Cursor.at(offset)``: absolute offset from the start of the buffer
  (header-level section offsets).
- ``Cursor.relative(base, delta)``: offset measured from a record start
  (effect-node data offsets).
"""

from __future__ import annotations

import struct

from .errors import offset_out_of_bounds, unexpected_eof

__all__ = ["Cursor"]


class Cursor:
    __slots__ = ("data", "pos")

    def __init__(self, data: bytes, pos: int = 0) -> None:
        self.data = data
        self.pos = pos

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, len={len(self.data)})"

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def take(self, size: int, label: str = "bytes") -> bytes:
        if size < 0 or size > self.remaining:
            raise unexpected_eof(self.pos, size, self.remaining, label)
        start = self.pos
        self.pos = start + size
        return self.data[start : self.pos]

    def unpack(self, fmt: struct.Struct, label: str = "value") -> tuple:
        if fmt.size > self.remaining:
            raise unexpected_eof(self.pos, fmt.size, self.remaining, label)
        values = fmt.unpack_from(self.data, self.pos)
        self.pos += fmt.size
        return values

    def at(self, offset: int, section: str = "section") -> "Cursor":
        if offset < 0 or offset > len(self.data):
            raise offset_out_of_bounds(offset, len(self.data), section)
        return Cursor(self.data, offset)

    def relative(self, base: int, delta: int, label: str = "record") -> "Cursor":
        return self.at(base + delta, label)
