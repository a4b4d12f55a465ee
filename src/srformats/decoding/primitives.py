"""Primitive decoders: little-endian scalars, vectors, matrices and strings.

Each decoder takes a ``Cursor``, consumes a fixed number of bytes (or a
length-prefixed run) from its current position and returns a single owned
value. A short buffer raises ``UnexpectedEof``.

Text uses the legacy Korean code page. Invalid byte sequences are replaced,
never fatal: historic assets contain encoding artifacts that must not block
structural decoding.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple

from .cursor import Cursor

__all__ = [
    "TEXT_ENCODING",
    "Vector2",
    "Vector3",
    "Vector4",
    "Matrix4",
    "Color",
    "u8",
    "u16",
    "u32",
    "i32",
    "f32",
    "bool8",
    "bool32",
    "vector2",
    "vector3",
    "vector4",
    "vector6",
    "matrix4",
    "color",
    "decode_text",
    "sized_string",
    "small_sized_string",
    "fixed_string",
    "raw_bytes",
]

TEXT_ENCODING = "cp949"

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")
_F32 = struct.Struct("<f")
_VEC2 = struct.Struct("<2f")
_VEC3 = struct.Struct("<3f")
_VEC4 = struct.Struct("<4f")
_VEC6 = struct.Struct("<6f")
_MAT4 = struct.Struct("<16f")


@dataclass(frozen=True, slots=True)
class Vector2:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Vector3:
    x: float
    y: float
    z: float


@dataclass(frozen=True, slots=True)
class Vector4:
    x: float
    y: float
    z: float
    w: float


@dataclass(frozen=True, slots=True)
class Matrix4:
    """Row-major 4x4 float matrix."""

    rows: Tuple[
        Tuple[float, float, float, float],
        Tuple[float, float, float, float],
        Tuple[float, float, float, float],
        Tuple[float, float, float, float],
    ]


@dataclass(frozen=True, slots=True)
class Color:
    """ARGB32 packed colour."""

    argb: int

    @property
    def a(self) -> int:
        return (self.argb >> 24) & 0xFF

    @property
    def r(self) -> int:
        return (self.argb >> 16) & 0xFF

    @property
    def g(self) -> int:
        return (self.argb >> 8) & 0xFF

    @property
    def b(self) -> int:
        return self.argb & 0xFF


def u8(cur: Cursor) -> int:
    return cur.unpack(_U8, "u8")[0]


def u16(cur: Cursor) -> int:
    return cur.unpack(_U16, "u16")[0]


def u32(cur: Cursor) -> int:
    return cur.unpack(_U32, "u32")[0]


def i32(cur: Cursor) -> int:
    return cur.unpack(_I32, "i32")[0]


def f32(cur: Cursor) -> float:
    return cur.unpack(_F32, "f32")[0]


def bool8(cur: Cursor) -> bool:
    return u8(cur) != 0


def bool32(cur: Cursor) -> bool:
    return u32(cur) != 0


def vector2(cur: Cursor) -> Vector2:
    return Vector2(*cur.unpack(_VEC2, "vector2"))


def vector3(cur: Cursor) -> Vector3:
    return Vector3(*cur.unpack(_VEC3, "vector3"))


def vector4(cur: Cursor) -> Vector4:
    return Vector4(*cur.unpack(_VEC4, "vector4"))


def vector6(cur: Cursor) -> Tuple[float, ...]:
    return cur.unpack(_VEC6, "vector6")


def matrix4(cur: Cursor) -> Matrix4:
    m = cur.unpack(_MAT4, "matrix4")
    return Matrix4((m[0:4], m[4:8], m[8:12], m[12:16]))


def color(cur: Cursor) -> Color:
    return Color(u32(cur))


def decode_text(raw: bytes) -> str:
    return raw.decode(TEXT_ENCODING, errors="replace")


def sized_string(cur: Cursor) -> str:
    """u32 length followed by that many encoded bytes."""
    return decode_text(cur.take(u32(cur), "sized string"))


def small_sized_string(cur: Cursor) -> str:
    """u16 length followed by that many encoded bytes."""
    return decode_text(cur.take(u16(cur), "sized string"))


def fixed_string(cur: Cursor, size: int) -> str:
    """Constant-width block truncated at the first NUL."""
    raw = cur.take(size, "fixed string")
    end = raw.find(b"\x00")
    return decode_text(raw if end < 0 else raw[:end])


def raw_bytes(cur: Cursor, size: int) -> bytes:
    return cur.take(size, "raw bytes")
