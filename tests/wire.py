"""Little-endian byte builders for hand-assembled fixtures.

Usage:
    from wire import sstr, u32, counted
    blob = counted([sstr("a"), sstr("b")])
"""

from __future__ import annotations

import struct
from typing import Callable, Iterable, Sequence


def u8(value: int) -> bytes:
    return struct.pack("<B", value)


def u16(value: int) -> bytes:
    return struct.pack("<H", value)


def u32(value: int) -> bytes:
    return struct.pack("<I", value)


def i32(value: int) -> bytes:
    return struct.pack("<i", value)


def f32(*values: float) -> bytes:
    return struct.pack(f"<{len(values)}f", *values)


def sstr(text: str | bytes, length: Callable[[int], bytes] = u32) -> bytes:
    raw = text.encode("cp949") if isinstance(text, str) else text
    return length(len(raw)) + raw


def counted(
    items: Iterable[bytes], length: Callable[[int], bytes] = u32
) -> bytes:
    items = list(items)
    return length(len(items)) + b"".join(items)


def signature(magic: bytes, version: bytes) -> bytes:
    assert len(magic) == 8 and len(version) == 4
    return magic + version


# Effect containers ------------------------------------------------------------
def source(
    tag: str | None = None,
    payload: bytes = b"",
    *,
    subtype: int = 0,
    flag: int = 0,
    start: float = 0.0,
    end: float = 0.0,
    extra: float = 0.0,
) -> bytes:
    """Optional command slot; ``tag=None`` writes the absent marker."""
    if tag is None:
        return u8(0)
    return (
        u8(1)
        + sstr(tag)
        + u8(subtype)
        + u8(flag)
        + f32(start, end, extra)
        + payload
    )


def tagged(tag: str, payload: bytes = b"") -> bytes:
    return sstr(tag) + payload


def effect_resource(
    two_sided: bool = False,
    ops: Sequence[int] = (0,) * 8,
    meshes: Iterable[tuple[str, Sequence[str]]] = (),
) -> bytes:
    body = u32(1 if two_sided else 0) + b"".join(u32(op) for op in ops)
    return body + counted(
        sstr(mesh) + counted(sstr(t) for t in textures)
        for mesh, textures in meshes
    )


def effect_node(
    name: str,
    *,
    controllers: Iterable[bytes] = (),
    parameters: Iterable[bytes] = (),
    emitters: Iterable[bytes] = (),
    lifetime: bytes | None = None,
    view_mode: bytes | None = None,
    render: bytes | None = None,
    scalars: tuple[int, ...] = (0, 0, 0, 0, 0, 0, 0, 0),
    resource: bytes | None = None,
    children: Iterable[bytes] = (),
    gap: bytes = b"",
    global_unknown: int = 0,
) -> bytes:
    """One effect node; ``gap`` is padding skipped via the data offset."""
    head = sstr(name) + counted(controllers)
    b0, b1, d0, d1, d2, b2, d3, b3 = scalars
    body = (
        u32(global_unknown)
        + counted(parameters)
        + counted([])
        + counted(emitters)
        + counted([])
        + (lifetime or source())
        + counted([])
        + u8(b0)
        + u8(b1)
        + u32(d0)
        + u32(d1)
        + u32(d2)
        + u8(b2)
        + u32(d3)
        + u8(b3)
        + (view_mode or source())
        + (resource or effect_resource())
        + (render or source())
        + counted([])
        + counted([])
        + counted(children)
    )
    return u32(len(head) + len(gap)) + head + gap + body


def effect_file(
    root: bytes, version: bytes = b"0010", extra: Sequence[int] = ()
) -> bytes:
    return (
        signature(b"JMXVEFF ", version)
        + b"".join(u32(v) for v in extra)
        + root
    )


# Offset-section containers -----------------------------------------------------
def place(
    start: int, sections: Sequence[tuple[str, bytes]]
) -> tuple[dict[str, int], bytes]:
    """Lay sections out back to back from ``start``; returns offsets + blob."""
    offsets: dict[str, int] = {}
    blob = b""
    for key, data in sections:
        offsets[key] = start + len(blob)
        blob += data
    return offsets, blob


# Whole files ------------------------------------------------------------------
def texture_file(payload: bytes = b"DDS " + bytes(12)) -> bytes:
    return signature(b"JMXVDDJ ", b"1000") + u32(len(payload) + 8) + u32(124) + payload
