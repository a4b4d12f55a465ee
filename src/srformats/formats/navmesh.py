"""JMXVNVM terrain navigation mesh for one map region.

Everything is sequential. Object entries are u16-counted, cell entry lists
are u8-counted, and the file ends with two fixed-size grids: a 96x96 texture
map (four u16 per tile) and a 97x97 height map.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntFlag
from typing import List, Tuple

from ..decoding.cursor import Cursor
from ..decoding.flags import flags_u16
from ..decoding.primitives import (
    Vector2,
    Vector3,
    f32,
    u8,
    u16,
    u32,
    vector2,
    vector3,
)
from ..decoding.sequences import counted, repeat
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "TILES_PER_SIDE",
    "HEIGHTS_PER_SIDE",
    "CollisionFlag",
    "EventZoneFlag",
    "NavEntry",
    "NavCell",
    "NavRegionLink",
    "NavCellLink",
    "NavigationMesh",
    "decode",
]

MAGIC = b"JMXVNVM "
VERSIONS = (b"1000",)

TILES_PER_SIDE = 96
HEIGHTS_PER_SIDE = TILES_PER_SIDE + 1

_TEXTURE_MAP = struct.Struct(f"<{TILES_PER_SIDE * TILES_PER_SIDE * 4}H")
_HEIGHT_MAP = struct.Struct(f"<{HEIGHTS_PER_SIDE * HEIGHTS_PER_SIDE}f")
_MOUNT_POINT = struct.Struct("<6B")


class CollisionFlag(IntFlag):
    HAS_COLLISION = 0xFFFF


class EventZoneFlag(IntFlag):
    UNK0 = 0x1
    HAS_COLLISION = 0x100


_collision_flag = flags_u16(CollisionFlag)
_event_zone_flag = flags_u16(EventZoneFlag)


@dataclass(slots=True)
class NavEntry:
    id: int
    position: Vector3
    collision_flag: CollisionFlag
    yaw: float
    unique_id: int
    scale: int
    event_zone_flag: EventZoneFlag
    region_id: int
    mount_points: List[Tuple[int, ...]] = field(default_factory=list)


@dataclass(slots=True)
class NavCell:
    min: Vector2
    max: Vector2
    entries: List[int] = field(default_factory=list)


@dataclass(slots=True)
class NavRegionLink:
    min: Vector2
    max: Vector2
    line_flag: int
    line_source: int
    line_destination: int
    cell_source: int
    cell_destination: int
    region_source: int
    region_destination: int


@dataclass(slots=True)
class NavCellLink:
    min: Vector2
    max: Vector2
    line_flag: int
    line_source: int
    line_destination: int
    cell_source: int
    cell_destination: int


@dataclass(slots=True)
class NavigationMesh:
    version: str
    entries: List[NavEntry]
    extra_count: int
    cells: List[NavCell]
    region_links: List[NavRegionLink]
    cell_links: List[NavCellLink]
    # Row-major, TILES_PER_SIDE squared tuples of four u16.
    texture_map: List[Tuple[int, int, int, int]]
    # Row-major, HEIGHTS_PER_SIDE squared floats.
    height_map: List[float]

    def height_at(self, x: int, z: int) -> float:
        return self.height_map[z * HEIGHTS_PER_SIDE + x]


def _mount_point(cur: Cursor) -> Tuple[int, ...]:
    return cur.unpack(_MOUNT_POINT, "mount point")


def _entry(cur: Cursor) -> NavEntry:
    return NavEntry(
        id=u32(cur),
        position=vector3(cur),
        collision_flag=_collision_flag(cur),
        yaw=f32(cur),
        unique_id=u16(cur),
        scale=u16(cur),
        event_zone_flag=_event_zone_flag(cur),
        region_id=u16(cur),
        mount_points=counted(cur, _mount_point, u16),
    )


def _cell(cur: Cursor) -> NavCell:
    return NavCell(vector2(cur), vector2(cur), counted(cur, u16, u8))


def _region_link(cur: Cursor) -> NavRegionLink:
    return NavRegionLink(
        vector2(cur), vector2(cur), *repeat(cur, u8, 3), *repeat(cur, u16, 4)
    )


def _cell_link(cur: Cursor) -> NavCellLink:
    return NavCellLink(
        vector2(cur), vector2(cur), *repeat(cur, u8, 3), *repeat(cur, u16, 2)
    )


def _texture_map(cur: Cursor) -> List[Tuple[int, int, int, int]]:
    flat = cur.unpack(_TEXTURE_MAP, "texture map")
    return [tuple(flat[i : i + 4]) for i in range(0, len(flat), 4)]


def decode(data: bytes) -> NavigationMesh:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    entries = counted(cur, _entry, u16)
    cell_count = u32(cur)
    extra_count = u32(cur)
    cells = repeat(cur, _cell, cell_count)
    return NavigationMesh(
        version=version.decode("ascii"),
        entries=entries,
        extra_count=extra_count,
        cells=cells,
        region_links=counted(cur, _region_link),
        cell_links=counted(cur, _cell_link),
        texture_map=_texture_map(cur),
        height_map=list(cur.unpack(_HEIGHT_MAP, "height map")),
    )


FORMAT = FormatInfo(
    name="navmesh",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".nvm",),
    decode=decode,
)
