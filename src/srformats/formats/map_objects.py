"""JMXVMAPO object placements for one map region: 144 u16-counted groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from ..decoding.cursor import Cursor
from ..decoding.primitives import Vector3, f32, u16, u32, vector3
from ..decoding.sequences import counted, repeat
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "GROUP_COUNT",
    "MapObject",
    "MapObjectGroup",
    "MapObjects",
    "decode",
]

MAGIC = b"JMXVMAPO"
VERSIONS = (b"1001",)

GROUP_COUNT = 144


@dataclass(slots=True)
class MapObject:
    id: int
    position: Vector3
    visibility_flag: int
    theta: float
    unique_id: int
    scale: int
    region: int


@dataclass(slots=True)
class MapObjectGroup:
    entries: List[MapObject] = field(default_factory=list)


@dataclass(slots=True)
class MapObjects:
    version: str
    groups: List[MapObjectGroup]

    def objects(self) -> Iterator[MapObject]:
        for group in self.groups:
            yield from group.entries


def _object(cur: Cursor) -> MapObject:
    return MapObject(
        u32(cur), vector3(cur), u16(cur), f32(cur), u32(cur), u16(cur), u16(cur)
    )


def _group(cur: Cursor) -> MapObjectGroup:
    return MapObjectGroup(counted(cur, _object, u16))


def decode(data: bytes) -> MapObjects:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    return MapObjects(version.decode("ascii"), repeat(cur, _group, GROUP_COUNT))


FORMAT = FormatInfo(
    name="map_objects",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".o2",),
    decode=decode,
)
