"""JMXVDOF dungeon layout: rooms, their connections and named groups.

The header carries eight absolute offsets followed by the dungeon name and
region id. Strings in this format are u16-length prefixed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..decoding.cursor import Cursor
from ..decoding.primitives import (
    Vector3,
    f32,
    small_sized_string,
    u8,
    u16,
    u32,
    vector3,
    vector6,
)
from ..decoding.sections import Section, resolve_sections
from ..decoding.sequences import counted, repeat
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "DungeonHeader",
    "RoomObjectPoint",
    "RoomObjectEntry",
    "RoomObject",
    "ObjectGroup",
    "Link",
    "Links",
    "Dungeon",
    "decode_header",
    "decode",
]

MAGIC = b"JMXVDOF "
VERSIONS = (b"0101",)

# Entry flag value that is followed by an extra u32 of water data.
WATER_ENTRY_FLAG = 0x04


@dataclass(slots=True)
class DungeonHeader:
    version: str
    room_objects: int
    object_connections: int
    links: int
    object_groups: int
    index_names: int
    unk0: int
    unk1: int
    bounding_boxes: int
    unk2: int
    unk3: int
    dungeon_name: str
    unk4: int
    unk5: int
    region_id: int


@dataclass(slots=True)
class RoomObjectPoint:
    name: str
    position: Vector3
    rotation: Vector3
    size: Vector3
    rotation2: Vector3
    unk0: float
    unk2: float
    unk1: float


@dataclass(slots=True)
class RoomObjectEntry:
    name: str
    path: str
    position: Vector3
    rotation: Vector3
    scale: Vector3
    flag: int
    water_extra: Optional[int]
    id: int
    unk0: float


@dataclass(slots=True)
class RoomObject:
    path: str
    name: str
    unk0: float
    position: Vector3
    yaw: float
    pitch: float
    aabb: Tuple[float, ...]
    unk1: float
    unk2: float
    unk3: float
    unk4: float
    unk5: float
    extra_a: Optional[Tuple[float, ...]]
    extra_b: Optional[Tuple[float, ...]]
    unk6: int
    room_index: int
    floor_index: int
    connected_objects: List[int] = field(default_factory=list)
    indirect_connected_objects: List[int] = field(default_factory=list)
    unk7: int = 0
    entries: List[RoomObjectEntry] = field(default_factory=list)
    points: List[RoomObjectPoint] = field(default_factory=list)


@dataclass(slots=True)
class ObjectGroup:
    name: str
    flag: int
    object_indices: List[int] = field(default_factory=list)


@dataclass(slots=True)
class Link:
    id: int
    connections: List[int] = field(default_factory=list)


@dataclass(slots=True)
class Links:
    unk0: int
    unk1: int
    unk2: int
    links: List[Link] = field(default_factory=list)


@dataclass(slots=True)
class Dungeon:
    header: DungeonHeader
    aabb: Tuple[float, ...]
    oobb: Tuple[float, ...]
    room_objects: List[RoomObject]
    links: Links
    object_connections: List[List[int]]
    room_names: List[str]
    floor_names: List[str]
    object_groups: List[ObjectGroup]

    def rooms_on_floor(self, floor_index: int) -> List[RoomObject]:
        return [o for o in self.room_objects if o.floor_index == floor_index]


def _header(cur: Cursor) -> DungeonHeader:
    version = expect_signature(cur, MAGIC, VERSIONS)
    offsets = repeat(cur, u32, 8)
    return DungeonHeader(
        version.decode("ascii"),
        *offsets,
        unk2=u16(cur),
        unk3=u16(cur),
        dungeon_name=small_sized_string(cur),
        unk4=u32(cur),
        unk5=u32(cur),
        region_id=u16(cur),
    )


def _point(cur: Cursor) -> RoomObjectPoint:
    return RoomObjectPoint(
        small_sized_string(cur),
        vector3(cur),
        vector3(cur),
        vector3(cur),
        vector3(cur),
        f32(cur),
        f32(cur),
        f32(cur),
    )


def _entry(cur: Cursor) -> RoomObjectEntry:
    name = small_sized_string(cur)
    path = small_sized_string(cur)
    position, rotation, scale = vector3(cur), vector3(cur), vector3(cur)
    flag = u32(cur)
    water_extra = u32(cur) if flag == WATER_ENTRY_FLAG else None
    return RoomObjectEntry(
        name, path, position, rotation, scale, flag, water_extra, u32(cur), f32(cur)
    )


def _room_object(cur: Cursor) -> RoomObject:
    obj = RoomObject(
        path=small_sized_string(cur),
        name=small_sized_string(cur),
        unk0=f32(cur),
        position=vector3(cur),
        yaw=f32(cur),
        pitch=f32(cur),
        aabb=vector6(cur),
        unk1=f32(cur),
        unk2=f32(cur),
        unk3=f32(cur),
        unk4=f32(cur),
        unk5=f32(cur),
        # Each extra block is announced by a u8 marker that is always present.
        extra_a=tuple(repeat(cur, f32, 4)) if u8(cur) == 0x01 else None,
        extra_b=tuple(repeat(cur, f32, 7)) if u8(cur) == 0x02 else None,
        unk6=u32(cur),
        room_index=u32(cur),
        floor_index=u32(cur),
    )
    obj.connected_objects = counted(cur, u32)
    obj.indirect_connected_objects = counted(cur, u32)
    entry_count = u32(cur)
    obj.unk7 = u32(cur)
    obj.entries = repeat(cur, _entry, entry_count)
    obj.points = counted(cur, _point)
    return obj


def _links(cur: Cursor) -> Links:
    return Links(
        u32(cur),
        u32(cur),
        u32(cur),
        counted(cur, lambda c: Link(u32(c), counted(c, u32))),
    )


def _group(cur: Cursor) -> ObjectGroup:
    return ObjectGroup(small_sized_string(cur), u32(cur), counted(cur, u32))


def _index_names(cur: Cursor) -> Tuple[List[str], List[str]]:
    return counted(cur, small_sized_string), counted(cur, small_sized_string)


LAYOUT: Dict[str, Section] = {
    "bounding_boxes": Section(
        "bounding_boxes", lambda cur: (vector6(cur), vector6(cur))
    ),
    "room_objects": Section("room_objects", lambda cur: counted(cur, _room_object)),
    "links": Section("links", _links),
    "object_connections": Section(
        "object_connections", lambda cur: counted(cur, lambda c: counted(c, u32))
    ),
    "index_names": Section("index_names", _index_names),
    "object_groups": Section("object_groups", lambda cur: counted(cur, _group)),
}


def decode_header(data: bytes) -> DungeonHeader:
    return _header(Cursor(data))


def decode(data: bytes) -> Dungeon:
    header = decode_header(data)
    sections = resolve_sections(data, header, LAYOUT)
    aabb, oobb = sections.pop("bounding_boxes")
    room_names, floor_names = sections.pop("index_names")
    return Dungeon(
        header=header,
        aabb=aabb,
        oobb=oobb,
        room_names=room_names,
        floor_names=floor_names,
        **sections,
    )


FORMAT = FormatInfo(
    name="dungeon",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".dof",),
    decode=decode,
    decode_header=decode_header,
)
