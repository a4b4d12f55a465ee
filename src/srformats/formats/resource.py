"""JMXVRES resource descriptor.

The header holds eight absolute section offsets followed by resource
metadata. Every section except sound effects is resolved from its own offset;
the sound-effect offset is kept as a plain header field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..decoding.cursor import Cursor
from ..decoding.primitives import (
    Vector2,
    f32,
    raw_bytes,
    sized_string,
    u32,
    vector2,
    vector6,
)
from ..decoding.sections import Section, resolve_sections
from ..decoding.sequences import counted, repeat
from ..decoding.signature import FormatInfo, expect_signature
from .common import AnimationType, ResourceType, animation_type, resource_type

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "ResourceHeader",
    "BoundingBox",
    "MaterialDescriptor",
    "MeshPath",
    "Animation",
    "SkeletonPath",
    "MeshGroup",
    "AnimationEvent",
    "AnimationGroupEntry",
    "AnimationGroup",
    "ResourceFile",
    "decode",
    "decode_header",
]

MAGIC = b"JMXVRES "
VERSIONS = (b"0109",)

EXTRA_BOUNDING_DATA_SIZE = 64


@dataclass(slots=True)
class ResourceHeader:
    version: str
    material_offset: int
    mesh_offset: int
    skeleton_offset: int
    animation_offset: int
    mesh_group_offset: int
    animation_group_offset: int
    sound_effect_offset: int
    bounding_box_offset: int
    unk0: int
    unk1: int
    unk2: int
    unk3: int
    unk4: int
    resource_type: ResourceType
    name: str


@dataclass(slots=True)
class BoundingBox:
    root_mesh: str
    bounding_box0: Tuple[float, ...]
    bounding_box1: Tuple[float, ...]
    extra_bounding_data: bytes = b""


@dataclass(slots=True)
class MaterialDescriptor:
    id: int
    path: str


@dataclass(slots=True)
class MeshPath:
    path: str
    extra: Optional[int] = None


@dataclass(slots=True)
class Animation:
    unk0: int
    unk1: int
    paths: List[str] = field(default_factory=list)


@dataclass(slots=True)
class SkeletonPath:
    path: str
    extra: bytes = b""


@dataclass(slots=True)
class MeshGroup:
    name: str
    file_indices: List[int] = field(default_factory=list)


@dataclass(slots=True)
class AnimationEvent:
    key_time: int
    type: int
    unk0: int
    unk1: int


@dataclass(slots=True)
class AnimationGroupEntry:
    type: AnimationType
    file_index: int
    events: List[AnimationEvent]
    walk_length: float
    walk_graph: List[Vector2] = field(default_factory=list)


@dataclass(slots=True)
class AnimationGroup:
    name: str
    animations: List[AnimationGroupEntry] = field(default_factory=list)


@dataclass(slots=True)
class ResourceFile:
    header: ResourceHeader
    bounding_box: BoundingBox
    material_sets: List[MaterialDescriptor]
    mesh_paths: List[MeshPath]
    animation: Animation
    skeleton_paths: List[SkeletonPath]
    mesh_groups: List[MeshGroup]
    animation_groups: List[AnimationGroup]


def _header(cur: Cursor) -> ResourceHeader:
    version = expect_signature(cur, MAGIC, VERSIONS)
    offsets = repeat(cur, u32, 8)
    unknown = repeat(cur, u32, 5)
    return ResourceHeader(
        version.decode("ascii"),
        *offsets,
        *unknown,
        resource_type=resource_type(cur),
        name=sized_string(cur),
    )


def _bounding_box(cur: Cursor) -> BoundingBox:
    root_mesh = sized_string(cur)
    box0 = vector6(cur)
    box1 = vector6(cur)
    extra = raw_bytes(cur, EXTRA_BOUNDING_DATA_SIZE) if u32(cur) else b""
    return BoundingBox(root_mesh, box0, box1, extra)


def _material(cur: Cursor) -> MaterialDescriptor:
    return MaterialDescriptor(u32(cur), sized_string(cur))


def _animation(cur: Cursor) -> Animation:
    return Animation(u32(cur), u32(cur), counted(cur, sized_string))


def _skeleton_path(cur: Cursor) -> SkeletonPath:
    path = sized_string(cur)
    return SkeletonPath(path, raw_bytes(cur, u32(cur)))


def _mesh_group(cur: Cursor) -> MeshGroup:
    return MeshGroup(sized_string(cur), counted(cur, u32))


def _event(cur: Cursor) -> AnimationEvent:
    return AnimationEvent(*repeat(cur, u32, 4))


def _animation_entry(cur: Cursor) -> AnimationGroupEntry:
    kind = animation_type(cur)
    file_index = u32(cur)
    events = counted(cur, _event)
    points = u32(cur)
    walk_length = f32(cur)
    return AnimationGroupEntry(
        kind, file_index, events, walk_length, repeat(cur, vector2, points)
    )


def _animation_group(cur: Cursor) -> AnimationGroup:
    return AnimationGroup(sized_string(cur), counted(cur, _animation_entry))


def _layout(header: ResourceHeader) -> Dict[str, Section]:
    # Mesh entries carry a trailing u32 only when unk0 == 1.
    has_mesh_extra = header.unk0 == 1

    def mesh_path(cur: Cursor) -> MeshPath:
        path = sized_string(cur)
        return MeshPath(path, u32(cur) if has_mesh_extra else None)

    return {
        "bounding_box": Section("bounding_box_offset", _bounding_box),
        "material_sets": Section(
            "material_offset", lambda cur: counted(cur, _material)
        ),
        "mesh_paths": Section("mesh_offset", lambda cur: counted(cur, mesh_path)),
        "animation": Section("animation_offset", _animation),
        "skeleton_paths": Section(
            "skeleton_offset", lambda cur: counted(cur, _skeleton_path)
        ),
        "mesh_groups": Section(
            "mesh_group_offset", lambda cur: counted(cur, _mesh_group)
        ),
        "animation_groups": Section(
            "animation_group_offset", lambda cur: counted(cur, _animation_group)
        ),
    }


def decode_header(data: bytes) -> ResourceHeader:
    return _header(Cursor(data))


def decode(data: bytes) -> ResourceFile:
    header = decode_header(data)
    return ResourceFile(header, **resolve_sections(data, header, _layout(header)))


FORMAT = FormatInfo(
    name="resource",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".bsr",),
    decode=decode,
    decode_header=decode_header,
)
