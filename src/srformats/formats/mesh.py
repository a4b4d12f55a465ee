"""JMXVBMS binary mesh.

Header: eight absolute section offsets, three unknown u32, ``NavFlags``,
sub-primitive count, ``VertexFlags``, u32, name, material name, u32.

Both flag words are strict. Several sections depend on header state: the
light-map flag adds a second UV set per vertex plus a trailing light-map
path, skin data has one bone-index record per decoded vertex, and nav-mesh
records grow optional fields per ``NavFlags`` bit. A nav-mesh offset of 0
means the mesh has none.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Dict, List, Optional, Tuple

from ..decoding.cursor import Cursor
from ..decoding.flags import flags_u32
from ..decoding.primitives import (
    Vector2,
    Vector3,
    bool32,
    f32,
    i32,
    sized_string,
    u8,
    u16,
    u32,
    vector2,
    vector3,
    vector6,
)
from ..decoding.sections import Section, resolve, resolve_sections
from ..decoding.sequences import counted, repeat
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "VertexFlags",
    "NavFlags",
    "MeshHeader",
    "Vertex",
    "VertexSection",
    "BoneIndexData",
    "SkinData",
    "Face",
    "ClothVertex",
    "ClothEdge",
    "ClothSimParams",
    "ClothEdges",
    "Gate",
    "NavVertex",
    "NavCell",
    "ObjectLine",
    "NavMesh",
    "Mesh",
    "decode",
    "decode_header",
]

MAGIC = b"JMXVBMS "
VERSIONS = (b"0109", b"0110")


class VertexFlags(IntFlag):
    HAS_LIGHT_MAP = 0x400
    UNKNOWN = 0x800
    UNKNOWN2 = 0x1000


class NavFlags(IntFlag):
    # Object lines carry an extra byte.
    UNK0 = 0x1
    # Ground cells carry an extra byte.
    UNK1 = 0x2
    # Event names follow the inline list.
    UNK2 = 0x4
    UNK3 = 0x8


_vertex_flags = flags_u32(VertexFlags)
_nav_flags = flags_u32(NavFlags)


@dataclass(slots=True)
class MeshHeader:
    version: str
    vertex: int
    skin: int
    face: int
    cloth_vertex: int
    cloth_edge: int
    bounding_box: int
    gate: int
    nav_mesh: int
    unk0: int
    unk1: int
    unk3: int
    nav_flags: NavFlags
    sub_prim_count: int
    vertex_flags: VertexFlags
    unk4: int
    name: str
    material: str
    unk5: int

    @property
    def has_light_map(self) -> bool:
        return VertexFlags.HAS_LIGHT_MAP in self.vertex_flags


@dataclass(slots=True)
class Vertex:
    position: Vector3
    normal: Vector3
    uv0: Vector2
    uv1: Optional[Vector2]
    float0: float
    int0: int
    int1: int


@dataclass(slots=True)
class VertexSection:
    vertices: List[Vertex] = field(default_factory=list)
    light_map_path: Optional[str] = None


@dataclass(slots=True)
class BoneIndexData:
    index0: int
    weight0: int
    index1: int
    weight1: int


@dataclass(slots=True)
class SkinData:
    bones: List[str]
    vertex_bones: List[BoneIndexData]


@dataclass(slots=True)
class Face:
    indices: Tuple[int, int, int]


@dataclass(slots=True)
class ClothVertex:
    max_distance: float
    is_pinned: bool


@dataclass(slots=True)
class ClothEdge:
    vertex_index0: int
    vertex_index1: int
    max_distance: float


@dataclass(slots=True)
class ClothSimParams:
    unk0: int
    unk1: float
    unk2: float
    unk3: float
    unk4: float
    unk5: float
    unk6: float
    unk7: float
    unk8: int


@dataclass(slots=True)
class ClothEdges:
    edges: List[ClothEdge]
    edge_data: List[int]
    params: ClothSimParams


@dataclass(slots=True)
class Gate:
    name: str
    vertices: List[Vector3] = field(default_factory=list)
    faces: List[Face] = field(default_factory=list)


@dataclass(slots=True)
class NavVertex:
    position: Vector3
    flag: int


@dataclass(slots=True)
class NavCell:
    face: Face
    flag: int
    extra: Optional[int] = None


@dataclass(slots=True)
class ObjectLine:
    vertex_source: int
    vertex_destination: int
    # Neighbour cell indices; 0xFFFF means none.
    cell_source: int
    cell_destination: int
    collision_flag: int
    extra: Optional[int] = None


@dataclass(slots=True)
class NavMesh:
    vertices: List[NavVertex]
    ground: List[NavCell]
    outlines: List[ObjectLine]
    inlines: List[ObjectLine]
    events: List[str]
    unk0: float
    unk1: float
    unk2: int
    unk3: int
    grid: List[List[int]] = field(default_factory=list)


@dataclass(slots=True)
class Mesh:
    header: MeshHeader
    vertices: List[Vertex]
    light_map_path: Optional[str]
    skin: Optional[SkinData]
    faces: List[Face]
    cloth_vertices: List[ClothVertex]
    cloth_edges: Optional[ClothEdges]
    bounding_box: Tuple[float, ...]
    gates: List[Gate]
    nav_mesh: Optional[NavMesh]


def _header(cur: Cursor) -> MeshHeader:
    version = expect_signature(cur, MAGIC, VERSIONS)
    offsets = repeat(cur, u32, 8)
    unknown = repeat(cur, u32, 3)
    return MeshHeader(
        version.decode("ascii"),
        *offsets,
        *unknown,
        nav_flags=_nav_flags(cur),
        sub_prim_count=u32(cur),
        vertex_flags=_vertex_flags(cur),
        unk4=u32(cur),
        name=sized_string(cur),
        material=sized_string(cur),
        unk5=u32(cur),
    )


def _face(cur: Cursor) -> Face:
    return Face((u16(cur), u16(cur), u16(cur)))


def _cloth_vertex(cur: Cursor) -> ClothVertex:
    return ClothVertex(f32(cur), bool32(cur))


def _cloth_edge(cur: Cursor) -> ClothEdge:
    return ClothEdge(u32(cur), u32(cur), f32(cur))


def _cloth_params(cur: Cursor) -> ClothSimParams:
    return ClothSimParams(u32(cur), *repeat(cur, f32, 7), u32(cur))


def _cloth_edges(cur: Cursor) -> Optional[ClothEdges]:
    size = u32(cur)
    if size == 0:
        return None
    edges = repeat(cur, _cloth_edge, size)
    data = repeat(cur, u32, size)
    return ClothEdges(edges, data, _cloth_params(cur))


def _gate(cur: Cursor) -> Gate:
    return Gate(sized_string(cur), counted(cur, vector3), counted(cur, _face))


def _bone_index(cur: Cursor) -> BoneIndexData:
    return BoneIndexData(u8(cur), u16(cur), u8(cur), u16(cur))


def _nav_vertex(cur: Cursor) -> NavVertex:
    return NavVertex(vector3(cur), u8(cur))


def _nav_mesh_decoder(flags: NavFlags):
    line_extra = NavFlags.UNK0 in flags
    cell_extra = NavFlags.UNK1 in flags
    has_events = NavFlags.UNK2 in flags

    def cell(cur: Cursor) -> NavCell:
        face = _face(cur)
        flag = u16(cur)
        return NavCell(face, flag, u8(cur) if cell_extra else None)

    def line(cur: Cursor) -> ObjectLine:
        fields = repeat(cur, u16, 4)
        collision = u8(cur)
        return ObjectLine(*fields, collision, u8(cur) if line_extra else None)

    def decode_nav_mesh(cur: Cursor) -> NavMesh:
        return NavMesh(
            vertices=counted(cur, _nav_vertex),
            ground=counted(cur, cell),
            outlines=counted(cur, line),
            inlines=counted(cur, line),
            events=counted(cur, sized_string) if has_events else [],
            unk0=f32(cur),
            unk1=f32(cur),
            unk2=u32(cur),
            unk3=u32(cur),
            grid=counted(cur, lambda c: counted(c, u16)),
        )

    return decode_nav_mesh


def _layout(header: MeshHeader) -> Dict[str, Section]:
    light_map = header.has_light_map

    def vertex(cur: Cursor) -> Vertex:
        return Vertex(
            position=vector3(cur),
            normal=vector3(cur),
            uv0=vector2(cur),
            uv1=vector2(cur) if light_map else None,
            float0=f32(cur),
            int0=i32(cur),
            int1=i32(cur),
        )

    def vertex_section(cur: Cursor) -> VertexSection:
        vertices = counted(cur, vertex)
        path = sized_string(cur) if light_map else None
        return VertexSection(vertices, path)

    return {
        "vertex_section": Section("vertex", vertex_section),
        "faces": Section("face", lambda cur: counted(cur, _face)),
        "cloth_vertices": Section(
            "cloth_vertex", lambda cur: counted(cur, _cloth_vertex)
        ),
        "cloth_edges": Section("cloth_edge", _cloth_edges),
        "bounding_box": Section("bounding_box", vector6),
        "gates": Section("gate", lambda cur: counted(cur, _gate)),
        "nav_mesh": Section(
            "nav_mesh", _nav_mesh_decoder(header.nav_flags), optional=True
        ),
    }


def _skin_decoder(vertex_count: int):
    def decode_skin(cur: Cursor) -> Optional[SkinData]:
        bone_count = u32(cur)
        if bone_count == 0:
            return None
        bones = repeat(cur, sized_string, bone_count)
        return SkinData(bones, repeat(cur, _bone_index, vertex_count))

    return decode_skin


def decode_header(data: bytes) -> MeshHeader:
    return _header(Cursor(data))


def decode(data: bytes) -> Mesh:
    header = decode_header(data)
    sections = resolve_sections(data, header, _layout(header))
    vertex_section: VertexSection = sections.pop("vertex_section")
    # Skin records are per vertex, so the vertex section goes first.
    skin = resolve(
        data, header.skin, _skin_decoder(len(vertex_section.vertices)), name="skin"
    )
    return Mesh(
        header=header,
        vertices=vertex_section.vertices,
        light_map_path=vertex_section.light_map_path,
        skin=skin,
        **sections,
    )


FORMAT = FormatInfo(
    name="mesh",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".bms",),
    decode=decode,
    decode_header=decode_header,
)
