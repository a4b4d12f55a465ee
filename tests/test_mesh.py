from __future__ import annotations

import pytest

from srformats.decoding.errors import OffsetOutOfBounds, UnknownBitflags
from srformats.decoding.primitives import Vector2, Vector3
from srformats.formats.mesh import (
    BoneIndexData,
    ClothVertex,
    Face,
    NavFlags,
    VertexFlags,
    decode,
    decode_header,
)

from wire import counted, f32, i32, place, signature, sstr, u8, u16, u32

OFFSET_ORDER = (
    "vertex",
    "skin",
    "face",
    "cloth_vertex",
    "cloth_edge",
    "bounding_box",
    "gate",
    "nav_mesh",
)


def _vertex(index: int, light_map: bool) -> bytes:
    out = f32(index, 0.0, 0.0) + f32(0.0, 1.0, 0.0) + f32(0.5, 0.5)
    if light_map:
        out += f32(0.25, 0.75)
    return out + f32(1.0) + i32(-1) + i32(index)


def _nav_mesh(flags: int) -> bytes:
    cell_extra = u8(9) if flags & NavFlags.UNK1 else b""
    line_extra = u8(7) if flags & NavFlags.UNK0 else b""
    line = u16(0) + u16(1) + u16(0) + u16(0xFFFF) + u8(3) + line_extra
    out = (
        counted([f32(0.0, 0.0, 0.0) + u8(1), f32(1.0, 0.0, 0.0) + u8(2)])
        + counted([u16(0) + u16(1) + u16(2) + u16(4) + cell_extra])
        + counted([line])
        + counted([])
    )
    if flags & NavFlags.UNK2:
        out += counted([sstr("door")])
    grid = counted([counted([u16(1), u16(2)])])
    return out + f32(1.0, 2.0) + u32(3) + u32(4) + grid


def _mesh_file(
    *,
    vertex_flags: int = 0,
    nav_flags: int = 0,
    vertices: int = 3,
    with_skin: bool = True,
    with_nav: bool = False,
    cloth_edges: bytes = u32(0),
    overrides: dict | None = None,
    version: bytes = b"0110",
) -> bytes:
    name, material = "body", "mtrl"
    header_size = 12 + 8 * 4 + 3 * 4 + 4 * 4 + 4 + len(name) + 4 + len(material) + 4
    light_map = bool(vertex_flags & VertexFlags.HAS_LIGHT_MAP)
    vertex_section = counted(_vertex(i, light_map) for i in range(vertices))
    if light_map:
        vertex_section += sstr("lm.ddj")
    skin = u32(0)
    if with_skin:
        bone = u8(0) + u16(100) + u8(1) + u16(0)
        skin = u32(2) + sstr("Bip01") + sstr("Bip01 Spine") + bone * vertices
    sections = [
        ("vertex", vertex_section),
        ("skin", skin),
        ("face", counted([u16(0) + u16(1) + u16(2)])),
        ("cloth_vertex", counted([f32(0.5) + u32(1)])),
        ("cloth_edge", cloth_edges),
        ("bounding_box", f32(-1, -1, -1, 1, 1, 1)),
        ("gate", counted([sstr("g0") + counted([f32(0, 0, 0)]) + counted([])])),
    ]
    if with_nav:
        sections.append(("nav_mesh", _nav_mesh(nav_flags)))
    offsets, blob = place(header_size, sections)
    offsets.setdefault("nav_mesh", 0)
    offsets.update(overrides or {})
    header = (
        signature(b"JMXVBMS ", version)
        + b"".join(u32(offsets[k]) for k in OFFSET_ORDER)
        + u32(0) * 3
        + u32(nav_flags)
        + u32(1)
        + u32(vertex_flags)
        + u32(0)
        + sstr(name)
        + sstr(material)
        + u32(0)
    )
    assert len(header) == header_size
    return header + blob


def test_plain_mesh():
    mesh = decode(_mesh_file())
    assert mesh.header.version == "0110"
    assert mesh.header.name == "body"
    assert mesh.header.material == "mtrl"
    assert not mesh.header.has_light_map
    assert len(mesh.vertices) == 3
    assert mesh.vertices[2].position == Vector3(2.0, 0.0, 0.0)
    assert mesh.vertices[2].uv1 is None
    assert mesh.vertices[0].int0 == -1
    assert mesh.light_map_path is None
    assert mesh.faces == [Face((0, 1, 2))]
    assert mesh.cloth_vertices == [ClothVertex(0.5, True)]
    assert mesh.cloth_edges is None
    assert mesh.bounding_box == (-1.0, -1.0, -1.0, 1.0, 1.0, 1.0)
    assert mesh.gates[0].name == "g0"
    assert mesh.nav_mesh is None


def test_light_map_adds_second_uv_and_path():
    mesh = decode(_mesh_file(vertex_flags=VertexFlags.HAS_LIGHT_MAP))
    assert mesh.header.has_light_map
    assert all(v.uv1 == Vector2(0.25, 0.75) for v in mesh.vertices)
    assert mesh.vertices[1].int1 == 1
    assert mesh.light_map_path == "lm.ddj"


def test_skin_has_one_record_per_vertex():
    mesh = decode(_mesh_file(vertices=5))
    assert mesh.skin.bones == ["Bip01", "Bip01 Spine"]
    assert len(mesh.skin.vertex_bones) == 5
    assert mesh.skin.vertex_bones[0] == BoneIndexData(0, 100, 1, 0)


def test_no_bones_means_no_skin():
    assert decode(_mesh_file(with_skin=False)).skin is None


def test_cloth_edges():
    edges = (
        u32(1)
        + u32(0) + u32(1) + f32(0.5)
        + u32(42)
        + u32(1) + f32(*range(7)) + u32(2)
    )
    mesh = decode(_mesh_file(cloth_edges=edges))
    assert mesh.cloth_edges.edges[0].max_distance == 0.5
    assert mesh.cloth_edges.edge_data == [42]
    assert mesh.cloth_edges.params.unk8 == 2


@pytest.mark.parametrize(
    "nav_flags",
    [
        NavFlags(0),
        NavFlags.UNK0,
        NavFlags.UNK1 | NavFlags.UNK2,
        NavFlags.UNK0 | NavFlags.UNK1 | NavFlags.UNK2 | NavFlags.UNK3,
    ],
)
def test_nav_mesh_records_follow_flags(nav_flags):
    mesh = decode(_mesh_file(nav_flags=nav_flags, with_nav=True))
    nav = mesh.nav_mesh
    assert mesh.header.nav_flags == nav_flags
    assert [v.flag for v in nav.vertices] == [1, 2]
    cell = nav.ground[0]
    assert cell.face == Face((0, 1, 2))
    assert cell.flag == 4
    assert cell.extra == (9 if NavFlags.UNK1 in nav_flags else None)
    line = nav.outlines[0]
    assert line.cell_destination == 0xFFFF
    assert line.collision_flag == 3
    assert line.extra == (7 if NavFlags.UNK0 in nav_flags else None)
    assert nav.inlines == []
    assert nav.events == (["door"] if NavFlags.UNK2 in nav_flags else [])
    assert (nav.unk0, nav.unk1, nav.unk2, nav.unk3) == (1.0, 2.0, 3, 4)
    assert nav.grid == [[1, 2]]


def test_unknown_vertex_flag_bit():
    with pytest.raises(UnknownBitflags) as exc:
        decode_header(_mesh_file(vertex_flags=0x401))
    assert exc.value.raw == 0x401
    assert exc.value.context["unknown"] == 0x1
    assert exc.value.context["flags"] == "VertexFlags"


def test_unknown_nav_flag_bit():
    with pytest.raises(UnknownBitflags) as exc:
        decode(_mesh_file(nav_flags=0x10))
    assert exc.value.context["flags"] == "NavFlags"


def test_version_0109_accepted():
    assert decode(_mesh_file(version=b"0109")).header.version == "0109"


def test_nav_mesh_offset_out_of_bounds():
    with pytest.raises(OffsetOutOfBounds) as exc:
        decode(_mesh_file(overrides={"nav_mesh": 99999}))
    assert exc.value.context["section"] == "nav_mesh"
