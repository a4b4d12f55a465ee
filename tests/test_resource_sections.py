from __future__ import annotations

import pytest

from srformats.decoding.errors import OffsetOutOfBounds, UnknownEnumValue
from srformats.decoding.primitives import Vector2
from srformats.formats.common import AnimationType, ResourceType
from srformats.formats.resource import (
    AnimationEvent,
    MaterialDescriptor,
    MeshPath,
    decode,
    decode_header,
)

from wire import counted, f32, place, signature, sstr, u8, u32

OFFSET_ORDER = (
    "material",
    "mesh",
    "skeleton",
    "animation",
    "mesh_group",
    "animation_group",
    "sound_effect",
    "bounding_box",
)


def _material(ident: int, name: str) -> bytes:
    return u32(ident) + sstr(f"mtrl/{name}.bmt")


def _anim() -> bytes:
    return (
        u32(0x3C)  # POSE
        + u32(2)
        + counted([u32(10) + u32(1) + u32(0) + u32(0)])
        + u32(2)
        + f32(1.5)
        + f32(0.0, 0.0, 1.0, 1.0)
    )


def _res_file(
    *,
    unk0: int = 0,
    resource_type: int = ResourceType.NPC,
    name: str = "npc",
    overrides: dict | None = None,
    extra_box: bool = False,
) -> bytes:
    header_size = 12 + 8 * 4 + 5 * 4 + 4 + 4 + len(name.encode("cp949"))
    mesh_extra = u32(5) if unk0 == 1 else b""
    box = sstr("root.bms") + f32(*range(6)) + f32(*range(6, 12))
    box += u32(1) + bytes(range(64)) if extra_box else u32(0)
    # Deliberately not in header order.
    offsets, blob = place(
        header_size,
        [
            ("bounding_box", box),
            ("animation_group", counted([sstr("default") + counted([_anim()])])),
            ("material", counted([_material(1, "a"), _material(2, "b")])),
            ("mesh", counted([sstr("mesh/a.bms") + mesh_extra])),
            ("skeleton", counted([sstr("skel.bsk") + counted([u8(1), u8(2)])])),
            ("animation", u32(3) + u32(4) + counted([sstr("idle.ban")])),
            ("mesh_group", counted([sstr("body") + counted([u32(0), u32(1)])])),
        ],
    )
    offsets["sound_effect"] = 0
    offsets.update(overrides or {})
    header = (
        signature(b"JMXVRES ", b"0109")
        + b"".join(u32(offsets[k]) for k in OFFSET_ORDER)
        + u32(unk0)
        + u32(0) * 4
        + u32(resource_type)
        + sstr(name)
    )
    assert len(header) == header_size
    return header + blob


def test_resource_sections_resolve_independently():
    res = decode(_res_file())
    assert res.header.resource_type is ResourceType.NPC
    assert res.header.name == "npc"
    assert res.bounding_box.root_mesh == "root.bms"
    assert res.bounding_box.bounding_box1 == tuple(float(v) for v in range(6, 12))
    assert res.bounding_box.extra_bounding_data == b""
    assert res.material_sets == [
        MaterialDescriptor(1, "mtrl/a.bmt"),
        MaterialDescriptor(2, "mtrl/b.bmt"),
    ]
    assert res.mesh_paths == [MeshPath("mesh/a.bms", None)]
    assert res.animation.paths == ["idle.ban"]
    assert res.skeleton_paths[0].extra == b"\x01\x02"
    assert res.mesh_groups[0].file_indices == [0, 1]


def test_animation_groups():
    group = decode(_res_file()).animation_groups[0]
    entry = group.animations[0]
    assert group.name == "default"
    assert entry.type is AnimationType.POSE
    assert entry.file_index == 2
    assert entry.events == [AnimationEvent(10, 1, 0, 0)]
    assert entry.walk_length == 1.5
    assert entry.walk_graph == [Vector2(0.0, 0.0), Vector2(1.0, 1.0)]


def test_mesh_entry_extra_depends_on_header():
    res = decode(_res_file(unk0=1))
    assert res.mesh_paths == [MeshPath("mesh/a.bms", 5)]


def test_extra_bounding_data():
    box = decode(_res_file(extra_box=True)).bounding_box
    assert box.extra_bounding_data == bytes(range(64))


def test_header_only():
    header = decode_header(_res_file())
    assert header.sound_effect_offset == 0
    assert header.material_offset > 0


def test_unknown_resource_type():
    with pytest.raises(UnknownEnumValue) as exc:
        decode(_res_file(resource_type=0x12345))
    assert exc.value.context["enum"] == "ResourceType"


def test_section_offset_out_of_bounds():
    with pytest.raises(OffsetOutOfBounds) as exc:
        decode(_res_file(overrides={"skeleton": 1 << 20}))
    assert exc.value.context["section"] == "skeleton_paths"
