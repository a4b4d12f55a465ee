"""JMXVBMT material set."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import List, Optional

from ..decoding.cursor import Cursor
from ..decoding.flags import flags_u32
from ..decoding.primitives import (
    Vector4,
    bool8,
    f32,
    sized_string,
    u16,
    u32,
    vector4,
)
from ..decoding.sequences import counted
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "MaterialFlags",
    "NormalMap",
    "Material",
    "MaterialSet",
    "decode",
]

MAGIC = b"JMXVBMT "
VERSIONS = (b"0102",)


class MaterialFlags(IntFlag):
    UNK0 = 0x1
    UNK1 = 0x2
    UNK2 = 0x4
    UNK3 = 0x8
    UNK4 = 0x10
    UNK5 = 0x20
    UNK6 = 0x40
    UNK7 = 0x80
    UNK8 = 0x100
    UNK9 = 0x200
    UNK10 = 0x400
    UNK11 = 0x800
    UNK12 = 0x1000
    HAS_NORMAL_MAP = 0x2000


_material_flags = flags_u32(MaterialFlags)


@dataclass(slots=True)
class NormalMap:
    path: str
    unk: int


@dataclass(slots=True)
class Material:
    name: str
    diffuse: Vector4
    ambient: Vector4
    specular: Vector4
    emissive: Vector4
    specular_power: float
    flags: MaterialFlags
    diffuse_map: str
    unk0: float
    unk1: int
    absolute_diffuse_map_path: bool
    normal_map: Optional[NormalMap] = None


@dataclass(slots=True)
class MaterialSet:
    version: str
    materials: List[Material] = field(default_factory=list)


def _material(cur: Cursor) -> Material:
    material = Material(
        name=sized_string(cur),
        diffuse=vector4(cur),
        ambient=vector4(cur),
        specular=vector4(cur),
        emissive=vector4(cur),
        specular_power=f32(cur),
        flags=_material_flags(cur),
        diffuse_map=sized_string(cur),
        unk0=f32(cur),
        unk1=u16(cur),
        absolute_diffuse_map_path=bool8(cur),
    )
    if MaterialFlags.HAS_NORMAL_MAP in material.flags:
        material.normal_map = NormalMap(sized_string(cur), u32(cur))
    return material


def decode(data: bytes) -> MaterialSet:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    return MaterialSet(version.decode("ascii"), counted(cur, _material))


FORMAT = FormatInfo(
    name="material",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".bmt",),
    decode=decode,
)
