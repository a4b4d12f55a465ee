"""JMXVBSK skeleton: a flat bone list with parent/child names."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..decoding.cursor import Cursor
from ..decoding.primitives import (
    Vector3,
    Vector4,
    sized_string,
    u8,
    u32,
    vector3,
    vector4,
)
from ..decoding.sequences import counted
from ..decoding.signature import FormatInfo, expect_signature

__all__ = ["MAGIC", "VERSIONS", "FORMAT", "Bone", "Skeleton", "decode"]

MAGIC = b"JMXVBSK "
VERSIONS = (b"0101",)


@dataclass(slots=True)
class Bone:
    unk: int
    name: str
    parent_name: str
    rotation_to_parent: Vector4
    translation_to_parent: Vector3
    rotation_to_origin: Vector4
    translation_to_origin: Vector3
    rotation_to_unknown: Vector4
    translation_to_unknown: Vector3
    children: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Skeleton:
    version: str
    bones: List[Bone]
    unk0: int
    unk1: int

    def by_name(self) -> Dict[str, Bone]:
        return {bone.name: bone for bone in self.bones}

    def roots(self) -> List[Bone]:
        """Bones whose parent is not part of this skeleton."""
        names = {bone.name for bone in self.bones}
        return [bone for bone in self.bones if bone.parent_name not in names]


def _bone(cur: Cursor) -> Bone:
    return Bone(
        unk=u8(cur),
        name=sized_string(cur),
        parent_name=sized_string(cur),
        rotation_to_parent=vector4(cur),
        translation_to_parent=vector3(cur),
        rotation_to_origin=vector4(cur),
        translation_to_origin=vector3(cur),
        rotation_to_unknown=vector4(cur),
        translation_to_unknown=vector3(cur),
        children=counted(cur, sized_string),
    )


def decode(data: bytes) -> Skeleton:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    return Skeleton(version.decode("ascii"), counted(cur, _bone), u32(cur), u32(cur))


FORMAT = FormatInfo(
    name="skeleton",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".bsk",),
    decode=decode,
)
