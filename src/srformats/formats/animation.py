"""JMXVBAN skeletal animation clip."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..decoding.cursor import Cursor
from ..decoding.primitives import (
    Vector3,
    Vector4,
    bool32,
    sized_string,
    u32,
    vector3,
    vector4,
)
from ..decoding.sequences import counted
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "KeyFrame",
    "AnimatedBone",
    "AnimationClip",
    "decode",
]

MAGIC = b"JMXVBAN "
VERSIONS = (b"0102",)


@dataclass(slots=True)
class KeyFrame:
    rotation: Vector4
    translation: Vector3


@dataclass(slots=True)
class AnimatedBone:
    name: str
    keyframes: List[KeyFrame] = field(default_factory=list)


@dataclass(slots=True)
class AnimationClip:
    version: str
    unk0: int
    unk1: int
    name: str
    duration: int
    frames_per_second: int
    is_continuous: bool
    key_frame_times: List[int] = field(default_factory=list)
    animated_bones: List[AnimatedBone] = field(default_factory=list)


def _key_frame(cur: Cursor) -> KeyFrame:
    return KeyFrame(vector4(cur), vector3(cur))


def _animated_bone(cur: Cursor) -> AnimatedBone:
    return AnimatedBone(sized_string(cur), counted(cur, _key_frame))


def decode(data: bytes) -> AnimationClip:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    return AnimationClip(
        version=version.decode("ascii"),
        unk0=u32(cur),
        unk1=u32(cur),
        name=sized_string(cur),
        duration=u32(cur),
        frames_per_second=u32(cur),
        is_continuous=bool32(cur),
        key_frame_times=counted(cur, u32),
        animated_bones=counted(cur, _animated_bone),
    )


FORMAT = FormatInfo(
    name="animation",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".ban",),
    decode=decode,
)
