"""JMXVCPD compound object: a named bundle of resource descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..decoding.cursor import Cursor
from ..decoding.primitives import sized_string, u32
from ..decoding.sections import Section, resolve_sections
from ..decoding.sequences import counted, repeat
from ..decoding.signature import FormatInfo, expect_signature
from .common import ResourceType, resource_type

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "CompoundHeader",
    "Compound",
    "decode",
    "decode_header",
]

MAGIC = b"JMXVCPD "
VERSIONS = (b"0101",)


@dataclass(slots=True)
class CompoundHeader:
    version: str
    collision_resource_offset: int
    resource_list_offset: int
    unk0: int
    unk1: int
    unk2: int
    unk3: int
    unk4: int
    resource_type: ResourceType
    name: str
    unk5: int
    unk6: int


@dataclass(slots=True)
class Compound:
    header: CompoundHeader
    collision_resource_path: str
    resource_paths: List[str] = field(default_factory=list)


LAYOUT = {
    "collision_resource_path": Section("collision_resource_offset", sized_string),
    "resource_paths": Section(
        "resource_list_offset", lambda cur: counted(cur, sized_string)
    ),
}


def _header(cur: Cursor) -> CompoundHeader:
    version = expect_signature(cur, MAGIC, VERSIONS)
    return CompoundHeader(
        version.decode("ascii"),
        *repeat(cur, u32, 7),
        resource_type=resource_type(cur),
        name=sized_string(cur),
        unk5=u32(cur),
        unk6=u32(cur),
    )


def decode_header(data: bytes) -> CompoundHeader:
    return _header(Cursor(data))


def decode(data: bytes) -> Compound:
    header = decode_header(data)
    return Compound(header, **resolve_sections(data, header, LAYOUT))


FORMAT = FormatInfo(
    name="compound",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".cpd",),
    decode=decode,
    decode_header=decode_header,
)
