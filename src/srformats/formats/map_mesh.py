"""JMXVMAPM terrain mesh for one map region.

A region is a 6x6 grid of blocks stored row-major with no header beyond the
signature. Each block has a fixed-width name, a cell grid and trailing
per-block terrain data.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List

from ..decoding.cursor import Cursor
from ..decoding.primitives import f32, fixed_string, raw_bytes, u8
from ..decoding.sequences import repeat
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "BLOCKS_PER_SIDE",
    "CELLS_PER_BLOCK",
    "MapMeshCell",
    "MapBlock",
    "MapMesh",
    "decode",
]

MAGIC = b"JMXVMAPM"
VERSIONS = (b"1000",)

BLOCKS_PER_SIDE = 6
CELLS_PER_BLOCK = 16 * 16 + 1
BLOCK_NAME_SIZE = 6
EXTRA_DATA_SIZE = 256
TRAILER_SIZE = 20

_CELL = struct.Struct("<IHB")


@dataclass(slots=True)
class MapMeshCell:
    height: int
    texture: int
    brightness: int


@dataclass(slots=True)
class MapBlock:
    name: str
    cells: List[MapMeshCell]
    density: int
    unk0: int
    sea_level: float
    extra_data: bytes
    height_min: float
    height_max: float
    unk1: bytes


@dataclass(slots=True)
class MapMesh:
    version: str
    # Row-major, BLOCKS_PER_SIDE squared.
    blocks: List[MapBlock]

    def block_at(self, x: int, z: int) -> MapBlock:
        return self.blocks[z * BLOCKS_PER_SIDE + x]


def _cell(cur: Cursor) -> MapMeshCell:
    return MapMeshCell(*cur.unpack(_CELL, "map cell"))


def _block(cur: Cursor) -> MapBlock:
    return MapBlock(
        name=fixed_string(cur, BLOCK_NAME_SIZE),
        cells=repeat(cur, _cell, CELLS_PER_BLOCK),
        density=u8(cur),
        unk0=u8(cur),
        sea_level=f32(cur),
        extra_data=raw_bytes(cur, EXTRA_DATA_SIZE),
        height_min=f32(cur),
        height_max=f32(cur),
        unk1=raw_bytes(cur, TRAILER_SIZE),
    )


def decode(data: bytes) -> MapMesh:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    blocks = repeat(cur, _block, BLOCKS_PER_SIDE * BLOCKS_PER_SIDE)
    return MapMesh(version.decode("ascii"), blocks)


FORMAT = FormatInfo(
    name="map_mesh",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".m",),
    decode=decode,
)
