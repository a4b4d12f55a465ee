"""JMXVMFO world map info: one byte of region data per region slot."""

from __future__ import annotations

from dataclasses import dataclass

from ..decoding.cursor import Cursor
from ..decoding.primitives import raw_bytes
from ..decoding.signature import FormatInfo, expect_signature

__all__ = ["MAGIC", "VERSIONS", "FORMAT", "REGION_DATA_SIZE", "MapInfo", "decode"]

MAGIC = b"JMXVMFO "
VERSIONS = (b"1000",)

HEADER_SIZE = 12
REGION_DATA_SIZE = 256 * 256


@dataclass(slots=True)
class MapInfo:
    version: str
    header: bytes
    region_data: bytes

    def region_byte(self, region_id: int) -> int:
        return self.region_data[region_id]


def decode(data: bytes) -> MapInfo:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    header = raw_bytes(cur, HEADER_SIZE)
    return MapInfo(version.decode("ascii"), header, raw_bytes(cur, REGION_DATA_SIZE))


FORMAT = FormatInfo(
    name="map_info",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".mfo",),
    decode=decode,
)
