"""JMXVDDJ texture wrapper around an embedded DDS payload."""

from __future__ import annotations

from dataclasses import dataclass

from ..decoding.cursor import Cursor
from ..decoding.primitives import raw_bytes, u32
from ..decoding.signature import FormatInfo, expect_signature

__all__ = ["MAGIC", "VERSIONS", "FORMAT", "Texture", "decode"]

MAGIC = b"JMXVDDJ "
VERSIONS = (b"1000",)

# The stored texture size also counts its own field and the header length.
SIZE_FIELDS = 8


@dataclass(slots=True)
class Texture:
    version: str
    texture_size: int
    header_len: int
    data: bytes

    @property
    def is_dds(self) -> bool:
        return self.data[:4] == b"DDS "


def decode(data: bytes) -> Texture:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    size = u32(cur)
    header_len = u32(cur)
    payload = raw_bytes(cur, max(size - SIZE_FIELDS, 0))
    return Texture(version.decode("ascii"), size, header_len, payload)


FORMAT = FormatInfo(
    name="texture",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".ddj",),
    decode=decode,
)
