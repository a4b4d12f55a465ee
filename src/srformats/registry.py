"""Format dispatcher.

Routes a buffer to its decoder by the 8-byte magic tag at offset 0; the
decoder itself checks the version. File discovery uses the extension map,
which is advisory only: the magic tag always decides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .decoding.errors import tag_mismatch
from .decoding.signature import MAGIC_SIZE, SIGNATURE_SIZE, FormatInfo
from .formats import ALL_FORMATS

__all__ = [
    "FORMATS",
    "EXTENSIONS",
    "identify",
    "decode",
    "decode_header",
    "format_for_path",
    "describe",
]

FORMATS: Dict[bytes, FormatInfo] = {info.magic: info for info in ALL_FORMATS}

EXTENSIONS: Dict[str, FormatInfo] = {
    ext: info for info in ALL_FORMATS for ext in info.extensions
}


def identify(data: bytes) -> FormatInfo:
    magic = bytes(data[:MAGIC_SIZE])
    info = FORMATS.get(magic)
    if info is None:
        raise tag_mismatch(magic)
    return info


def decode(data: bytes) -> Any:
    return identify(data).decode(data)


def decode_header(data: bytes) -> Any:
    """Header record for offset-section formats, else the raw signature."""
    info = identify(data)
    if info.decode_header is not None:
        return info.decode_header(data)
    signature = bytes(data[:SIGNATURE_SIZE])
    return {
        "magic": info.label,
        "version": signature[MAGIC_SIZE:].decode("ascii", errors="replace"),
    }


def format_for_path(path: Union[str, Path]) -> Optional[FormatInfo]:
    return EXTENSIONS.get(Path(path).suffix.lower())


def describe() -> List[Dict[str, Any]]:
    return [
        {
            "name": info.name,
            "magic": info.label,
            "versions": [v.decode("ascii") for v in info.versions],
            "extensions": list(info.extensions),
        }
        for info in ALL_FORMATS
    ]
