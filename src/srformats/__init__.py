"""Decoders for the JMXV family of binary game-asset containers."""

from .api import (
    DecodeOptions,
    DecodeOutcome,
    ScanResult,
    decode,
    decode_file,
    decode_many,
    inspect_file,
)
from .decoding.errors import (
    DecodeError,
    OffsetOutOfBounds,
    TagMismatch,
    UnexpectedEof,
    UnknownBitflags,
    UnknownEnumValue,
    UnknownVariant,
    UnsupportedVersion,
)
from .serialize import dumps, to_data

__version__ = "0.1.0"

__all__ = [
    "DecodeOptions",
    "DecodeOutcome",
    "ScanResult",
    "decode",
    "decode_file",
    "decode_many",
    "inspect_file",
    "DecodeError",
    "UnexpectedEof",
    "TagMismatch",
    "UnsupportedVersion",
    "UnknownVariant",
    "UnknownBitflags",
    "OffsetOutOfBounds",
    "UnknownEnumValue",
    "dumps",
    "to_data",
]
