from .cursor import Cursor
from .errors import (
    DecodeError,
    UnexpectedEof,
    TagMismatch,
    UnsupportedVersion,
    UnknownVariant,
    UnknownBitflags,
    OffsetOutOfBounds,
    UnknownEnumValue,
)
from .sections import Section, resolve, resolve_sections
from .sequences import counted, counted_u8, counted_u16, counted_u32, repeat
from .variants import Variant, VariantTable, optional

__all__ = [
    "Cursor",
    "DecodeError",
    "UnexpectedEof",
    "TagMismatch",
    "UnsupportedVersion",
    "UnknownVariant",
    "UnknownBitflags",
    "OffsetOutOfBounds",
    "UnknownEnumValue",
    "Section",
    "resolve",
    "resolve_sections",
    "counted",
    "counted_u8",
    "counted_u16",
    "counted_u32",
    "repeat",
    "Variant",
    "VariantTable",
    "optional",
]
