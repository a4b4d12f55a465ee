"""Error definitions for the decoding engine.

Every decoder raises one of the classes below and never catches them; the
first failure aborts the whole file. Only the batch layer (``api``) turns an
error into a per-file failure record.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_UNEXPECTED_EOF = "E_UNEXPECTED_EOF"
E_TAG_MISMATCH = "E_TAG_MISMATCH"
E_UNSUPPORTED_VERSION = "E_UNSUPPORTED_VERSION"
E_UNKNOWN_VARIANT = "E_UNKNOWN_VARIANT"
E_UNKNOWN_BITFLAGS = "E_UNKNOWN_BITFLAGS"
E_OFFSET_OUT_OF_BOUNDS = "E_OFFSET_OUT_OF_BOUNDS"
E_UNKNOWN_ENUM_VALUE = "E_UNKNOWN_ENUM_VALUE"


@dataclass
class DecodeError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class UnexpectedEof(DecodeError):
    pass


class TagMismatch(DecodeError):
    pass


class UnsupportedVersion(TagMismatch):
    pass


class UnknownVariant(DecodeError):
    @property
    def tag(self) -> str:
        return (self.context or {}).get("tag", "")


class UnknownBitflags(DecodeError):
    @property
    def raw(self) -> int:
        return (self.context or {}).get("raw", 0)


class OffsetOutOfBounds(DecodeError):
    pass


class UnknownEnumValue(DecodeError):
    pass


def unexpected_eof(
    offset: int, needed: int, available: int, label: str = "value"
) -> UnexpectedEof:
    return UnexpectedEof(
        code=E_UNEXPECTED_EOF,
        message=f"Out of range read for {label}: {offset}+{needed}>{offset + available}",
        context={
            "offset": offset,
            "needed": needed,
            "available": available,
            "label": label,
        },
    )


def tag_mismatch(magic: bytes) -> TagMismatch:
    return TagMismatch(
        code=E_TAG_MISMATCH,
        message=f"Unrecognized magic tag {magic!r}",
        context={"magic": magic.decode("latin-1")},
    )


def unsupported_version(magic: bytes, version: bytes) -> UnsupportedVersion:
    return UnsupportedVersion(
        code=E_UNSUPPORTED_VERSION,
        message=f"Unsupported version {version!r} for {magic!r}",
        context={
            "magic": magic.decode("latin-1"),
            "version": version.decode("latin-1"),
        },
    )


def unknown_variant(tag: str, table: str, offset: int) -> UnknownVariant:
    return UnknownVariant(
        code=E_UNKNOWN_VARIANT,
        message=f"Unknown {table} tag {tag!r}",
        context={"tag": tag, "table": table, "offset": offset},
    )


def unknown_bitflags(raw: int, unknown: int, flags: str) -> UnknownBitflags:
    return UnknownBitflags(
        code=E_UNKNOWN_BITFLAGS,
        message=f"{flags} value {raw:#x} has unknown bits {unknown:#x}",
        context={"raw": raw, "unknown": unknown, "flags": flags},
    )


def offset_out_of_bounds(
    offset: int, length: int, section: str
) -> OffsetOutOfBounds:
    return OffsetOutOfBounds(
        code=E_OFFSET_OUT_OF_BOUNDS,
        message=f"Section {section} offset {offset} exceeds buffer length {length}",
        context={"offset": offset, "length": length, "section": section},
    )


def unknown_enum_value(raw: int, enum: str) -> UnknownEnumValue:
    return UnknownEnumValue(
        code=E_UNKNOWN_ENUM_VALUE,
        message=f"Unknown {enum} value {raw:#x}",
        context={"raw": raw, "enum": enum},
    )


__all__ = [
    "DecodeError",
    "UnexpectedEof",
    "TagMismatch",
    "UnsupportedVersion",
    "UnknownVariant",
    "UnknownBitflags",
    "OffsetOutOfBounds",
    "UnknownEnumValue",
    "unexpected_eof",
    "tag_mismatch",
    "unsupported_version",
    "unknown_variant",
    "unknown_bitflags",
    "offset_out_of_bounds",
    "unknown_enum_value",
    "E_UNEXPECTED_EOF",
    "E_TAG_MISMATCH",
    "E_UNSUPPORTED_VERSION",
    "E_UNKNOWN_VARIANT",
    "E_UNKNOWN_BITFLAGS",
    "E_OFFSET_OUT_OF_BOUNDS",
    "E_UNKNOWN_ENUM_VALUE",
]
