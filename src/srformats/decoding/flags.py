"""Strict bitflag and enum decoding.

A flags field is read as an unsigned integer and checked against the bits
declared by an ``IntFlag`` class. Any bit outside that set raises
``UnknownBitflags``: unknown bits have historically meant an unrecognised
format revision. Integer enums follow the same policy (``UnknownEnumValue``).
"""

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import Callable, Type, TypeVar

from .cursor import Cursor
from .errors import unknown_bitflags, unknown_enum_value
from .primitives import u16, u32

__all__ = [
    "known_bits",
    "check_flags",
    "flags_u16",
    "flags_u32",
    "check_enum",
    "enum_u32",
]

F = TypeVar("F", bound=IntFlag)
E = TypeVar("E", bound=IntEnum)


def known_bits(flag_type: Type[IntFlag]) -> int:
    mask = 0
    for member in flag_type.__members__.values():
        mask |= int(member)
    return mask


def check_flags(raw: int, flag_type: Type[F]) -> F:
    unknown = raw & ~known_bits(flag_type)
    if unknown:
        raise unknown_bitflags(raw, unknown, flag_type.__name__)
    return flag_type(raw)


def flags_u16(flag_type: Type[F]) -> Callable[[Cursor], F]:
    return lambda cur: check_flags(u16(cur), flag_type)


def flags_u32(flag_type: Type[F]) -> Callable[[Cursor], F]:
    return lambda cur: check_flags(u32(cur), flag_type)


def check_enum(raw: int, enum_type: Type[E]) -> E:
    try:
        return enum_type(raw)
    except ValueError:
        raise unknown_enum_value(raw, enum_type.__name__) from None


def enum_u32(enum_type: Type[E]) -> Callable[[Cursor], E]:
    return lambda cur: check_enum(u32(cur), enum_type)
