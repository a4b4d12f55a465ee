from __future__ import annotations

from enum import IntEnum, IntFlag

import pytest

from srformats.decoding.cursor import Cursor
from srformats.decoding.errors import (
    E_UNKNOWN_BITFLAGS,
    UnknownBitflags,
    UnknownEnumValue,
)
from srformats.decoding.flags import (
    check_enum,
    check_flags,
    enum_u32,
    flags_u16,
    flags_u32,
)

from wire import u16, u32


class Pair(IntFlag):
    A = 0x1
    B = 0x2


class Kind(IntEnum):
    ONE = 1
    TWO = 2


def test_known_bits_decode():
    flags = flags_u32(Pair)(Cursor(u32(0x3)))
    assert flags == Pair.A | Pair.B
    assert Pair.A in flags and Pair.B in flags


def test_unknown_bit_is_rejected():
    with pytest.raises(UnknownBitflags) as exc:
        flags_u32(Pair)(Cursor(u32(0x5)))
    assert exc.value.code == E_UNKNOWN_BITFLAGS
    assert exc.value.raw == 0x5
    assert exc.value.context["unknown"] == 0x4


def test_zero_is_empty_set():
    assert check_flags(0, Pair) == Pair(0)


def test_u16_width():
    cur = Cursor(u16(0x2) + b"rest")
    assert flags_u16(Pair)(cur) == Pair.B
    assert cur.pos == 2


def test_strict_enum():
    assert enum_u32(Kind)(Cursor(u32(2))) is Kind.TWO
    with pytest.raises(UnknownEnumValue) as exc:
        check_enum(9, Kind)
    assert exc.value.context == {"raw": 9, "enum": "Kind"}
