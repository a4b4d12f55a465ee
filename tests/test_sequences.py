from __future__ import annotations

import pytest

from srformats.decoding.cursor import Cursor
from srformats.decoding.errors import UnexpectedEof
from srformats.decoding.primitives import sized_string, u8, u16, u32
from srformats.decoding.sequences import counted, counted_u8, counted_u16, repeat

from wire import counted as wire_counted, sstr, u16 as w16, u32 as w32


def test_counted_u32_strings_in_order():
    data = wire_counted([sstr("a"), sstr("bb"), sstr("ccc")])
    cur = Cursor(data)
    assert counted(cur, sized_string) == ["a", "bb", "ccc"]
    assert cur.remaining == 0


def test_counted_consumes_exactly_n_elements():
    data = wire_counted([w32(1), w32(2)]) + b"trailing"
    cur = Cursor(data)
    assert counted(cur, u32) == [1, 2]
    assert cur.data[cur.pos :] == b"trailing"


def test_count_width_variants():
    assert counted_u8(u16)(Cursor(b"\x02" + w16(7) + w16(9))) == [7, 9]
    assert counted_u16(u8)(Cursor(w16(3) + b"\x01\x02\x03")) == [1, 2, 3]


def test_zero_count_yields_empty_list():
    assert counted(Cursor(w32(0)), u32) == []


def test_failure_mid_sequence_propagates():
    # Declares three elements but only two are present.
    data = w32(3) + w32(10) + w32(20)
    with pytest.raises(UnexpectedEof):
        counted(Cursor(data), u32)


def test_repeat_fixed_times():
    cur = Cursor(bytes([5, 6, 7, 8]))
    assert repeat(cur, u8, 3) == [5, 6, 7]
    assert cur.pos == 3
