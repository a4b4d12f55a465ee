"""Counted-sequence combinators.

``counted`` reads a count with ``count`` (u8/u16/u32) and then decodes
exactly that many elements in order. The first element failure propagates;
a partially decoded list is never returned.
"""

from __future__ import annotations

from typing import Callable, List, TypeVar

from .cursor import Cursor
from .primitives import u8, u16, u32

__all__ = [
    "Decoder",
    "repeat",
    "counted",
    "counted_u8",
    "counted_u16",
    "counted_u32",
]

T = TypeVar("T")
Decoder = Callable[[Cursor], T]


def repeat(cur: Cursor, element: Decoder[T], times: int) -> List[T]:
    return [element(cur) for _ in range(times)]


def counted(
    cur: Cursor, element: Decoder[T], count: Decoder[int] = u32
) -> List[T]:
    return repeat(cur, element, count(cur))


def counted_u8(element: Decoder[T]) -> Decoder[List[T]]:
    return lambda cur: counted(cur, element, u8)


def counted_u16(element: Decoder[T]) -> Decoder[List[T]]:
    return lambda cur: counted(cur, element, u16)


def counted_u32(element: Decoder[T]) -> Decoder[List[T]]:
    return lambda cur: counted(cur, element, u32)
