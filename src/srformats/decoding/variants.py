"""String-tagged discriminated unions.

The wire format names each variant with a sized string rather than a small
integer. A ``VariantTable`` is a closed mapping from the exact tag text
(case-sensitive) to a variant kind and its payload decoder. A tag outside the
table raises ``UnknownVariant``; there is no fallback variant.

Variant kinds are ``str`` enums whose values are the wire tags, so the
table is derived from the enum and cannot drift from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from .cursor import Cursor
from .errors import unknown_variant
from .primitives import sized_string, u8

__all__ = ["Variant", "VariantTable", "optional"]

K = TypeVar("K", bound=Enum)
V = TypeVar("V")
T = TypeVar("T")

PayloadDecoder = Callable[[Cursor], Any]


@dataclass(slots=True)
class Variant(Generic[K]):
    kind: K
    value: Any = None

    @property
    def tag(self) -> str:
        return self.kind.value


class VariantTable(Generic[K, V]):
    """Closed tag -> (kind, payload decoder) dispatch table.

    Kinds absent from ``payloads`` carry no payload. ``make`` builds the
    decoded value from (kind, payload); by default a ``Variant``.
    """

    def __init__(
        self,
        name: str,
        kinds: Type[K],
        payloads: Optional[Mapping[K, PayloadDecoder]] = None,
        make: Callable[[K, Any], V] = Variant,  # type: ignore[assignment]
    ) -> None:
        payloads = payloads or {}
        unknown = set(payloads) - set(kinds)
        if unknown:
            raise ValueError(f"{name}: payloads for foreign kinds {unknown}")
        self.name = name
        self.make = make
        self._entries: Dict[str, Tuple[K, Optional[PayloadDecoder]]] = {
            kind.value: (kind, payloads.get(kind)) for kind in kinds
        }

    def __contains__(self, tag: str) -> bool:
        return tag in self._entries

    @property
    def tags(self) -> list[str]:
        return list(self._entries)

    def lookup(
        self, tag: str, offset: int = -1
    ) -> Tuple[K, Optional[PayloadDecoder]]:
        try:
            return self._entries[tag]
        except KeyError:
            raise unknown_variant(tag, self.name, offset) from None

    def select(self, cur: Cursor) -> Tuple[K, Optional[PayloadDecoder]]:
        """Read the tag and resolve it, leaving the cursor before the payload."""
        offset = cur.pos
        return self.lookup(sized_string(cur), offset)

    def payload(self, cur: Cursor, decoder: Optional[PayloadDecoder]) -> Any:
        return decoder(cur) if decoder is not None else None

    def decode(self, cur: Cursor) -> V:
        kind, decoder = self.select(cur)
        return self.make(kind, self.payload(cur, decoder))

    __call__ = decode


def optional(cur: Cursor, decode: Callable[[Cursor], T]) -> Optional[T]:
    """One-byte presence flag; zero means absent and nothing else is read."""
    if u8(cur) == 0:
        return None
    return decode(cur)
