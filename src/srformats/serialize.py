"""Structured output for decoded files.

``to_data`` lowers any decoded value to plain JSON-compatible data; ``dumps``
renders it as JSON or YAML.
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum, IntFlag
from typing import Any, Dict, List, Tuple

import yaml

from .decoding.primitives import Color, Matrix4, Vector2, Vector3, Vector4
from .decoding.variants import Variant

__all__ = ["FORMATS", "to_data", "dumps"]

FORMATS = ("json", "yaml")


def _flag_names(value: IntFlag) -> list[str]:
    # __members__ keeps multi-bit members (e.g. 0xFFFF) that iteration skips.
    return [
        name
        for name, member in type(value).__members__.items()
        if member.value and (value & member.value) == member.value
    ]


def _lower(value: Any, pending: List[Tuple[Any, Any, Any]]) -> Any:
    """Lower one value; containers come back empty and queue their items."""
    # Enums first: tag enums are also str, resource types also int.
    if isinstance(value, IntFlag):
        return _flag_names(value)
    if isinstance(value, Enum):
        return value.name
    if value is None or isinstance(value, (bool, int, str, float)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, (Vector2, Vector3, Vector4)):
        return [getattr(value, f.name) for f in fields(value)]
    if isinstance(value, Matrix4):
        return [list(row) for row in value.rows]
    if isinstance(value, Color):
        return f"#{value.argb:08X}"
    if isinstance(value, Variant):
        out: Dict[str, Any] = {"kind": value.tag, "value": None}
        pending.append((value.value, out, "value"))
        return out
    if is_dataclass(value) and not isinstance(value, type):
        items = [(f.name, getattr(value, f.name)) for f in fields(value)]
    elif isinstance(value, dict):
        items = [(str(k), v) for k, v in value.items()]
    elif isinstance(value, (list, tuple)):
        items = list(enumerate(value))
        out_list: List[Any] = [None] * len(items)
        pending.extend((v, out_list, i) for i, v in items)
        return out_list
    else:
        raise TypeError(f"cannot serialize {type(value).__name__}")
    record = {key: None for key, _ in items}
    pending.extend((v, record, key) for key, v in items)
    return record


def to_data(value: Any) -> Any:
    """Plain JSON-compatible data for any decoded value.

    Works with an explicit queue, so deeply nested effect trees do not hit
    the interpreter recursion limit.
    """
    holder: List[Any] = [None]
    pending: List[Tuple[Any, Any, Any]] = [(value, holder, 0)]
    while pending:
        item, parent, key = pending.pop()
        parent[key] = _lower(item, pending)
    return holder[0]


def dumps(value: Any, fmt: str = "json") -> str:
    data = to_data(value)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"unknown output format {fmt!r} (expected one of {FORMATS})")
