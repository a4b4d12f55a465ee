"""JMXVENVI world environment settings.

Each environment carries sixteen curves (fog, light and sky colours over the
day). Most curves hold vector points; the scalar curves are listed in
``SCALAR_GRAPHS``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union

from ..decoding.cursor import Cursor
from ..decoding.primitives import Vector3, f32, sized_string, u16, u32, vector3
from ..decoding.sequences import counted, repeat
from ..decoding.signature import FormatInfo, expect_signature

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "GRAPH_COUNT",
    "SCALAR_GRAPHS",
    "GraphPoint",
    "Environment",
    "EnvironmentGroupEntry",
    "EnvironmentGroup",
    "EnvironmentFile",
    "decode",
]

MAGIC = b"JMXVENVI"
VERSIONS = (b"1003",)

GRAPH_COUNT = 16
SCALAR_GRAPHS = frozenset({7, 8, 10, 11, 12, 15})


@dataclass(slots=True)
class GraphPoint:
    value: Union[float, Vector3]
    position: float


@dataclass(slots=True)
class Environment:
    id: int
    name: str
    unk0: int
    unk1: int
    # GRAPH_COUNT curves, indexed by graph number.
    graphs: List[List[GraphPoint]] = field(default_factory=list)


@dataclass(slots=True)
class EnvironmentGroupEntry:
    name: str
    values: List[int] = field(default_factory=list)


@dataclass(slots=True)
class EnvironmentGroup:
    name: str
    values: List[int]
    entries: List[EnvironmentGroupEntry] = field(default_factory=list)


@dataclass(slots=True)
class EnvironmentFile:
    version: str
    unk0: int
    environments: List[Environment]
    groups: List[EnvironmentGroup]

    def by_id(self) -> Dict[int, Environment]:
        return {env.id: env for env in self.environments}


def _scalar_point(cur: Cursor) -> GraphPoint:
    return GraphPoint(f32(cur), f32(cur))


def _vector_point(cur: Cursor) -> GraphPoint:
    return GraphPoint(vector3(cur), f32(cur))


def _environment(cur: Cursor) -> Environment:
    env = Environment(u16(cur), sized_string(cur), u32(cur), u32(cur))
    for index in range(GRAPH_COUNT):
        point = _scalar_point if index in SCALAR_GRAPHS else _vector_point
        env.graphs.append(counted(cur, point))
    return env


def _group_entry(cur: Cursor) -> EnvironmentGroupEntry:
    return EnvironmentGroupEntry(sized_string(cur), repeat(cur, u16, 8))


def _group(cur: Cursor) -> EnvironmentGroup:
    return EnvironmentGroup(
        sized_string(cur), repeat(cur, u16, 6), counted(cur, _group_entry)
    )


def decode(data: bytes) -> EnvironmentFile:
    cur = Cursor(data)
    version = expect_signature(cur, MAGIC, VERSIONS)
    # The environment count comes before an unrelated u16.
    env_count = u32(cur)
    unk0 = u16(cur)
    environments = repeat(cur, _environment, env_count)
    return EnvironmentFile(
        version.decode("ascii"), unk0, environments, counted(cur, _group)
    )


# No dedicated extension: decoded when named explicitly or by magic.
FORMAT = FormatInfo(
    name="environment",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(),
    decode=decode,
)
