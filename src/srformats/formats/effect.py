"""JMXVEFF particle-effect container.

Layout::

    "JMXVEFF " + version ("0010".."0013")
    version extras (u32 x 0 / 0 / 1 / 4)
    root EffectNode

An effect node is a recursive record::

    u32  data_offset         relative to the node start, minus 4
    str  name
    u32  controller count, Controller*
    -- jump to node_start + data_offset + 4 --
    GlobalData, source slots, scalar fields, Resource,
    u32  child count, EffectNode*

Controllers, commands and parameters are string-tagged unions decoded via
``VariantTable``; an unknown tag aborts the whole file. Source slots are
optional commands (u8 presence flag, then the tag and a small fixed header
before the payload).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from ..decoding.cursor import Cursor
from ..decoding.primitives import (
    Color,
    Matrix4,
    Vector3,
    Vector4,
    bool32,
    color,
    f32,
    i32,
    matrix4,
    sized_string,
    u8,
    u32,
    vector3,
    vector4,
)
from ..decoding.sequences import counted, counted_u32, repeat
from ..decoding.signature import FormatInfo, expect_signature
from ..decoding.variants import Variant, VariantTable, optional

__all__ = [
    "MAGIC",
    "VERSIONS",
    "FORMAT",
    "ViewMode",
    "RenderShape",
    "ControllerKind",
    "CommandKind",
    "ParameterKind",
    "Controller",
    "Command",
    "Parameter",
    "StaticEmit",
    "AngleVector1",
    "AxisVector4",
    "RotVector",
    "FrameTextureSlide",
    "FrameBANPosition",
    "FrameBANRotation",
    "FrameDiffuse",
    "FrameScale",
    "BlendCurve",
    "LinkMode",
    "DiffuseGraph",
    "Shape",
    "ScaleGraph",
    "MeshBinding",
    "Resource",
    "GlobalData",
    "SourceData",
    "EffectNode",
    "EffectHeader",
    "Effect",
    "CONTROLLERS",
    "COMMANDS",
    "PARAMETERS",
    "VIEW_MODES",
    "RENDER_SHAPES",
    "decode",
    "decode_header",
    "decode_node",
]

MAGIC = b"JMXVEFF "
VERSIONS = (b"0010", b"0011", b"0012", b"0013")

# Number of u32 fields between the signature and the root node.
HEADER_EXTRA_FIELDS: Dict[bytes, int] = {
    b"0010": 0,
    b"0011": 0,
    b"0012": 1,
    b"0013": 4,
}

# The stored data offset excludes its own length field.
NODE_DATA_OFFSET_BIAS = 4

T = TypeVar("T")


# Tags ------------------------------------------------------------------------
class ViewMode(str, Enum):
    """Camera locking of emitted particles."""

    NONE = "ViewNone"
    BILLBOARD = "ViewBillboard"
    V_BILLBOARD = "ViewVBillboard"
    Y_BILLBOARD = "ViewYBillboard"


class RenderShape(str, Enum):
    NONE = "RenderNone"
    PLATE = "RenderPlate"
    MESH = "RenderMesh"
    LINK_D_PIPE = "RenderLinkDPipe"
    LINK_PIPE = "RenderLinkPipe"
    LINK_OBJ = "RenderLinkObj"


class ControllerKind(str, Enum):
    NORMAL_TIME_LIFE = "NormalTimeLife"
    NORMAL_TIME_LOOP_LIFE = "NormalTimeLoopLife"
    PROGRAM = "Program"
    STATIC_EMIT = "StaticEmit"
    BAN = "BAN"
    LINK_MODE = "LinkMode"
    VIEW_MODE = "ViewMode"
    SHAPE = "Shape"
    SCALE_GRAPH = "ScaleGraph"
    DIFFUSE_GRAPH = "DiffuseGraph"


class CommandKind(str, Enum):
    NEVER_EXTINCT = "NeverExtinct"
    NORMAL_TIME_EXTINCT = "NormalTimeExtinct"
    NORMAL_TIME_LOOP = "NormalTimeLoop"
    PROGRAM_UPDATE = "ProgramUpdate"
    STATIC_EMIT = "StaticEmit"
    VIEW_NONE = "ViewNone"
    VIEW_BILLBOARD = "ViewBillboard"
    VIEW_Y_BILLBOARD = "ViewYBillboard"
    VIEW_V_BILLBOARD = "ViewVBillboard"
    RENDER_NONE = "RenderNone"
    RENDER_PLATE = "RenderPlate"
    RENDER_MESH = "RenderMesh"
    RENDER_LINK_D_PIPE = "RenderLinkDPipe"
    RENDER_LINK_PIPE = "RenderLinkPipe"
    RENDER_LINK_OBJ = "RenderLinkObj"
    ATTRACTION = "Attraction"
    CONE_FORCE = "ConeForce"
    FORCE = "Force"
    SET_BAN_POS = "SetBANPos"
    SET_BAN_ROT = "SetBANRot"
    SET_CONE_POS = "SetConePos"
    SET_CONE_VEL = "SetConeVel"
    SET_GRAPH_DIFFUSE = "SetGraphDiffuse"
    SET_GRAPH_RANDOM_SCALE = "SetGraphRandomScale"
    SET_GRAPH_SCALE = "SetGraphScale"
    SET_POSITION = "SetPosition"
    SET_ROTATION = "SetRotation"
    SET_ROTATION_AXIS = "SetRotationAxis"
    SET_ROTATION_MAT = "SetRotationMat"
    SET_R_VELOCITY = "SetRVelocity"
    SET_R_VELOCITY_AXIS = "SetRVelocityAxis"
    SET_R_VELOCITY_MAT = "SetRVelocityMat"
    SET_SHAPE_ROT = "SetShapeRot"
    SET_SHAPE_ROT_VEL = "SetShapeRotVel"
    SET_SPHERE_POS = "SetSpherePos"
    SET_VELOCITY = "SetVelocity"
    TEXTURE_SLIDE = "TextureSlide"


class ParameterKind(str, Enum):
    FLOAT = "Float"
    VECTOR = "Vector"
    MATRIX = "Matrix"
    AXIS_VECTOR4 = "AxisVector4"
    ROT_VECTOR = "RotVector"
    ANGLE_VECTOR1 = "AngleVector1"
    FRAME_SCALE = "FrameScale"
    FRAME_DIFFUSE = "FrameDiffuse"
    FRAME_BAN_ROTATION = "FrameBANRotation"
    FRAME_BAN_POSITION = "FrameBANPosition"
    FRAME_TEXTURE_SLIDE = "FrameTextureSlide"
    BS_ANIMATION = "BSAnimation"
    # Misspelled on the wire.
    BLEND_SCALE_GRAPH_POINTER = "BlendeScaleGraphPointer"
    STATIC_EMIT = "StaticEmit"
    BLEND_DIFFUSE_GRAPH = "BlendDiffuseGraph"
    BLEND_SCALE_GRAPH = "BlendScaleGraph"


class Controller(Variant[ControllerKind]):
    __slots__ = ()


class Command(Variant[CommandKind]):
    __slots__ = ()


class Parameter(Variant[ParameterKind]):
    __slots__ = ()


# Payloads --------------------------------------------------------------------
@dataclass(slots=True)
class StaticEmit:
    min: int
    max: int
    burst_rate: int
    min_particles: int
    spawn_rate: float


@dataclass(slots=True)
class AngleVector1:
    first: Vector3
    second: Vector3


@dataclass(slots=True)
class AxisVector4:
    axis: Vector4
    matrix: Matrix4


@dataclass(slots=True)
class RotVector:
    vector: Vector3
    matrix: Matrix4


@dataclass(slots=True)
class FrameTextureSlide:
    base: Vector3
    frames: List[Vector4] = field(default_factory=list)


@dataclass(slots=True)
class FrameBANPosition:
    time: float
    positions: List[Vector3] = field(default_factory=list)


@dataclass(slots=True)
class FrameBANRotation:
    time: float
    rotations: List[Matrix4] = field(default_factory=list)


@dataclass(slots=True)
class FrameDiffuse:
    colors: List[Color] = field(default_factory=list)


@dataclass(slots=True)
class FrameScale:
    scales: List[Vector3] = field(default_factory=list)


@dataclass(slots=True)
class BlendCurve(Generic[T]):
    """Two boundary scalars plus ordered (key, value) samples."""

    begin: float
    end: float
    samples: List[Tuple[float, T]] = field(default_factory=list)


@dataclass(slots=True)
class LinkMode:
    unknown0: int
    unknown1: int
    unknown2: int
    unknown3: int


@dataclass(slots=True)
class DiffuseGraph:
    alpha: BlendCurve[int]
    color: BlendCurve[Color]


@dataclass(slots=True)
class MeshBinding:
    mesh: str
    textures: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Resource:
    two_sided: bool
    src_blend: int
    dst_blend: int
    src_texture_arg0: int
    src_texture_arg1: int
    src_texture_op: int
    dst_texture_arg0: int
    dst_texture_arg1: int
    dst_texture_op: int
    meshes: List[MeshBinding] = field(default_factory=list)


@dataclass(slots=True)
class Shape:
    shape: RenderShape
    resource: Resource


@dataclass(slots=True)
class ScaleGraph:
    x: BlendCurve[float]
    y: BlendCurve[float]
    z: BlendCurve[float]
    float0: float
    float1: float


@dataclass(slots=True)
class GlobalData:
    unknown: int
    parameters: List[Parameter] = field(default_factory=list)


@dataclass(slots=True)
class SourceData:
    command: Command
    subtype: int
    flag: int
    start: float
    end: float
    unknown: float


Source = Optional[SourceData]


@dataclass(slots=True)
class EffectNode:
    name: str
    controllers: List[Controller]
    global_data: GlobalData
    sources0: List[Source]
    emitters: List[Source]
    sources2: List[Source]
    lifetime: Source
    program: List[Source]
    byte0: int
    byte1: int
    dword0: int
    dword1: int
    dword2: int
    byte2: int
    dword3: int
    byte3: int
    view_mode: Source
    resource: Resource
    render: Source
    sources3: List[Source]
    render_commands: List[Source]
    children: List["EffectNode"] = field(default_factory=list)

    def walk(self):
        """Depth-first iteration over this node and all descendants."""
        pending = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node.children))


@dataclass(slots=True)
class EffectHeader:
    version: str
    extra: List[int] = field(default_factory=list)


@dataclass(slots=True)
class Effect:
    header: EffectHeader
    root: EffectNode


# Payload decoders -------------------------------------------------------------
def _static_emit(cur: Cursor) -> StaticEmit:
    return StaticEmit(i32(cur), i32(cur), i32(cur), i32(cur), f32(cur))


def _angle_vector1(cur: Cursor) -> AngleVector1:
    return AngleVector1(vector3(cur), vector3(cur))


def _axis_vector4(cur: Cursor) -> AxisVector4:
    return AxisVector4(vector4(cur), matrix4(cur))


def _rot_vector(cur: Cursor) -> RotVector:
    return RotVector(vector3(cur), matrix4(cur))


def _frame_texture_slide(cur: Cursor) -> FrameTextureSlide:
    return FrameTextureSlide(vector3(cur), counted(cur, vector4))


def _frame_ban_position(cur: Cursor) -> FrameBANPosition:
    return FrameBANPosition(f32(cur), counted(cur, vector3))


def _frame_ban_rotation(cur: Cursor) -> FrameBANRotation:
    return FrameBANRotation(f32(cur), counted(cur, matrix4))


def _frame_diffuse(cur: Cursor) -> FrameDiffuse:
    return FrameDiffuse(counted(cur, color))


def _frame_scale(cur: Cursor) -> FrameScale:
    return FrameScale(counted(cur, vector3))


def blend_curve(
    sample: Callable[[Cursor], T]
) -> Callable[[Cursor], BlendCurve[T]]:
    def decode_curve(cur: Cursor) -> BlendCurve[T]:
        begin = f32(cur)
        end = f32(cur)
        samples = counted(cur, lambda c: (f32(c), sample(c)))
        return BlendCurve(begin, end, samples)

    return decode_curve


_bs_animation = counted_u32(sized_string)


def _mesh_binding(cur: Cursor) -> MeshBinding:
    return MeshBinding(sized_string(cur), counted(cur, sized_string))


def _resource(cur: Cursor) -> Resource:
    two_sided = bool32(cur)
    ops = repeat(cur, u32, 8)
    return Resource(two_sided, *ops, meshes=counted(cur, _mesh_binding))


def _constant(value: T) -> Callable[[Cursor], T]:
    return lambda cur: value


# Tables ----------------------------------------------------------------------
VIEW_MODES: VariantTable[ViewMode, ViewMode] = VariantTable(
    "view mode", ViewMode, make=lambda kind, _: kind
)

RENDER_SHAPES: VariantTable[RenderShape, RenderShape] = VariantTable(
    "render shape", RenderShape, make=lambda kind, _: kind
)

PARAMETERS: VariantTable[ParameterKind, Parameter] = VariantTable(
    "parameter",
    ParameterKind,
    {
        ParameterKind.FLOAT: f32,
        ParameterKind.VECTOR: vector3,
        ParameterKind.MATRIX: matrix4,
        ParameterKind.AXIS_VECTOR4: _axis_vector4,
        ParameterKind.ROT_VECTOR: _rot_vector,
        ParameterKind.ANGLE_VECTOR1: _angle_vector1,
        ParameterKind.FRAME_SCALE: _frame_scale,
        ParameterKind.FRAME_DIFFUSE: _frame_diffuse,
        ParameterKind.FRAME_BAN_ROTATION: _frame_ban_rotation,
        ParameterKind.FRAME_BAN_POSITION: _frame_ban_position,
        ParameterKind.FRAME_TEXTURE_SLIDE: _frame_texture_slide,
        ParameterKind.BS_ANIMATION: _bs_animation,
        ParameterKind.BLEND_SCALE_GRAPH_POINTER: f32,
        ParameterKind.STATIC_EMIT: _static_emit,
        ParameterKind.BLEND_DIFFUSE_GRAPH: blend_curve(color),
        ParameterKind.BLEND_SCALE_GRAPH: blend_curve(vector3),
    },
    make=Parameter,
)

COMMANDS: VariantTable[CommandKind, Command] = VariantTable(
    "command",
    CommandKind,
    {
        CommandKind.STATIC_EMIT: _static_emit,
        CommandKind.VIEW_NONE: _constant(ViewMode.NONE),
        CommandKind.VIEW_BILLBOARD: _constant(ViewMode.BILLBOARD),
        CommandKind.VIEW_Y_BILLBOARD: _constant(ViewMode.Y_BILLBOARD),
        CommandKind.VIEW_V_BILLBOARD: _constant(ViewMode.V_BILLBOARD),
        CommandKind.RENDER_NONE: _constant(RenderShape.NONE),
        CommandKind.RENDER_PLATE: _constant(RenderShape.PLATE),
        CommandKind.RENDER_MESH: _constant(RenderShape.MESH),
        CommandKind.RENDER_LINK_D_PIPE: _constant(RenderShape.LINK_D_PIPE),
        CommandKind.RENDER_LINK_PIPE: _constant(RenderShape.LINK_PIPE),
        CommandKind.RENDER_LINK_OBJ: _constant(RenderShape.LINK_OBJ),
        CommandKind.ATTRACTION: f32,
        CommandKind.CONE_FORCE: _angle_vector1,
        CommandKind.FORCE: vector3,
        CommandKind.SET_BAN_POS: _frame_ban_position,
        CommandKind.SET_BAN_ROT: _frame_ban_rotation,
        CommandKind.SET_CONE_POS: _angle_vector1,
        CommandKind.SET_CONE_VEL: _angle_vector1,
        CommandKind.SET_GRAPH_DIFFUSE: _frame_diffuse,
        CommandKind.SET_GRAPH_RANDOM_SCALE: f32,
        CommandKind.SET_GRAPH_SCALE: _frame_scale,
        CommandKind.SET_POSITION: vector3,
        CommandKind.SET_ROTATION: _rot_vector,
        CommandKind.SET_ROTATION_AXIS: _axis_vector4,
        CommandKind.SET_ROTATION_MAT: matrix4,
        CommandKind.SET_R_VELOCITY: _rot_vector,
        CommandKind.SET_R_VELOCITY_AXIS: _axis_vector4,
        CommandKind.SET_R_VELOCITY_MAT: matrix4,
        CommandKind.SET_SHAPE_ROT: _axis_vector4,
        CommandKind.SET_SHAPE_ROT_VEL: _axis_vector4,
        CommandKind.SET_SPHERE_POS: vector3,
        CommandKind.SET_VELOCITY: vector3,
        CommandKind.TEXTURE_SLIDE: _frame_texture_slide,
    },
    make=Command,
)


def _source_data(cur: Cursor) -> SourceData:
    kind, payload = COMMANDS.select(cur)
    subtype = u8(cur)
    flag = u8(cur)
    start = f32(cur)
    end = f32(cur)
    unknown = f32(cur)
    command = Command(kind, COMMANDS.payload(cur, payload))
    return SourceData(command, subtype, flag, start, end, unknown)


def _source(cur: Cursor) -> Source:
    return optional(cur, _source_data)


_source_list = counted_u32(_source)


def _shape(cur: Cursor) -> Shape:
    return Shape(RENDER_SHAPES(cur), _resource(cur))


def _scale_graph(cur: Cursor) -> ScaleGraph:
    curve = blend_curve(f32)
    return ScaleGraph(curve(cur), curve(cur), curve(cur), f32(cur), f32(cur))


def _diffuse_graph(cur: Cursor) -> DiffuseGraph:
    return DiffuseGraph(blend_curve(u8)(cur), blend_curve(color)(cur))


def _link_mode(cur: Cursor) -> LinkMode:
    return LinkMode(*repeat(cur, u32, 4))


CONTROLLERS: VariantTable[ControllerKind, Controller] = VariantTable(
    "controller",
    ControllerKind,
    {
        ControllerKind.PROGRAM: _source_list,
        ControllerKind.STATIC_EMIT: _static_emit,
        ControllerKind.BAN: _bs_animation,
        ControllerKind.LINK_MODE: _link_mode,
        ControllerKind.VIEW_MODE: VIEW_MODES,
        ControllerKind.SHAPE: _shape,
        ControllerKind.SCALE_GRAPH: _scale_graph,
        ControllerKind.DIFFUSE_GRAPH: _diffuse_graph,
    },
    make=Controller,
)


def _global_data(cur: Cursor) -> GlobalData:
    return GlobalData(u32(cur), counted(cur, PARAMETERS))


# Tree ------------------------------------------------------------------------
def _open_node(cur: Cursor) -> Tuple[EffectNode, Cursor, int]:
    """Decode a node up to its child count.

    Returns the node (children still empty), the cursor positioned at its
    first child and the number of children to read from it.
    """
    start = cur.pos
    data_offset = u32(cur)
    name = sized_string(cur)
    controllers = counted(cur, CONTROLLERS)

    body = cur.relative(
        start, data_offset + NODE_DATA_OFFSET_BIAS, f"effect node {name!r}"
    )
    node = EffectNode(
        name=name,
        controllers=controllers,
        global_data=_global_data(body),
        sources0=_source_list(body),
        emitters=_source_list(body),
        sources2=_source_list(body),
        lifetime=_source(body),
        program=_source_list(body),
        byte0=u8(body),
        byte1=u8(body),
        dword0=u32(body),
        dword1=u32(body),
        dword2=u32(body),
        byte2=u8(body),
        dword3=u32(body),
        byte3=u8(body),
        view_mode=_source(body),
        resource=_resource(body),
        render=_source(body),
        sources3=_source_list(body),
        render_commands=_source_list(body),
    )
    return node, body, u32(body)


def decode_node(cur: Cursor) -> EffectNode:
    """Decode one node and all of its descendants.

    Nesting depth is bounded only by the file: open nodes are kept on an
    explicit stack, children are appended in wire order. On return ``cur``
    sits just past the node's last child.
    """
    root, body, remaining = _open_node(cur)
    stack: List[List] = [[root, body, remaining]]
    while stack:
        frame = stack[-1]
        node, body, remaining = frame
        if remaining == 0:
            stack.pop()
            # A finished child leaves its parent's cursor past its subtree.
            (stack[-1][1] if stack else cur).pos = body.pos
            continue
        frame[2] = remaining - 1
        child, child_body, count = _open_node(body)
        node.children.append(child)
        stack.append([child, child_body, count])
    return root


def _header(cur: Cursor) -> EffectHeader:
    version = expect_signature(cur, MAGIC, VERSIONS)
    extra = repeat(cur, u32, HEADER_EXTRA_FIELDS[version])
    return EffectHeader(version.decode("ascii"), extra)


def decode_header(data: bytes) -> EffectHeader:
    return _header(Cursor(data))


def decode(data: bytes) -> Effect:
    cur = Cursor(data)
    header = _header(cur)
    return Effect(header, decode_node(cur))


FORMAT = FormatInfo(
    name="effect",
    magic=MAGIC,
    versions=VERSIONS,
    extensions=(".efp", ".eff"),
    decode=decode,
    decode_header=decode_header,
)
