from . import (
    animation,
    compound,
    dungeon,
    effect,
    environment,
    map_info,
    map_mesh,
    map_objects,
    material,
    mesh,
    navmesh,
    resource,
    skeleton,
    texture,
)

ALL_FORMATS = (
    effect.FORMAT,
    resource.FORMAT,
    mesh.FORMAT,
    compound.FORMAT,
    skeleton.FORMAT,
    material.FORMAT,
    animation.FORMAT,
    texture.FORMAT,
    navmesh.FORMAT,
    dungeon.FORMAT,
    map_mesh.FORMAT,
    map_objects.FORMAT,
    map_info.FORMAT,
    environment.FORMAT,
)

__all__ = [
    "ALL_FORMATS",
    "animation",
    "compound",
    "dungeon",
    "effect",
    "environment",
    "map_info",
    "map_mesh",
    "map_objects",
    "material",
    "mesh",
    "navmesh",
    "resource",
    "skeleton",
    "texture",
]
