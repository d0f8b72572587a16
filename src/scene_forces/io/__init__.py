# MIT License (see LICENSE)
"""
Scene descriptor input/output.

This subpackage provides:
    - Parsing: descriptor dicts (camelCase, as the editor writes them) into
      typed Scene / PhysicsObject values.
    - Serialization: the inverse, omitting defaults.
    - JSON files: load_scene / save_scene.

Typical usage:
    from scene_forces.io import load_scene, scene_from_dict

    scene = load_scene("pool.json")
    scene = scene_from_dict({"objects": [{"id": "ball", "type": "Sphere"}]})
"""
from .json_io import (
    connection_from_dict,
    load_scene,
    load_scene_raw,
    object_from_dict,
    object_to_dict,
    save_scene,
    scene_from_dict,
    scene_to_dict,
)

__all__ = [
    # Loading
    "load_scene",
    "load_scene_raw",
    "scene_from_dict",
    "object_from_dict",
    "connection_from_dict",
    # Saving
    "save_scene",
    "scene_to_dict",
    "object_to_dict",
]
