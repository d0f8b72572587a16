# MIT License (see LICENSE)
"""
Scene descriptor <-> typed Scene conversion.

The editor exchanges scenes as JSON with camelCase keys:

JSON Schema Overview:
---------------------
{
  "gravity": [gx, gy, gz],             # Default: [0, -9.81, 0]
  "simulationScale": "terrestrial",    # or "astronomical"
  "objects": [
    {
      "id": string,                    # Required, unique
      "type": "Sphere" | "Box" | "Cylinder" | "Cone" | "Capsule" | ...,
      "position": [x, y, z],           # Default: [0, 0, 0]
      "velocity": [vx, vy, vz],        # Default: [0, 0, 0]
      "mass": float,                   # Default: 1
      "radius": float,                 # Optional (round shapes)
      "dimensions": [w, h, d],         # Optional (boxes)
      "height": float,                 # Optional (cylinder/cone/capsule)
      "volume": float,                 # Optional (unknown shapes)
      "charge": float,                 # Coulombs, default: 0
      "gravitationalMass": float,      # Optional
      "isStatic": bool,                # Default: false
      "connections": [                 # Optional
        {"type": "chain" | "rigid_body" | "mechanical_link",
         "target": string, ...params}
      ]
    }
  ],
  "fluid": {"density", "viscosity", "surfaceLevel", "fluidHeight",
            "dragCoefficient", "enabled"},          # Optional block
  "electrostatic": {"enabled": bool},               # Default: enabled
  "connections": {"enabled": bool},                 # Default: enabled
  "gravitationalPhysics": {"enabled", "gravitationalConstant",
                           "minDistance", "softening"}   # Default: disabled
}

Parsing is strict (ValueError naming the offending field); the per-tick
force modules downstream never raise.
"""
from __future__ import annotations
import json
from typing import Any, Mapping

from ..config import ConnectionConfig, ElectrostaticConfig, FluidConfig, GravitationConfig
from ..constants import DEFAULT_GRAVITY
from ..scene import Scene
from ..types import Connection, PhysicsObject
from ..util import to_list, vec3


def _vector(d: Mapping[str, Any], key: str, object_id: str) -> Any:
    try:
        return vec3(d.get(key))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Object {object_id!r}: '{key}' must be a 3-vector") from e


def _optional_float(d: Mapping[str, Any], key: str, object_id: str) -> float | None:
    value = d.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Object {object_id!r}: '{key}' must be a number") from e


def connection_from_dict(d: Mapping[str, Any]) -> Connection:
    """Parse one structural link; keys other than type/target become params."""
    if "type" not in d:
        raise ValueError("Connection definition missing required 'type' field.")
    target = d.get("target", d.get("targetId"))
    params = {k: v for k, v in d.items() if k not in ("type", "target", "targetId")}
    return Connection(type=str(d["type"]), target=None if target is None else str(target), params=params)


def object_from_dict(d: Mapping[str, Any]) -> PhysicsObject:
    """
    Parse a single physics object definition.

    Raises:
        ValueError: Missing id, or a malformed numeric field.
    """
    if d.get("id") is None:
        raise ValueError("Object definition missing required 'id' field.")
    object_id = str(d["id"])

    dims = d.get("dimensions")
    if dims is not None:
        dims = tuple(to_list(_vector(d, "dimensions", object_id)))

    mass = _optional_float(d, "mass", object_id)

    return PhysicsObject(
        id=object_id,
        type=str(d.get("type", "Sphere")),
        position=_vector(d, "position", object_id),
        velocity=_vector(d, "velocity", object_id),
        mass=1.0 if mass is None else mass,
        radius=_optional_float(d, "radius", object_id),
        dimensions=dims,
        height=_optional_float(d, "height", object_id),
        volume=_optional_float(d, "volume", object_id),
        charge=_optional_float(d, "charge", object_id) or 0.0,
        gravitational_mass=_optional_float(d, "gravitationalMass", object_id),
        is_static=bool(d.get("isStatic", False)),
        connections=tuple(connection_from_dict(c) for c in d.get("connections") or ()),
    )


def object_to_dict(obj: PhysicsObject) -> dict[str, Any]:
    """Serialize a PhysicsObject, skipping unset and default fields."""
    result: dict[str, Any] = {
        "id": obj.id,
        "type": obj.type,
        "position": to_list(obj.position),
    }
    if any(obj.velocity):
        result["velocity"] = to_list(obj.velocity)
    if obj.mass != 1.0:
        result["mass"] = obj.mass
    for key, value in (
        ("radius", obj.radius),
        ("height", obj.height),
        ("volume", obj.volume),
        ("gravitationalMass", obj.gravitational_mass),
    ):
        if value is not None:
            result[key] = value
    if obj.dimensions is not None:
        result["dimensions"] = list(obj.dimensions)
    if obj.charge != 0.0:
        result["charge"] = obj.charge
    if obj.is_static:
        result["isStatic"] = True
    if obj.connections:
        result["connections"] = [
            {"type": c.type, **({"target": c.target} if c.target is not None else {}), **c.params}
            for c in obj.connections
        ]
    return result


def scene_from_dict(data: Mapping[str, Any]) -> Scene:
    """
    Build a Scene from a descriptor dict.

    Raises:
        ValueError: Malformed objects or duplicate ids.
    """
    scale = str(data.get("simulationScale", "terrestrial"))
    try:
        gravity = tuple(to_list(vec3(data.get("gravity"), DEFAULT_GRAVITY)))
    except (TypeError, ValueError) as e:
        raise ValueError("Scene 'gravity' must be a 3-vector") from e

    fluid = data.get("fluid")
    return Scene(
        objects=tuple(object_from_dict(o) for o in data.get("objects") or ()),
        gravity=gravity,
        fluid=None if fluid is None else FluidConfig.from_dict(fluid),
        electrostatic=ElectrostaticConfig.from_dict(data.get("electrostatic")),
        connections=ConnectionConfig.from_dict(data.get("connections")),
        gravitation=GravitationConfig.from_dict(data.get("gravitationalPhysics"), simulation_scale=scale),
        simulation_scale=scale,
    )


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    """Serialize a Scene; field blocks at their defaults are omitted."""
    result: dict[str, Any] = {
        "gravity": list(scene.gravity),
        "objects": [object_to_dict(o) for o in scene.objects],
    }
    if scene.simulation_scale != "terrestrial":
        result["simulationScale"] = scene.simulation_scale
    if scene.fluid is not None:
        result["fluid"] = scene.fluid.to_dict()
    if scene.electrostatic != ElectrostaticConfig():
        result["electrostatic"] = {
            "enabled": scene.electrostatic.enabled,
            "coulombConstant": scene.electrostatic.coulomb_constant,
        }
    if not scene.connections.enabled:
        result["connections"] = {"enabled": False}
    g = scene.gravitation
    if g.enabled:
        block: dict[str, Any] = {"enabled": True, "minDistance": g.min_distance, "softening": g.softening}
        if g.gravitational_constant is not None:
            block["gravitationalConstant"] = g.gravitational_constant
        result["gravitationalPhysics"] = block
    return result


def load_scene_raw(path: str) -> dict[str, Any]:
    """Load the raw descriptor dict from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_scene(path: str) -> Scene:
    """
    Load a Scene from a JSON file.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the descriptor is malformed.
    """
    return scene_from_dict(load_scene_raw(path))


def save_scene(scene: Scene, path: str, indent: int = 2) -> None:
    """Write a Scene to disk as JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=indent)
