# MIT License (see LICENSE)
"""
Visual-only objects: rendered, animated, never simulated.

VisualObjectStore owns the records and their render handles. Records may
be created piecemeal: an animation can arrive before the object it
animates (a placeholder at the origin is created), and a later
add_object() merges into that record without discarding anything
already set.

Animations run on the render tick, driven by wall-clock time and fully
decoupled from the physics step:

    t = (now · speed) mod 2π

Built-in kinds: rotate (one rotation axis = t), oscillate (sinusoid
about the base position on one axis), orbit (circle in XZ about the base
position). Configs with `code` run a restricted script instead (see
scripting.py); a failing script is logged and its animation removed,
without affecting any other object.
"""
from __future__ import annotations
import logging
import math
import numbers
import time
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Iterator, Mapping

from .scripting import compile_animation

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


def _triple(v: Any) -> list[float]:
    """Position/rotation/scale value as a 3-list; a scalar is broadcast."""
    if isinstance(v, numbers.Real):
        return [float(v)] * 3
    return [float(c) for c in v]


@dataclass
class AnimationConfig:
    """
    Animation attached to a visual object.

    Attributes:
        type: "rotate", "oscillate", "orbit"; other kinds are no-ops.
        axis: "x", "y" or "z" for rotate and oscillate; defaults to "y"
              (the vertical axis) when the descriptor leaves it out.
        amplitude: Oscillation amplitude.
        radius: Orbit radius.
        speed: Phase rate multiplier.
        code: Restricted animation script; takes precedence over `type`.
        params: Any other descriptor keys, kept for round-tripping.
    """
    type: str | None = None
    axis: str = "y"
    amplitude: float = 1.0
    radius: float = 5.0
    speed: float = 1.0
    code: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnimationConfig":
        known = {"type", "axis", "amplitude", "radius", "speed", "code"}
        return cls(
            type=data.get("type"),
            axis=data.get("axis") or "y",
            amplitude=float(data.get("amplitude") if data.get("amplitude") is not None else 1.0),
            radius=float(data.get("radius") if data.get("radius") is not None else 5.0),
            speed=float(data.get("speed") if data.get("speed") is not None else 1.0),
            code=data.get("code"),
            params={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class VisualObject:
    """
    Render-only object record.

    Every attribute except `id` may be None, meaning "not set yet"; merges
    only ever copy set values.
    """
    id: str
    position: list[float] | None = None
    rotation: list[float] | None = None
    scale: list[float] | None = None
    color: str | None = None
    opacity: float | None = None
    metalness: float | None = None
    roughness: float | None = None
    animation: AnimationConfig | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VisualObject":
        if data.get("id") is None:
            raise ValueError("Visual object config requires an 'id'")
        names = {f.name for f in fields(cls)} - {"extra"}
        obj = cls(id=str(data["id"]))
        for key, value in data.items():
            if key == "id" or value is None:
                continue
            if key in ("position", "rotation", "scale"):
                setattr(obj, key, _triple(value))
            elif key == "animation":
                obj.animation = value if isinstance(value, AnimationConfig) else AnimationConfig.from_dict(value)
            elif key in names:
                setattr(obj, key, value)
            else:
                obj.extra[key] = value
        return obj

    def merge(self, other: "VisualObject") -> None:
        """Copy every set field of `other` onto this record."""
        for f in fields(self):
            if f.name in ("id", "extra"):
                continue
            value = getattr(other, f.name)
            if value is not None:
                setattr(self, f.name, value)
        self.extra.update({k: v for k, v in other.extra.items() if v is not None})

    @property
    def base_position(self) -> list[float]:
        return self.position if self.position is not None else [0.0, 0.0, 0.0]


class VisualObjectStore:
    """
    Id-keyed records and render handles for visual-only objects.

    Usage:
        store = VisualObjectStore()
        store.add_object({"id": "ring", "position": [0, 2, 0], "color": "#ffaa00"})
        store.register_mesh("ring", MeshHandle())
        store.animate_object("ring", {"type": "rotate", "axis": "y", "speed": 0.5})
        store.update_animations(1 / 60)   # once per rendered frame
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock
        self._objects: dict[str, VisualObject] = {}
        self._handles: dict[str, Any] = {}
        self._announced: set[str] = set()

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: str) -> bool:
        return object_id in self._objects

    def objects(self) -> Iterator[VisualObject]:
        return iter(list(self._objects.values()))

    # -------------------------------------------------------------------------
    # records

    def add_object(self, config: Mapping[str, Any] | VisualObject) -> str:
        """Create a record, or merge into an existing one with the same id. Returns the id."""
        incoming = config if isinstance(config, VisualObject) else VisualObject.from_dict(config)
        existing = self._objects.get(incoming.id)
        if existing is not None:
            logger.debug("Merging config into existing visual object %r", incoming.id)
            existing.merge(incoming)
        else:
            self._objects[incoming.id] = incoming
        return incoming.id

    def get_object(self, object_id: str) -> VisualObject | None:
        return self._objects.get(object_id)

    def remove_object(self, object_id: str) -> bool:
        """Drop the record and its render handle. Returns False if unknown."""
        self._handles.pop(object_id, None)
        self._announced.discard(object_id)
        return self._objects.pop(object_id, None) is not None

    def clear(self) -> None:
        self._objects.clear()
        self._handles.clear()
        self._announced.clear()

    # -------------------------------------------------------------------------
    # render handles

    def register_mesh(self, object_id: str, handle: Any) -> None:
        self._handles[object_id] = handle

    def handle(self, object_id: str) -> Any:
        return self._handles.get(object_id)

    # -------------------------------------------------------------------------
    # edits

    def update_transform(self, object_id: str, updates: Mapping[str, Any]) -> bool:
        """Apply position/rotation/scale to the record and, if registered, the handle."""
        obj = self._objects.get(object_id)
        if obj is None:
            return False

        handle = self._handles.get(object_id)
        for key in ("position", "rotation", "scale"):
            value = updates.get(key)
            if value is None:
                continue
            triple = _triple(value)
            setattr(obj, key, triple)
            if handle is not None:
                getattr(handle, key).set(*triple)
        return True

    def update_material(self, object_id: str, updates: Mapping[str, Any]) -> bool:
        """Apply color/opacity/metalness/roughness to the record and, if registered, the handle."""
        obj = self._objects.get(object_id)
        if obj is None:
            return False

        handle = self._handles.get(object_id)
        material = getattr(handle, "material", None) if handle is not None else None

        if updates.get("color"):
            obj.color = updates["color"]
            if material is not None:
                material.color = updates["color"]
        if updates.get("opacity") is not None:
            obj.opacity = float(updates["opacity"])
            if material is not None:
                material.opacity = obj.opacity
                material.transparent = obj.opacity < 1.0
        for key in ("metalness", "roughness"):
            if updates.get(key) is not None:
                setattr(obj, key, float(updates[key]))
                if material is not None:
                    setattr(material, key, float(updates[key]))
        return True

    def animate_object(self, object_id: str, config: Mapping[str, Any] | AnimationConfig) -> bool:
        """Attach an animation, creating a placeholder at the origin if needed."""
        obj = self._objects.get(object_id)
        if obj is None:
            logger.debug("Animation set for %r before the object exists; creating placeholder", object_id)
            obj = VisualObject(id=object_id, position=[0.0, 0.0, 0.0])
            self._objects[object_id] = obj

        obj.animation = config if isinstance(config, AnimationConfig) else AnimationConfig.from_dict(config)
        self._announced.discard(object_id)
        logger.debug("Animation set for %r: %s", object_id, obj.animation.type or "custom code")
        return True

    # -------------------------------------------------------------------------
    # render tick

    def update_animations(self, delta_time: float) -> None:
        """Advance every animated object that has a render handle."""
        for object_id, obj in list(self._objects.items()):
            anim = obj.animation
            if anim is None:
                continue
            mesh = self._handles.get(object_id)
            if mesh is None:
                continue

            now = self.clock()
            t = (now * anim.speed) % TWO_PI

            if anim.code:
                self._run_script(object_id, obj, mesh, now, t, delta_time)
                continue

            if anim.type == "rotate":
                if anim.axis in ("x", "y", "z"):
                    setattr(mesh.rotation, anim.axis, t)
            elif anim.type == "oscillate":
                axis = "xyz".find(anim.axis)
                if axis >= 0:
                    base = obj.base_position[axis]
                    setattr(mesh.position, anim.axis, base + math.sin(t) * anim.amplitude)
            elif anim.type == "orbit":
                base = obj.base_position
                mesh.position.x = base[0] + math.cos(t) * anim.radius
                mesh.position.z = base[2] + math.sin(t) * anim.radius

    def _run_script(self, object_id: str, obj: VisualObject, mesh: Any, now: float, t: float, delta_time: float) -> None:
        try:
            compile_animation(obj.animation.code).run(mesh, obj, now, t, delta_time)
        except Exception:
            logger.exception("Animation script failed for %r; animation removed", object_id)
            obj.animation = None
            return
        if object_id not in self._announced:
            self._announced.add(object_id)
            logger.debug("Running custom animation for %r at t=%.2f", object_id, now)
