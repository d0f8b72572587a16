# MIT License (see LICENSE)
"""
Core type definitions for the force-aggregation layer.

Defines the data the force modules consume each tick:
- Shape resolution (ShapeKind, ShapeDescriptor, resolve_shape)
- PhysicsObject: one entry of the scene's object list
- Connection: a structural link declared on an object
- ObjectState: position/velocity read back from the external solver
- ForceMap: id -> force vector produced by one module for one tick

Geometry defaults live in a single place (resolve_shape) so the volume,
cross-section and submersion calculations can never disagree about what
an under-specified object looks like.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

import numpy as np

from .util import f64, vec3


# =============================================================================
# Shape Definitions
# =============================================================================

class ShapeKind(str, Enum):
    """Geometry tags understood by the editor."""
    SPHERE = "Sphere"
    BOX = "Box"
    CYLINDER = "Cylinder"
    CONE = "Cone"
    CAPSULE = "Capsule"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, tag: str | None) -> "ShapeKind":
        """Map a descriptor `type` string to a kind; unrecognised tags are UNKNOWN."""
        for kind in cls:
            if kind.value == tag:
                return kind
        return cls.UNKNOWN


# Defaults applied when a descriptor omits a geometric parameter.
DEFAULT_RADIUS: float = 0.5
DEFAULT_DIMENSIONS: tuple[float, float, float] = (1.0, 1.0, 1.0)
DEFAULT_HEIGHT: float = 1.0
DEFAULT_VOLUME: float = 1.0


@dataclass(frozen=True)
class ShapeDescriptor:
    """
    Fully resolved geometry of a PhysicsObject.

    Attributes:
        kind: Shape tag.
        radius: Radius for round shapes (explicit or DEFAULT_RADIUS).
        dimensions: Full box extents (explicit or DEFAULT_DIMENSIONS).
        height: Axial length for cylinders, cones and capsules.
        explicit_radius: True when the descriptor carried its own radius.
        fallback_volume: Volume used for UNKNOWN shapes.
    """
    kind: ShapeKind
    radius: float = DEFAULT_RADIUS
    dimensions: tuple[float, float, float] = DEFAULT_DIMENSIONS
    height: float = DEFAULT_HEIGHT
    explicit_radius: bool = False
    fallback_volume: float = DEFAULT_VOLUME

    @property
    def effective_radius(self) -> float:
        """
        Half the vertical extent used for submersion.

        An explicit radius wins; otherwise half of the largest box dimension.
        """
        if self.explicit_radius:
            return self.radius
        return max(self.dimensions) / 2.0

    @property
    def volume(self) -> float:
        """
        Shape volume in m³.

          Sphere:   4/3 π r³
          Box:      w · h · d
          Cylinder: π r² h
          Cone:     1/3 π r² h
          Capsule:  sphere(r) + cylinder(r, h)
        """
        r, h = self.radius, self.height
        if self.kind is ShapeKind.SPHERE:
            return (4.0 / 3.0) * np.pi * r ** 3
        if self.kind is ShapeKind.BOX:
            w, hh, d = self.dimensions
            return w * hh * d
        if self.kind is ShapeKind.CYLINDER:
            return np.pi * r * r * h
        if self.kind is ShapeKind.CONE:
            return (1.0 / 3.0) * np.pi * r * r * h
        if self.kind is ShapeKind.CAPSULE:
            return (4.0 / 3.0) * np.pi * r ** 3 + np.pi * r * r * h
        return self.fallback_volume

    @property
    def cross_section_area(self) -> float:
        """
        Frontal area presented to the flow.

        Boxes use the x·z face; every round shape uses its circular
        section. Unknown shapes use the section of a default sphere.
        """
        if self.kind is ShapeKind.SPHERE:
            return np.pi * self.radius * self.radius
        if self.kind is ShapeKind.BOX:
            return self.dimensions[0] * self.dimensions[2]
        if self.kind in (ShapeKind.CYLINDER, ShapeKind.CONE, ShapeKind.CAPSULE):
            return np.pi * self.radius * self.radius
        return np.pi * DEFAULT_RADIUS * DEFAULT_RADIUS


def resolve_shape(obj: "PhysicsObject") -> ShapeDescriptor:
    """Resolve the geometry of `obj`, filling every missing parameter with its default."""
    dims = DEFAULT_DIMENSIONS if obj.dimensions is None else tuple(float(d) for d in obj.dimensions)
    return ShapeDescriptor(
        kind=ShapeKind.parse(obj.type),
        radius=DEFAULT_RADIUS if obj.radius is None else float(obj.radius),
        dimensions=dims,
        height=DEFAULT_HEIGHT if obj.height is None else float(obj.height),
        explicit_radius=obj.radius is not None,
        fallback_volume=DEFAULT_VOLUME if obj.volume is None else float(obj.volume),
    )


# =============================================================================
# Scene objects
# =============================================================================

@dataclass(frozen=True)
class Connection:
    """
    Structural link declared on an object.

    Attributes:
        type: One of "chain", "rigid_body", "mechanical_link". Other values
              are carried through untouched and ignored by the modules.
        target: Id of the object on the other end, if any.
        params: Remaining descriptor keys (link count, gear ratio, ...).
    """
    type: str
    target: str | None = None
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PhysicsObject:
    """
    One simulated object as described by the scene.

    Attributes:
        id: Unique within the scene's object list.
        type: Geometry tag ("Sphere", "Box", ...).
        position: Declared position; the solver's runtime state supersedes it.
        velocity: Declared initial velocity.
        mass: Mass in kg (<= 0 means no gravitational interaction).
        radius, dimensions, height, volume: Geometric parameters; missing
              values are filled by resolve_shape().
        charge: Electric charge in Coulombs.
        gravitational_mass: Overrides `mass` in the gravitation module.
        is_static: Excluded from dynamic force application.
        connections: Structural links owned by this object.
    """
    id: str
    type: str = ShapeKind.SPHERE.value
    position: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    mass: float = 1.0
    radius: float | None = None
    dimensions: tuple[float, float, float] | None = None
    height: float | None = None
    volume: float | None = None
    charge: float = 0.0
    gravitational_mass: float | None = None
    is_static: bool = False
    connections: tuple[Connection, ...] = ()

    def __post_init__(self) -> None:
        """Convert position/velocity to float64 arrays for consistent numerics."""
        self.position = vec3(self.position)
        self.velocity = vec3(self.velocity)
        self.connections = tuple(self.connections)

    @property
    def shape(self) -> ShapeDescriptor:
        return resolve_shape(self)


@dataclass
class ObjectState:
    """Runtime state of one body, refreshed by the external solver every tick."""
    position: np.ndarray
    velocity: np.ndarray

    def __post_init__(self) -> None:
        self.position = f64(self.position)
        self.velocity = f64(self.velocity)


# Per-module, per-tick result: object id -> force [fx, fy, fz] in Newtons.
ForceMap = Dict[str, np.ndarray]
