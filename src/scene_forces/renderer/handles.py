# MIT License (see LICENSE)
"""
Render-handle types mutated by the visual object store.

A render handle is whatever the host renderer uses for a mesh. The store
only touches the attributes defined here, so any object with the same
shape (a scene-graph node, a proxy to a browser mesh, ...) works.
"""
from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Vector3:
    """Mutable xyz triple with the `set` method mesh transforms expose."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def set(self, x: float, y: float, z: float) -> "Vector3":
        self.x, self.y, self.z = float(x), float(y), float(z)
        return self

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]


@dataclass
class MeshMaterial:
    """
    Surface appearance of a mesh.

    Attributes:
        color: CSS-style color string ("#ff0000", "red").
        opacity: 0 (invisible) to 1 (opaque).
        transparent: Must be True for opacity < 1 to take effect.
        metalness: PBR metalness in [0, 1].
        roughness: PBR roughness in [0, 1].
    """
    color: str = "#ffffff"
    opacity: float = 1.0
    transparent: bool = False
    metalness: float = 0.0
    roughness: float = 1.0


@dataclass
class MeshHandle:
    """In-memory mesh: transform triples plus a material."""
    position: Vector3 = field(default_factory=Vector3)
    rotation: Vector3 = field(default_factory=Vector3)
    scale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    material: MeshMaterial | None = field(default_factory=MeshMaterial)
