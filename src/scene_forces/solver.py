# MIT License (see LICENSE)
"""
Contract with the external rigid-body solver.

The force layer never integrates motion in production: the host engine
owns collisions, contacts, constraints and integration. SolverAdapter is
the narrow surface the session needs from it:

    handles()        -> {id: handle | None}   which bodies are live
    read_states()    -> {id: ObjectState}     position/velocity readback
    is_fixed(id)     -> bool                  static/kinematic bodies
    apply_force(id, f)                        accumulate before integration

PointMassSolver is a small headless implementation (gravity + velocity
Verlet, no collisions) for examples, tests and benchmarks.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from .constants import DEFAULT_GRAVITY
from .types import ObjectState, PhysicsObject
from .util import f64, vec3, zero3


class SolverAdapter(ABC):
    """Abstract binding to a rigid-body engine."""

    @abstractmethod
    def handles(self) -> dict[str, Any]:
        """Map of object id to live engine handle (None when not live)."""
        ...

    @abstractmethod
    def read_states(self) -> dict[str, ObjectState]:
        """Current position/velocity of every live body."""
        ...

    @abstractmethod
    def is_fixed(self, object_id: str) -> bool:
        """True for bodies the engine never moves."""
        ...

    @abstractmethod
    def apply_force(self, object_id: str, force: np.ndarray) -> None:
        """Add `force` to the body's accumulator for the coming step."""
        ...

    def step(self, dt: float) -> None:
        """Advance the engine. Engines driven by their own loop leave this a no-op."""


@dataclass
class PointBody:
    """
    A body in PointMassSolver.

    Attributes:
        id: Object id.
        mass: Mass in kg; mass <= 0 or is_static pins the body.
        position, velocity: Kinematic state (float64 3-vectors).
        is_static: Pinned body.
        force: Accumulated force for the current step.
    """
    id: str
    mass: float
    position: np.ndarray
    velocity: np.ndarray
    is_static: bool = False
    force: np.ndarray = field(default_factory=zero3)

    @property
    def inv_mass(self) -> float:
        return 0.0 if self.is_static or self.mass <= 0 else 1.0 / self.mass

    def clear_forces(self) -> None:
        self.force[:] = 0.0


class PointMassSolver(SolverAdapter):
    """
    Minimal engine: point masses under uniform gravity.

    Each step adds m·g to the accumulated forces, advances with velocity
    Verlet holding forces constant over the step, then clears forces:

        x(t+dt) = x + v·dt + ½·a·dt²
        v(t+dt) = v + a·dt
    """

    def __init__(self, gravity: Sequence[float] = DEFAULT_GRAVITY) -> None:
        self.gravity = f64(gravity)
        self.bodies: dict[str, PointBody] = {}
        self.time = 0.0

    def add_body(
        self,
        object_id: str,
        mass: float = 1.0,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        velocity: Sequence[float] = (0.0, 0.0, 0.0),
        is_static: bool = False,
    ) -> PointBody:
        body = PointBody(
            id=object_id,
            mass=float(mass),
            position=vec3(position),
            velocity=vec3(velocity),
            is_static=is_static,
        )
        self.bodies[object_id] = body
        return body

    def add_object(self, obj: PhysicsObject) -> PointBody:
        """Create a body from a scene object."""
        return self.add_body(obj.id, obj.mass, obj.position, obj.velocity, obj.is_static)

    def remove_body(self, object_id: str) -> None:
        self.bodies.pop(object_id, None)

    def handles(self) -> dict[str, Any]:
        return dict(self.bodies)

    def read_states(self) -> dict[str, ObjectState]:
        return {
            object_id: ObjectState(position=b.position.copy(), velocity=b.velocity.copy())
            for object_id, b in self.bodies.items()
        }

    def is_fixed(self, object_id: str) -> bool:
        body = self.bodies.get(object_id)
        return body is None or body.inv_mass == 0.0

    def apply_force(self, object_id: str, force: np.ndarray) -> None:
        body = self.bodies.get(object_id)
        if body is not None:
            body.force += force

    def step(self, dt: float) -> None:
        for body in self.bodies.values():
            inv_m = body.inv_mass
            if inv_m == 0.0:
                body.clear_forces()
                continue
            a = body.force * inv_m + self.gravity
            body.position = body.position + body.velocity * dt + 0.5 * a * dt * dt
            body.velocity = body.velocity + a * dt
            body.clear_forces()
        self.time += dt
