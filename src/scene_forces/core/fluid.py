# MIT License (see LICENSE)
"""
Fluid force module: buoyancy and quadratic drag.

The fluid is a horizontal slab between `surface_level - fluid_height`
and `surface_level`. For each dynamic object with runtime state:

    s      = submersion fraction in [0, 1]
    F_b    = ρ · |g| · V · s                    (along +y)
    F_d    = -½ · C_d · ρ · |v|² · A · s · v̂    (opposes velocity)
    F      = F_b + F_d

Submersion is measured on the object's vertical extent
[y - r, y + r], where r is the explicit radius or half the largest
bounding dimension (see ShapeDescriptor.effective_radius).
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from ..config import FluidConfig
from ..constants import DEFAULT_GRAVITY
from ..types import ForceMap, ObjectState, PhysicsObject, ShapeDescriptor
from ..util import f64, norm, zero3

logger = logging.getLogger(__name__)


def submersion_fraction(shape: ShapeDescriptor, y: float, fluid: FluidConfig) -> float:
    """
    Fraction (0-1) of the object's vertical extent below the surface.

    - fully above the surface: 0
    - fully below the slab floor: 1
    - inside the slab, or spanning the floor: 1 (the part beneath the
      floor stays wetted, which keeps the fraction monotonic in y)

    The floor (`fluid.bottom_level`) therefore never lowers the fraction;
    `fluid_height` only bounds the slab for diagnostics.
    - spanning the surface: height below the surface over full height

    A zero-size object is a point: 0 at or above the surface, 1 below.
    """
    r = shape.effective_radius
    fluid_top = fluid.surface_level
    obj_bottom = y - r
    obj_top = y + r

    if obj_bottom >= fluid_top:
        return 0.0
    if obj_top <= fluid_top:
        return 1.0

    # spans the surface
    submerged = fluid_top - obj_bottom
    return float(max(0.0, min(1.0, submerged / (2.0 * r))))


def buoyancy_force(shape: ShapeDescriptor, submersion: float, fluid: FluidConfig, g: float) -> np.ndarray:
    """Archimedes' force ρ·|g|·V·s, purely along +y."""
    magnitude = fluid.density * abs(g) * shape.volume * submersion
    return np.array([0.0, magnitude, 0.0], dtype=np.float64)


def drag_force(shape: ShapeDescriptor, velocity: np.ndarray, submersion: float, fluid: FluidConfig) -> np.ndarray:
    """
    Quadratic drag ½·C_d·ρ·|v|²·A·s, directed against the velocity.

    Zero when the object is dry or at rest.
    """
    if submersion == 0.0:
        return zero3()
    speed = norm(velocity)
    if speed == 0.0:
        return zero3()
    magnitude = (
        0.5 * fluid.drag_coefficient * fluid.density
        * speed * speed * shape.cross_section_area * submersion
    )
    return -magnitude * (velocity / speed)


@dataclass(frozen=True)
class FluidSample:
    """Last observed fluid interaction of one object (diagnostics only)."""
    position: np.ndarray
    velocity: np.ndarray
    submersion: float
    timestamp: float


class FluidField:
    """
    Buoyancy + drag for every dynamic object with runtime state.

    The `samples` cache is overwritten each tick and emptied by reset();
    it is never read back by compute().
    """

    name = "fluid"

    def __init__(
        self,
        config: FluidConfig | None = None,
        gravity: Sequence[float] = DEFAULT_GRAVITY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or FluidConfig()
        self.gravity = f64(gravity)
        self.clock = clock
        self.samples: dict[str, FluidSample] = {}

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def update_surface(self, dt: float) -> float:
        """Current surface level. The surface is flat and static."""
        return self.config.surface_level

    def compute(
        self,
        objects: Sequence[PhysicsObject],
        states: Mapping[str, ObjectState],
        handles: Mapping[str, Any],
    ) -> ForceMap:
        """
        Return an entry (possibly zero) for every non-static object with state.

        Objects without runtime state are skipped silently.
        """
        if not self.enabled:
            return {}

        forces: ForceMap = {}
        g = float(self.gravity[1])
        now = self.clock()

        for obj in objects:
            if obj.is_static:
                continue
            state = states.get(obj.id)
            if state is None:
                continue

            shape = obj.shape
            s = submersion_fraction(shape, float(state.position[1]), self.config)

            f = zero3()
            if s > 0.0:
                f += buoyancy_force(shape, s, self.config, g)
                f += drag_force(shape, state.velocity, s, self.config)
            forces[obj.id] = f

            self.samples[obj.id] = FluidSample(
                position=state.position.copy(),
                velocity=state.velocity.copy(),
                submersion=s,
                timestamp=now,
            )

        return forces

    def reset(self) -> None:
        """Drop cached samples (scene reload or reset)."""
        self.samples.clear()
