# MIT License (see LICENSE)
"""
Mutual Newtonian gravitation between massive objects.

    d²  = |r|² + ε²
    |F| = G · m1 · m2 / max(d², d_min²)

The force on each body points toward the other. Static bodies exert
attraction but receive no contribution themselves.
"""
from __future__ import annotations
import logging
from typing import Any, Mapping, Sequence

import numpy as np

from ..config import GravitationConfig
from ..types import ForceMap, ObjectState, PhysicsObject
from ..util import norm2, zero3

logger = logging.getLogger(__name__)


class GravitationField:
    """Pairwise attraction between every object with positive mass."""

    name = "gravitation"

    def __init__(self, config: GravitationConfig | None = None) -> None:
        self.config = config or GravitationConfig(enabled=True)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def compute(
        self,
        objects: Sequence[PhysicsObject],
        states: Mapping[str, ObjectState],
        handles: Mapping[str, Any],
    ) -> ForceMap:
        if not self.enabled or len(objects) < 2:
            return {}

        massive = [o for o in objects if o.mass > 0]
        if len(massive) < 2:
            return {}

        G = self.config.effective_constant
        eps2 = self.config.softening * self.config.softening
        dmin2 = self.config.min_distance * self.config.min_distance

        positions = {
            o.id: states[o.id].position if o.id in states else o.position
            for o in massive
        }
        masses = {
            o.id: o.gravitational_mass if o.gravitational_mass is not None else o.mass
            for o in massive
        }
        forces: ForceMap = {o.id: zero3() for o in massive if not o.is_static}

        n = len(massive)
        for i in range(n):
            oi = massive[i]
            for j in range(i + 1, n):
                oj = massive[j]
                r = positions[oj.id] - positions[oi.id]
                d2 = norm2(r) + eps2
                d = float(np.sqrt(d2))
                if d <= 0.0:
                    continue
                magnitude = G * masses[oi.id] * masses[oj.id] / max(d2, dmin2)
                f = magnitude * (r / d)
                if oi.id in forces:
                    forces[oi.id] += f
                if oj.id in forces:
                    forces[oj.id] -= f

        return forces

    def reset(self) -> None:
        """Stateless; nothing to clear."""
