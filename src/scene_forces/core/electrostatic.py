# MIT License (see LICENSE)
"""
Electrostatic (Coulomb) force module.

Computes pairwise inverse-square forces between charged objects that are
currently live in the external solver:

    |F| = k · |q1 · q2| / d²

Like charges repel and opposite charges attract. Each pair contributes
equal and opposite forces (Newton's third law), so the forces on any
pair sum to the zero vector.

Complexity is O(N²) in the number of charged objects.
"""
from __future__ import annotations
import logging
from typing import Any, Mapping, Sequence

import numpy as np

from ..config import ElectrostaticConfig
from ..types import ForceMap, ObjectState, PhysicsObject
from ..util import norm, zero3

logger = logging.getLogger(__name__)


def coulomb_pair_force(
    q1: float,
    q2: float,
    p1: np.ndarray,
    p2: np.ndarray,
    k: float,
) -> np.ndarray:
    """
    Force on body 1 from body 2.

    Returns the zero vector at zero separation instead of dividing by zero.
    """
    r = p2 - p1
    d = norm(r)
    if d <= 0.0:
        return zero3()
    magnitude = k * abs(q1 * q2) / (d * d)
    # same sign: push body 1 away from body 2 (along -r)
    direction = -1.0 if q1 * q2 > 0 else 1.0
    return direction * magnitude * (r / d)


class ElectrostaticField:
    """
    Coulomb interaction between all charged, active objects.

    Usage:
        field = ElectrostaticField(ElectrostaticConfig())
        forces = field.compute(scene.objects, states, handles)
    """

    name = "electrostatic"

    def __init__(self, config: ElectrostaticConfig | None = None) -> None:
        self.config = config or ElectrostaticConfig()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def compute(
        self,
        objects: Sequence[PhysicsObject],
        states: Mapping[str, ObjectState],
        handles: Mapping[str, Any],
    ) -> ForceMap:
        """
        Return forces for every charged object with an active handle.

        The map is empty when the module is disabled or when fewer than two
        such objects exist. Positions come from the runtime state when one
        is available, otherwise from the object's declared position.
        """
        if not self.enabled or len(objects) < 2:
            return {}

        charged = [
            o for o in objects
            if o.charge != 0.0 and handles.get(o.id) is not None
        ]
        if len(charged) < 2:
            return {}

        positions = {
            o.id: states[o.id].position if o.id in states else o.position
            for o in charged
        }
        forces: ForceMap = {o.id: zero3() for o in charged}
        k = self.config.coulomb_constant

        n = len(charged)
        for i in range(n):
            oi = charged[i]
            for j in range(i + 1, n):
                oj = charged[j]
                f = coulomb_pair_force(oi.charge, oj.charge, positions[oi.id], positions[oj.id], k)
                forces[oi.id] += f
                forces[oj.id] -= f

        return forces

    def reset(self) -> None:
        """Stateless; nothing to clear."""
