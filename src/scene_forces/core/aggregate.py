# MIT License (see LICENSE)
"""
Force aggregation across modules.

Every module follows the same contract:

    compute(objects, states, handles) -> ForceMap
    reset() -> None

The aggregator runs the enabled modules in order, sums their maps key by
key (a missing key is a zero contribution) and hands the total to the
external solver.
"""
from __future__ import annotations
import logging
from typing import Any, Iterable, Mapping, Protocol, Sequence

from ..profiler import Profiler
from ..types import ForceMap, ObjectState, PhysicsObject
from ..util import zero3

logger = logging.getLogger(__name__)


class ForceModule(Protocol):
    """Structural type shared by the field and structural modules."""
    name: str

    @property
    def enabled(self) -> bool: ...

    def compute(
        self,
        objects: Sequence[PhysicsObject],
        states: Mapping[str, ObjectState],
        handles: Mapping[str, Any],
    ) -> ForceMap: ...

    def reset(self) -> None: ...


def sum_force_maps(maps: Iterable[ForceMap]) -> ForceMap:
    """
    Key-wise sum of force maps.

    The result owns fresh arrays; input maps are never mutated.
    """
    total: ForceMap = {}
    for m in maps:
        for object_id, f in m.items():
            if object_id not in total:
                total[object_id] = zero3()
            total[object_id] += f
    return total


class ForceAggregator:
    """
    Ordered collection of force modules evaluated once per physics tick.

    Attributes:
        modules: Modules in evaluation order.
        profiler: Optional Profiler; each module is timed under its name.
        last_maps: Per-module maps from the most recent compute() call.
    """

    def __init__(self, modules: Sequence[ForceModule] = (), profiler: Profiler | None = None) -> None:
        self.modules: list[ForceModule] = list(modules)
        self.profiler = profiler
        self.last_maps: dict[str, ForceMap] = {}

    def add(self, module: ForceModule) -> None:
        self.modules.append(module)

    def module(self, name: str) -> ForceModule | None:
        for m in self.modules:
            if m.name == name:
                return m
        return None

    def compute(
        self,
        objects: Sequence[PhysicsObject],
        states: Mapping[str, ObjectState],
        handles: Mapping[str, Any],
    ) -> ForceMap:
        """Run every enabled module and return the summed ForceMap."""
        prof = self.profiler
        self.last_maps = {}
        for m in self.modules:
            if not m.enabled:
                continue
            if prof:
                with prof.section(m.name):
                    self.last_maps[m.name] = m.compute(objects, states, handles)
            else:
                self.last_maps[m.name] = m.compute(objects, states, handles)
        return sum_force_maps(self.last_maps.values())

    def reset(self) -> None:
        for m in self.modules:
            m.reset()
        self.last_maps = {}
