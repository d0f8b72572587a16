# MIT License (see LICENSE)
"""
Scene description and the per-scene simulation session.

Scene is the read-only description handed to the force modules each
tick: the object list plus the global field settings.

SimulationSession owns everything whose lifetime is tied to a loaded
scene: the force modules (and their per-object caches), the optional
history recorder and the simulation clock. Loading another scene or
calling reset() clears all of it in one place.

Physics tick:
    1. Read live handles and runtime states from the external solver.
    2. Run every enabled force module (ForceAggregator).
    3. Apply each summed, non-zero force to non-fixed bodies.
    4. Let the solver integrate (step only).
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .config import ConnectionConfig, ElectrostaticConfig, FluidConfig, GravitationConfig
from .constants import DEFAULT_GRAVITY
from .core.aggregate import ForceAggregator
from .core.connections import ConnectionModule
from .core.electrostatic import ElectrostaticField
from .core.fluid import FluidField
from .core.gravitation import GravitationField
from .history import StateHistory
from .profiler import Profiler
from .solver import PointMassSolver, SolverAdapter
from .types import ForceMap, PhysicsObject
from .util import f64, norm2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scene:
    """
    Immutable-per-tick scene description.

    Attributes:
        objects: Simulated objects in scene order; ids must be unique.
        gravity: Global gravity vector (default [0, -9.81, 0]).
        fluid: Fluid slab settings; None means the scene has no fluid.
        electrostatic: Coulomb module settings.
        connections: Structural bookkeeping settings.
        gravitation: Mutual gravitation settings (off by default).
        simulation_scale: "terrestrial" or "astronomical".
    """
    objects: tuple[PhysicsObject, ...] = ()
    gravity: tuple[float, float, float] = DEFAULT_GRAVITY
    fluid: FluidConfig | None = None
    electrostatic: ElectrostaticConfig = field(default_factory=ElectrostaticConfig)
    connections: ConnectionConfig = field(default_factory=ConnectionConfig)
    gravitation: GravitationConfig = field(default_factory=GravitationConfig)
    simulation_scale: str = "terrestrial"

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "gravity", tuple(float(g) for g in self.gravity))
        seen: set[str] = set()
        for obj in self.objects:
            if obj.id in seen:
                raise ValueError(f"Duplicate object id in scene: {obj.id!r}")
            seen.add(obj.id)

    def get(self, object_id: str) -> PhysicsObject | None:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None


def build_modules(scene: Scene) -> list:
    """Instantiate the force modules the scene enables, in evaluation order."""
    candidates = (
        ("gravitation", scene.gravitation.enabled, lambda: GravitationField(scene.gravitation)),
        ("fluid", scene.fluid is not None and scene.fluid.enabled, lambda: FluidField(scene.fluid, gravity=scene.gravity)),
        ("electrostatic", scene.electrostatic.enabled, lambda: ElectrostaticField(scene.electrostatic)),
        ("connections", scene.connections.enabled, lambda: ConnectionModule(scene.connections)),
    )
    modules = []
    for name, enabled, make in candidates:
        if not enabled:
            logger.debug("Module %s disabled for this scene", name)
            continue
        modules.append(make())
    return modules


class SimulationSession:
    """
    State arena and physics-tick driver for one loaded scene.

    Usage:
        solver = PointMassSolver(gravity=scene.gravity)
        for obj in scene.objects:
            solver.add_object(obj)
        session = SimulationSession(scene, solver)
        for _ in range(240):
            session.step(1 / 240)
    """

    def __init__(
        self,
        scene: Scene,
        solver: SolverAdapter,
        profiler: Profiler | None = None,
        history: StateHistory | None = None,
    ) -> None:
        self.solver = solver
        self.profiler = profiler
        self.history = history
        self.time = 0.0
        self.last_forces: ForceMap = {}
        self.load(scene)

    def load(self, scene: Scene) -> None:
        """Bind a new scene, rebuild its modules and drop all cached state."""
        self.scene = scene
        self.aggregator = ForceAggregator(build_modules(scene), profiler=self.profiler)
        logger.info(
            "Session loaded %d objects; modules: %s",
            len(scene.objects),
            ", ".join(m.name for m in self.aggregator.modules) or "none",
        )
        self.reset()

    def reset(self) -> None:
        """Clear per-object module caches, history and the clock."""
        self.aggregator.reset()
        if self.history is not None:
            self.history.clear()
        self.time = 0.0
        self.last_forces = {}

    def module(self, name: str):
        return self.aggregator.module(name)

    def step_forces(self) -> ForceMap:
        """
        Compute this tick's summed ForceMap and apply it to the solver.

        Forces for unknown, inactive or fixed bodies are dropped silently.
        """
        prof = self.profiler
        if prof:
            with prof.section("readback"):
                handles = self.solver.handles()
                states = self.solver.read_states()
        else:
            handles = self.solver.handles()
            states = self.solver.read_states()

        if self.history is not None:
            for object_id, state in states.items():
                self.history.record(object_id, state.position, state.velocity, self.time)

        total = self.aggregator.compute(self.scene.objects, states, handles)

        for object_id, force in total.items():
            if handles.get(object_id) is None or self.solver.is_fixed(object_id):
                continue
            if norm2(force) == 0.0:
                continue
            self.solver.apply_force(object_id, f64(force))

        self.last_forces = total
        return total

    def step(self, dt: float) -> ForceMap:
        """One physics tick: aggregate forces, then let the solver integrate."""
        total = self.step_forces()
        if self.profiler:
            with self.profiler.section("integrate"):
                self.solver.step(dt)
        else:
            self.solver.step(dt)
        self.time += dt
        return total


def session_for(scene: Scene, **kwargs) -> SimulationSession:
    """
    Build a PointMassSolver populated from the scene and wrap it in a session.

    Handy for headless runs; production hosts pass their own SolverAdapter.
    """
    solver = PointMassSolver(gravity=scene.gravity)
    for obj in scene.objects:
        solver.add_object(obj)
    return SimulationSession(scene, solver, **kwargs)
