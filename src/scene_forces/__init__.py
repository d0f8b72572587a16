# MIT License (see LICENSE)
"""
scene_forces - Supplemental forces and visual animation for a 3D scene editor.

The host application owns a rigid-body engine and a renderer. This
package computes what those engines do not: buoyancy and drag inside a
fluid slab, Coulomb forces between charged bodies, mutual gravitation,
structural link bookkeeping, and per-frame animation of render-only
objects.

Main entry points:
    - Scene: Objects plus global field settings for one tick.
    - SimulationSession: Per-scene state arena and physics-tick driver.
    - SolverAdapter / PointMassSolver: Contract with the rigid-body engine.
    - VisualObjectStore: Render-only objects and their animations.

Submodules:
    - core: Force modules and the aggregator.
    - io: Scene descriptor parsing and JSON files.
    - renderer: Render handles and frame readers.
    - scripting: Restricted evaluator for animation scripts.

Example:
    from scene_forces import PhysicsObject, Scene, FluidConfig, session_for

    ball = PhysicsObject(id="ball", type="Sphere", radius=0.5, position=(0, 2, 0))
    scene = Scene(objects=(ball,), fluid=FluidConfig())
    session = session_for(scene)
    session.step(1 / 240)
"""
from .config import ConnectionConfig, ElectrostaticConfig, FluidConfig, GravitationConfig
from .scene import Scene, SimulationSession, session_for
from .solver import PointMassSolver, SolverAdapter
from .types import Connection, ForceMap, ObjectState, PhysicsObject, ShapeKind, resolve_shape
from .visual import AnimationConfig, VisualObject, VisualObjectStore

__all__ = [
    # Scene
    "Scene",
    "SimulationSession",
    "session_for",
    "PhysicsObject",
    "Connection",
    "ObjectState",
    "ForceMap",
    "ShapeKind",
    "resolve_shape",
    # Configuration
    "FluidConfig",
    "ElectrostaticConfig",
    "ConnectionConfig",
    "GravitationConfig",
    # Solver
    "SolverAdapter",
    "PointMassSolver",
    # Visual objects
    "VisualObjectStore",
    "VisualObject",
    "AnimationConfig",
]
