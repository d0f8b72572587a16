# MIT License (see LICENSE)
"""
Force modules evaluated every physics tick.

This subpackage provides:
    - ElectrostaticField: Coulomb forces between charged objects.
    - FluidField: buoyancy and drag inside a fluid slab.
    - ConnectionModule: structural link bookkeeping (zero forces).
    - GravitationField: mutual Newtonian attraction.
    - ForceAggregator: runs modules and sums their ForceMaps.

Typical usage:
    from scene_forces.core import ForceAggregator, FluidField, ElectrostaticField

    aggregator = ForceAggregator([FluidField(), ElectrostaticField()])
    total = aggregator.compute(objects, states, handles)
"""
from .aggregate import ForceAggregator, ForceModule, sum_force_maps
from .connections import ConnectionModule, LinkState
from .electrostatic import ElectrostaticField, coulomb_pair_force
from .fluid import FluidField, FluidSample, buoyancy_force, drag_force, submersion_fraction
from .gravitation import GravitationField

__all__ = [
    # Aggregation
    "ForceAggregator",
    "ForceModule",
    "sum_force_maps",
    # Modules
    "ElectrostaticField",
    "FluidField",
    "ConnectionModule",
    "GravitationField",
    # Helpers
    "coulomb_pair_force",
    "submersion_fraction",
    "buoyancy_force",
    "drag_force",
    "FluidSample",
    "LinkState",
]
