# MIT License (see LICENSE)
"""
Scene-level configuration for the force modules.

Each field block of the scene descriptor (`fluid`, `electrostatic`,
`connections`, `gravitationalPhysics`) maps to one frozen dataclass.
Missing keys and explicit nulls take the documented default; an explicit
zero is kept as zero.

Descriptor example:
    {
      "gravity": [0, -9.81, 0],
      "fluid": {"density": 1000, "surfaceLevel": 0, "fluidHeight": 10},
      "electrostatic": {"enabled": true},
      "connections": {"enabled": false},
      "gravitationalPhysics": {"enabled": true, "softening": 0.01}
    }
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping

from . import constants as C


def _get(data: Mapping[str, Any] | None, key: str, default: Any) -> Any:
    """dict.get that also maps an explicit None to `default`."""
    if not data:
        return default
    value = data.get(key)
    return default if value is None else value


@dataclass(frozen=True)
class FluidConfig:
    """
    Fluid slab occupying y in [surface_level - fluid_height, surface_level].

    Attributes:
        density: Fluid density in kg/m³.
        viscosity: Dynamic viscosity in Pa·s (carried for diagnostics).
        surface_level: World y of the free surface.
        fluid_height: Depth of the slab below the surface.
        drag_coefficient: Quadratic drag coefficient C_d.
        enabled: Module switch.
    """
    density: float = C.FLUID_DENSITY
    viscosity: float = C.FLUID_VISCOSITY
    surface_level: float = C.FLUID_SURFACE_LEVEL
    fluid_height: float = C.FLUID_HEIGHT
    drag_coefficient: float = C.FLUID_DRAG_COEFFICIENT
    enabled: bool = True

    @property
    def bottom_level(self) -> float:
        return self.surface_level - self.fluid_height

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "FluidConfig":
        return cls(
            density=float(_get(data, "density", C.FLUID_DENSITY)),
            viscosity=float(_get(data, "viscosity", C.FLUID_VISCOSITY)),
            surface_level=float(_get(data, "surfaceLevel", C.FLUID_SURFACE_LEVEL)),
            fluid_height=float(_get(data, "fluidHeight", C.FLUID_HEIGHT)),
            drag_coefficient=float(_get(data, "dragCoefficient", C.FLUID_DRAG_COEFFICIENT)),
            enabled=_get(data, "enabled", True) is not False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "density": self.density,
            "viscosity": self.viscosity,
            "surfaceLevel": self.surface_level,
            "fluidHeight": self.fluid_height,
            "dragCoefficient": self.drag_coefficient,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class ElectrostaticConfig:
    """Coulomb interaction between charged objects. Enabled unless switched off."""
    enabled: bool = True
    coulomb_constant: float = C.K_COULOMB

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ElectrostaticConfig":
        return cls(
            enabled=_get(data, "enabled", True) is not False,
            coulomb_constant=float(_get(data, "coulombConstant", C.K_COULOMB)),
        )


@dataclass(frozen=True)
class ConnectionConfig:
    """Structural link bookkeeping. Enabled unless switched off."""
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ConnectionConfig":
        return cls(enabled=_get(data, "enabled", True) is not False)


@dataclass(frozen=True)
class GravitationConfig:
    """
    Mutual Newtonian attraction between massive objects. Opt-in.

    Attributes:
        enabled: Module switch (default off).
        gravitational_constant: G; None means "use the default for the scale".
        min_distance: Floor on the separation used in the 1/d² term.
        softening: Plummer softening ε added as d² + ε².
        simulation_scale: "terrestrial" scales the default G up by 1000.
    """
    enabled: bool = False
    gravitational_constant: float | None = None
    min_distance: float = C.GRAVITY_MIN_DISTANCE
    softening: float = C.GRAVITY_SOFTENING
    simulation_scale: str = "terrestrial"

    @property
    def effective_constant(self) -> float:
        if self.gravitational_constant is not None:
            return self.gravitational_constant
        if self.simulation_scale == "terrestrial":
            return C.G_TERRESTRIAL
        return C.G_NEWTON

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None, simulation_scale: str = "terrestrial") -> "GravitationConfig":
        g = _get(data, "gravitationalConstant", None)
        return cls(
            enabled=bool(_get(data, "enabled", False)),
            gravitational_constant=None if g is None else float(g),
            min_distance=float(_get(data, "minDistance", C.GRAVITY_MIN_DISTANCE)),
            softening=float(_get(data, "softening", C.GRAVITY_SOFTENING)),
            simulation_scale=simulation_scale,
        )
