# MIT License (see LICENSE)
"""
Physical constants and scene-descriptor defaults.

All values use SI units. The fluid defaults describe fresh water at room
temperature and a 10 m deep pool whose surface sits at y = 0.
"""
from __future__ import annotations

# Coulomb's constant k = 1/(4πε₀), rounded the way the editor's scenes expect.
# Value: 8.99 × 10⁹ N·m²/C²
K_COULOMB: float = 8.99e9

# Newtonian gravitational constant, N·m²/kg².
G_NEWTON: float = 6.67430e-11

# Scaled G used for "terrestrial" scenes so kilogram-sized bodies attract
# visibly over a few seconds of simulation.
G_TERRESTRIAL: float = 6.67430e-8

# Default gravity vector (y-up).
DEFAULT_GRAVITY: tuple[float, float, float] = (0.0, -9.81, 0.0)

# Fluid defaults (water).
FLUID_DENSITY: float = 1000.0          # kg/m³
FLUID_VISCOSITY: float = 0.001         # Pa·s
FLUID_SURFACE_LEVEL: float = 0.0       # world y of the free surface
FLUID_HEIGHT: float = 10.0             # depth of the fluid slab
FLUID_DRAG_COEFFICIENT: float = 0.47   # sphere in turbulent flow

# Gravitation module defaults.
GRAVITY_MIN_DISTANCE: float = 1e-6
GRAVITY_SOFTENING: float = 0.0
