# MIT License (see LICENSE)
"""
Utility functions for 3D vector math.

Every position, velocity and force handled by the force modules is a
float64 numpy array of shape (3,). These helpers keep conversions and the
degenerate-length cases in one place.
"""
from __future__ import annotations
from typing import Any

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase so tuple/list inputs from scene
    descriptors can be mixed freely with solver readback.
    """
    return np.array(x, dtype=np.float64)


def vec3(x: Any, default: tuple[float, float, float] = (0.0, 0.0, 0.0)) -> np.ndarray:
    """
    Coerce a scene value to a 3-vector.

    None falls back to `default`; a scalar is broadcast to all three axes
    (the editor writes uniform scale as a single number).
    """
    if x is None:
        return f64(default)
    if np.isscalar(x):
        return np.full(3, float(x), dtype=np.float64)
    v = f64(x)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {v.shape}")
    return v


def zero3() -> np.ndarray:
    """Fresh zero 3-vector."""
    return np.zeros(3, dtype=np.float64)


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 3D vector."""
    return float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 3D vector."""
    return float(np.sqrt(norm2(v)))


def to_list(arr: Any) -> list[float]:
    """Convert a numpy array or tuple to a plain list of floats."""
    if isinstance(arr, np.ndarray):
        return arr.tolist()
    return [float(a) for a in arr]
