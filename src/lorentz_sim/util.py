# MIT License (see LICENSE)
"""
Utility functions for 3D vector math.

Vectors are numpy arrays of shape (3,). The explicit component formulas
below are faster than np.cross/np.dot for single small vectors, which
matters because they run once per particle per RK4 stage.
"""
from __future__ import annotations

import math

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Allows tuple/list inputs for positions, velocities and field vectors.
    """
    return np.array(x, dtype=np.float64)


def vec3(x) -> np.ndarray:
    """Convert to a float64 3-vector, rejecting any other shape."""
    v = f64(x)
    if v.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {v.shape}")
    return v


def dot(a: np.ndarray, b: np.ndarray) -> float:
    """Dot product of two 3-vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def norm2(v: np.ndarray) -> float:
    """Squared magnitude. Avoids sqrt for performance."""
    return dot(v, v)


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 3-vector."""
    return math.sqrt(norm2(v))


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    3D cross product a × b.

    Used for the magnetic part of the Lorentz force, q(v × B).
    """
    return np.array([
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ], dtype=np.float64)


def all_finite(v: np.ndarray) -> bool:
    """True when no component is NaN or ±inf."""
    return bool(np.all(np.isfinite(v)))


def readonly(a: np.ndarray) -> np.ndarray:
    """Return a write-protected copy of an array."""
    out = np.array(a, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out
