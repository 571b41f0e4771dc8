# MIT License (see LICENSE)
"""
Utilities for calculating conserved quantities.

Used for verifying simulation correctness and debugging stability issues.
A pure magnetic field does no work, so with E = 0, no drag and no Coulomb
coupling the kinetic energy should remain constant (within integration
error). In a closed Coulomb system without external fields, the total
momentum should remain constant.
"""
from __future__ import annotations

import numpy as np

from ..config import PhysicsParams
from ..types import Particle
from ..util import norm2
from .forces import lorentz_factor


def kinetic_energy(particles: list[Particle], params: PhysicsParams) -> float:
    """
    Total kinetic energy of the particles.

    Classical:      T = Σ ½ m v²
    Relativistic:   T = Σ (γ - 1) m c²
    """
    m = params.rest_mass
    ke = 0.0
    for p in particles:
        if params.use_relativity:
            gamma = lorentz_factor(p.velocity, params.c, params.c_squared_epsilon)
            ke += (gamma - 1.0) * m * params.c * params.c
        else:
            ke += 0.5 * m * norm2(p.velocity)
    return ke


def linear_momentum(particles: list[Particle], params: PhysicsParams) -> np.ndarray:
    """
    Total linear momentum P = Σ γ m v (γ = 1 in classical mode).
    """
    m = params.rest_mass
    total = np.zeros(3, dtype=np.float64)
    for p in particles:
        gamma = 1.0
        if params.use_relativity:
            gamma = lorentz_factor(p.velocity, params.c, params.c_squared_epsilon)
        total += gamma * m * p.velocity
    return total


def max_speed(particles: list[Particle]) -> float:
    """Largest particle speed, 0.0 for an empty list."""
    if not particles:
        return 0.0
    return float(max(np.sqrt(norm2(p.velocity)) for p in particles))
