# MIT License (see LICENSE)
"""
Force model for charged particles.

This module provides pure force functions (Lorentz, drag, Coulomb, Lorentz
factor) and the ForceModel that combines them into an acceleration.

Key concepts:
- Nothing here mutates particle state. ForceModel.acceleration reads the
  particle being integrated from its arguments and every other particle
  from a frozen ParticleSnapshot.
- Classical branch:
      a = (q(E + v×B) + F_drag + F_coulomb [+ m g] [+ F_ext]) / m
- Relativistic branch, with γ = 1/√(1 - v²/c²) and v² clamped to c² - ε:
      a = (F - v (v·F)/c²) / (γ m)
  For F = q(E + v×B) this is (q/(γm))(E + v×B - v(v·E)/c²), since
  v·(v×B) = 0. Drag and Coulomb join F only when enabled for this branch.
- Coulomb pairwise is O(N²), which is fine for the few dozen particles
  this is meant for.
"""
from __future__ import annotations

import math
from typing import Callable

import numpy as np

from ..config import PhysicsParams
from ..constants import C_SQUARED_EPSILON, SOFTENING
from ..errors import DivisionByZeroError
from ..fields import FieldEvaluator
from ..types import ParticleSnapshot
from ..util import cross, dot, f64, norm, norm2


def lorentz_force(q: float, E: np.ndarray, B: np.ndarray, v: np.ndarray) -> np.ndarray:
    """
    Lorentz force F = q (E + v × B).

    Args:
        q: Charge.
        E: Electric field vector.
        B: Magnetic field vector.
        v: Particle velocity.
    """
    return q * (E + cross(v, B))


def linear_drag(v: np.ndarray, friction: float) -> np.ndarray:
    """Linear drag F = -k v."""
    return -friction * v


def quadratic_drag(v: np.ndarray, friction: float) -> np.ndarray:
    """Quadratic (aerodynamic) drag F = -k |v| v."""
    return -friction * norm(v) * v


DRAG_FUNCTIONS: dict[str, Callable[[np.ndarray, float], np.ndarray]] = {
    "linear": linear_drag,
    "quadratic": quadratic_drag,
}


def coulomb_force(
    index: int,
    position: np.ndarray,
    q: float,
    positions: np.ndarray,
    charges: np.ndarray,
    k_e: float,
    softening: float = SOFTENING,
) -> np.ndarray:
    """
    Net Coulomb force on particle ``index`` from every other particle.

    Implements F = Σ_j k q q_j (r - r_j) / max(|r - r_j|³, s³).

    Args:
        index: Index of the particle itself (excluded from the sum).
        position: Position of the particle (may be an RK4 stage position).
        q: Its charge.
        positions: Snapshot positions of all particles, shape (N, 3).
        charges: Snapshot charges, shape (N,).
        k_e: Coulomb constant.
        softening: Minimum-distance floor s.
    """
    if k_e == 0.0 or q == 0.0 or len(charges) < 2:
        return np.zeros(3, dtype=np.float64)

    diff = position - positions                    # (N, 3): r_i - r_j
    dist3 = np.sum(diff * diff, axis=1) ** 1.5
    denom = np.maximum(dist3, softening ** 3)
    weights = charges / denom
    weights[index] = 0.0
    return (k_e * q) * (weights @ diff)


def lorentz_factor(v: np.ndarray, c: float, eps: float = C_SQUARED_EPSILON) -> float:
    """
    Lorentz factor γ = 1/√(1 - v²/c²), with v² clamped to c² - ε.

    Evaluated as c/√(c² - v²), which is always finite once v² is clamped.
    When ε is below the float resolution of c², the largest double under c²
    is used instead.
    """
    c2 = c * c
    v2 = min(norm2(v), max_speed_squared(c, eps))
    return c / math.sqrt(c2 - v2)


def max_speed_squared(c: float, eps: float = C_SQUARED_EPSILON) -> float:
    """Largest admissible v²: c² - ε, but always strictly below c²."""
    c2 = c * c
    limit = c2 - eps
    if limit >= c2:
        limit = float(np.nextafter(c2, 0.0))
    return limit


def relativistic_acceleration(
    F: np.ndarray, v: np.ndarray, gamma: float, m: float, c: float
) -> np.ndarray:
    """
    Acceleration of a particle of rest mass m under force F.

    a = (F - v (v·F)/c²) / (γ m)
    """
    return (F - v * (dot(v, F) / (c * c))) / (gamma * m)


class ForceModel:
    """
    Computes the acceleration of one particle.

    Stateless with respect to particles: it holds only the (read-only)
    physical parameters and the field evaluator.

    Example:
        model = ForceModel(PhysicsParams(), FieldEvaluator({"Bz": "1"}))
        snap = ParticleSnapshot.of(particles)
        a = model.acceleration(0, snap.positions[0], snap.velocities[0], 0.0, snap)
    """

    def __init__(self, params: PhysicsParams, fields: FieldEvaluator):
        self.params = params
        self.fields = fields
        self._drag = DRAG_FUNCTIONS[params.drag_model]
        self._gravity = f64(params.gravity)
        self._external = f64(params.external_force)

    def acceleration(
        self,
        index: int,
        position: np.ndarray,
        velocity: np.ndarray,
        time: float,
        snapshot: ParticleSnapshot,
    ) -> np.ndarray:
        """
        Acceleration of particle ``index`` at the given (stage) state.

        Args:
            index: Particle index into the snapshot.
            position: Position at which to evaluate.
            velocity: Velocity at which to evaluate.
            time: Simulation time, passed to the field functions.
            snapshot: Frozen state of every particle (charges, and the
                positions of the other particles for Coulomb).

        Raises:
            DivisionByZeroError: rest_mass is zero.
            NumericDomainError: A field is not finite at this point.
        """
        p = self.params
        m = p.rest_mass
        if m == 0:
            raise DivisionByZeroError("rest_mass is zero")

        q = float(snapshot.charges[index])
        E = self.fields.electric(position, time)
        B = self.fields.magnetic(position, time)
        F = lorentz_force(q, E, B, velocity)

        relativistic = p.use_relativity
        if not relativistic or p.relativistic_drag:
            if p.friction != 0.0:
                F = F + self._drag(velocity, p.friction)
        if not relativistic or p.relativistic_coulomb:
            F = F + coulomb_force(index, position, q, snapshot.positions, snapshot.charges,
                                  p.k_e, p.softening)
        if p.enable_gravity:
            F = F + m * self._gravity
        if p.enable_external_force:
            F = F + self._external

        if relativistic:
            gamma = lorentz_factor(velocity, p.c, p.c_squared_epsilon)
            return relativistic_acceleration(F, velocity, gamma, m, p.c)
        return F / m

    def gamma(self, velocity: np.ndarray) -> float:
        """Lorentz factor for display: 1.0 in classical mode."""
        if not self.params.use_relativity:
            return 1.0
        return lorentz_factor(velocity, self.params.c, self.params.c_squared_epsilon)
