# MIT License (see LICENSE)
"""
Explicit RK4 integration of particle motion.

Solves the coupled first-order system
    dr/dt = v,         dv/dt = a(r, v, t)

Integrators here never modify particles. They return StepDelta values
computed against a frozen ParticleSnapshot; the caller commits all deltas
of a frame at once (see store.ParticleStore.commit). Because every particle
reads the same snapshot, the result does not depend on iteration order.

Reference:
    Runge-Kutta methods: https://en.wikipedia.org/wiki/Runge-Kutta_methods
"""
from __future__ import annotations

from typing import Callable, Iterable

import numpy as np

from ..types import ParticleSnapshot, StepDelta
from .forces import ForceModel

# a(r, v, t) -> acceleration
AccelerationFn = Callable[[np.ndarray, np.ndarray, float], np.ndarray]


def rk4_delta(
    accel: AccelerationFn,
    r: np.ndarray,
    v: np.ndarray,
    t: float,
    dt: float,
) -> StepDelta:
    """
    One classical 4th-order Runge-Kutta step for dr/dt = v, dv/dt = a.

    Stages (each position stage uses the velocity estimate of the previous
    stage):
        k1v = a(r, v, t)                              k1r = v
        k2v = a(r + k1r dt/2, v + k1v dt/2, t + dt/2) k2r = v + k1v dt/2
        k3v = a(r + k2r dt/2, v + k2v dt/2, t + dt/2) k3r = v + k2v dt/2
        k4v = a(r + k3r dt,   v + k3v dt,   t + dt)   k4r = v + k3v dt
    combined with weights (1, 2, 2, 1)/6. Local error is O(dt⁵).

    Args:
        accel: Acceleration function a(r, v, t).
        r: Position at the start of the step.
        v: Velocity at the start of the step.
        t: Time at the start of the step.
        dt: Timestep.

    Returns:
        StepDelta with Δr and Δv; r and v are not modified.
    """
    h = 0.5 * dt

    k1r = v
    k1v = accel(r, v, t)

    k2r = v + h * k1v
    k2v = accel(r + h * k1r, k2r, t + h)

    k3r = v + h * k2v
    k3v = accel(r + h * k2r, k3r, t + h)

    k4r = v + dt * k3v
    k4v = accel(r + dt * k3r, k4r, t + dt)

    dr = (dt / 6.0) * (k1r + 2.0 * k2r + 2.0 * k3r + k4r)
    dv = (dt / 6.0) * (k1v + 2.0 * k2v + 2.0 * k3v + k4v)
    return StepDelta(dr=dr, dv=dv)


def rk4_step(
    model: ForceModel,
    index: int,
    snapshot: ParticleSnapshot,
    dt: float,
    t: float,
) -> StepDelta:
    """
    RK4 delta for one particle against a frozen all-particle snapshot.

    Args:
        model: Force model providing the acceleration.
        index: Particle to integrate.
        snapshot: State of all particles at the start of the step.
        dt: Timestep.
        t: Simulation time at the start of the step.
    """
    def accel(r: np.ndarray, v: np.ndarray, time: float) -> np.ndarray:
        return model.acceleration(index, r, v, time, snapshot)

    return rk4_delta(accel, snapshot.positions[index], snapshot.velocities[index], t, dt)


def step_all(
    model: ForceModel,
    snapshot: ParticleSnapshot,
    dt: float,
    t: float,
    order: Iterable[int] | None = None,
) -> list[StepDelta]:
    """
    Compute RK4 deltas for every particle in the snapshot.

    Args:
        model: Force model.
        snapshot: State of all particles at the start of the step.
        dt: Timestep.
        t: Simulation time at the start of the step.
        order: Optional processing order (a permutation of indices). The
            returned list is always indexed by particle, whatever the order.

    Returns:
        One StepDelta per particle, in particle order.
    """
    n = len(snapshot)
    indices = range(n) if order is None else list(order)
    if sorted(indices) != list(range(n)):
        raise ValueError(f"order must be a permutation of range({n})")

    deltas: list[StepDelta | None] = [None] * n
    for i in indices:
        deltas[i] = rk4_step(model, i, snapshot, dt, t)
    return deltas  # type: ignore[return-value]
