# MIT License (see LICENSE)
"""
Core physics components.

This subpackage provides:
    - Force model: Lorentz (classical and relativistic), drag, Coulomb.
    - Integrators: RK4 against a frozen all-particle snapshot.
    - Invariants: kinetic energy, momentum, max speed.

Typical usage:
    from lorentz_sim.core import ForceModel, step_all

    model = ForceModel(config.physics, fields)
    deltas = step_all(model, store.snapshot(), dt=0.01, t=0.0)
"""
from .forces import (
    ForceModel,
    lorentz_force,
    linear_drag,
    quadratic_drag,
    coulomb_force,
    lorentz_factor,
    max_speed_squared,
    relativistic_acceleration,
)
from .integrators import rk4_delta, rk4_step, step_all
from .invariants import kinetic_energy, linear_momentum, max_speed

__all__ = [
    # Forces
    "ForceModel",
    "lorentz_force",
    "linear_drag",
    "quadratic_drag",
    "coulomb_force",
    "lorentz_factor",
    "max_speed_squared",
    "relativistic_acceleration",
    # Integrators
    "rk4_delta",
    "rk4_step",
    "step_all",
    # Invariants
    "kinetic_energy",
    "linear_momentum",
    "max_speed",
]
