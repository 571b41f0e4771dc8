# MIT License (see LICENSE)
"""
lorentz_sim - Charged-particle trajectories in user-defined E and B fields.

This package provides the physics core of an interactive particle
visualizer: a Lorentz/Coulomb/drag force model with an optional
relativistic branch, an RK4 integrator that updates all particles from one
frozen snapshot, and a pausable, wall-clock-driven simulation loop.

Main entry points:
    - Simulation: The loop controller (update/step/pause/configure).
    - SimConfig: Physical, particle and field parameters.
    - FieldEvaluator: Compiled field expressions Ex..Bz (x, y, z, t).
    - presets: Ready-made configurations.

Submodules:
    - core: Force model, integrators, invariants.
    - fields: Safe expression compiler and field evaluator.
    - io: JSON configuration files.
    - renderer: Optional visualization adapters.

Example:
    from lorentz_sim import Simulation, presets

    sim = Simulation(presets.cyclotron())
    sim.run(dt=0.01, steps=628)
    print(sim.store.particles[0].position)
"""
from . import presets
from .config import FieldParams, ParticleParams, PhysicsParams, SimConfig
from .errors import (
    ConfigurationError,
    DivisionByZeroError,
    FieldCompileError,
    LorentzSimError,
    NumericDomainError,
)
from .fields import FieldEvaluator
from .simulation import SimState, Simulation
from .store import ParticleStore
from .types import Particle, ParticleSnapshot, ParticleView, StepDelta, TrajectorySample

__all__ = [
    # Simulation
    "Simulation",
    "SimState",
    "ParticleStore",
    "FieldEvaluator",
    "presets",
    # Configuration
    "SimConfig",
    "PhysicsParams",
    "ParticleParams",
    "FieldParams",
    # Types
    "Particle",
    "ParticleSnapshot",
    "ParticleView",
    "StepDelta",
    "TrajectorySample",
    # Errors
    "LorentzSimError",
    "FieldCompileError",
    "ConfigurationError",
    "DivisionByZeroError",
    "NumericDomainError",
]
