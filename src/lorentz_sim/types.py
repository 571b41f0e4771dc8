# MIT License (see LICENSE)
"""
Core type definitions for the charged-particle simulation.

Defines the fundamental data structures:
- Particle: a point charge with position, velocity, charge and Lorentz factor.
- ParticleSnapshot: immutable all-particle state read by the force model.
- StepDelta: the (Δr, Δv) produced by one integration step.
- ParticleView / TrajectorySample: what the renderer and exporter consume.

The equations of motion are the coupled first-order system
  dr/dt = v
  dv/dt = a(r, v, t)
where a() is provided by core.forces.ForceModel.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .constants import DEFAULT_PARTICLE_COLOR
from .util import readonly, vec3


@dataclass
class Particle:
    """
    A charged point particle.

    Attributes:
        position: World-space position [x, y, z].
        velocity: Velocity [vx, vy, vz].
        charge: Electric charge. Zero is valid and only disables field forces.
        gamma: Lorentz factor. 1.0 in classical mode; refreshed after every
            committed step in relativistic mode.
        color: Display color handed to the renderer.

    Note:
        Position and velocity are converted to float64 numpy 3-vectors on
        init; any other shape raises ValueError.
    """
    position: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    charge: float = 0.0
    gamma: float = 1.0
    color: str = DEFAULT_PARTICLE_COLOR

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.velocity = vec3(self.velocity)
        self.charge = float(self.charge)


@dataclass(frozen=True)
class ParticleSnapshot:
    """
    Frozen state of every particle at the start of a step.

    All RK4 stages of all particles read from the same snapshot, so the result
    of a step cannot depend on the order in which particles are processed.
    The arrays are write-protected copies.

    Attributes:
        positions: Shape (N, 3).
        velocities: Shape (N, 3).
        charges: Shape (N,).
    """
    positions: np.ndarray
    velocities: np.ndarray
    charges: np.ndarray

    @classmethod
    def of(cls, particles: list[Particle]) -> "ParticleSnapshot":
        """Copy the current state of a particle list."""
        if not particles:
            return cls(readonly(np.zeros((0, 3))), readonly(np.zeros((0, 3))),
                       readonly(np.zeros(0)))
        return cls(
            positions=readonly(np.stack([p.position for p in particles])),
            velocities=readonly(np.stack([p.velocity for p in particles])),
            charges=readonly(np.array([p.charge for p in particles])),
        )

    def __len__(self) -> int:
        return int(self.charges.shape[0])


@dataclass(frozen=True)
class StepDelta:
    """Change in position and velocity over one step of one particle."""
    dr: np.ndarray
    dv: np.ndarray


@dataclass(frozen=True)
class ParticleView:
    """Read-only per-particle record handed to a renderer once per frame."""
    position: np.ndarray
    velocity: np.ndarray
    charge: float
    gamma: float
    color: str


@dataclass(frozen=True)
class TrajectorySample:
    """One committed state of one particle, for the export log."""
    time: float
    position: np.ndarray
    velocity: np.ndarray

    def as_row(self) -> tuple[float, ...]:
        """Flatten to (t, x, y, z, vx, vy, vz)."""
        return (self.time, *self.position.tolist(), *self.velocity.tolist())


@dataclass
class TrajectoryLog:
    """Append-only list of samples for one particle."""
    samples: list[TrajectorySample] = field(default_factory=list)

    def append(self, time: float, position: np.ndarray, velocity: np.ndarray) -> None:
        self.samples.append(TrajectorySample(time, position.copy(), velocity.copy()))

    def __len__(self) -> int:
        return len(self.samples)
