# MIT License (see LICENSE)
"""
Particle state store.

ParticleStore owns the particle list for the lifetime of one initialization:
it seeds particles from a SimConfig, hands out frozen snapshots to the
integrator, and commits a whole frame of deltas at once. It also keeps the
optional per-particle trail history and the append-only trajectory log that
the export side reads.

Commit is all-or-nothing: every delta is checked before any particle is
touched, so a failed frame leaves the last committed state intact.
"""
from __future__ import annotations

import logging
import math
from collections import deque
from typing import Sequence

import numpy as np

from .config import PhysicsParams, SimConfig
from .core.forces import lorentz_factor, max_speed_squared
from .errors import NumericDomainError
from .types import (
    Particle,
    ParticleSnapshot,
    ParticleView,
    StepDelta,
    TrajectoryLog,
    TrajectorySample,
)
from .util import all_finite, f64, norm2

logger = logging.getLogger(__name__)


def clamp_speed(v: np.ndarray, params: PhysicsParams) -> np.ndarray:
    """Rescale v so that v² stays below c² - ε (relativistic mode only)."""
    if not params.use_relativity:
        return v
    limit = max_speed_squared(params.c, params.c_squared_epsilon)
    v2 = norm2(v)
    if v2 < limit:
        return v
    scaled = v * math.sqrt(limit / v2)
    # sqrt rounding can land a hair above the limit
    while norm2(scaled) >= limit:
        scaled = scaled * (1.0 - 1e-15)
    return scaled


class ParticleStore:
    """
    Owns the mutable particle array.

    Attributes:
        particles: The live particles. Only this class mutates them.
        params: Physical parameters used for gamma and speed clamping.
    """

    def __init__(self, params: PhysicsParams | None = None):
        self.params = params or PhysicsParams()
        self.particles: list[Particle] = []
        self.trail_enabled = False
        self._trail_length = 1
        self._log_enabled = False
        self._trails: list[deque] = []
        self._logs: list[TrajectoryLog] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def seed(self, config: SimConfig, rng: np.random.Generator | None = None) -> None:
        """
        Replace all particles with a fresh set built from ``config``.

        Particles are spaced evenly on a ring of ``ring_radius`` in the z = 0
        plane and share ``init_velocity``. Charges are ``base_charge``, or
        uniform in ±base_charge when ``random_charge`` is set.

        Args:
            config: Configuration to seed from.
            rng: Random generator for charges; defaults to one seeded from
                ``config.particles.seed``.
        """
        pp, phys = config.particles, config.physics
        self.params = phys
        rng = rng if rng is not None else np.random.default_rng(pp.seed)

        velocity = f64(pp.init_velocity)
        clamped = clamp_speed(velocity, phys)
        if clamped is not velocity:
            logger.warning(
                f"Initial speed {math.sqrt(norm2(velocity)):.6g} is not below c={phys.c}; "
                f"clamped to {math.sqrt(norm2(clamped)):.6g}"
            )

        particles = []
        for i in range(pp.count):
            angle = 2.0 * math.pi * i / pp.count
            position = (math.cos(angle) * pp.ring_radius, math.sin(angle) * pp.ring_radius, 0.0)
            if pp.random_charge:
                charge = (rng.random() - 0.5) * 2.0 * phys.base_charge
            else:
                charge = phys.base_charge
            particles.append(Particle(position=position, velocity=clamped.copy(),
                                      charge=charge, color=pp.color))

        self.reset(particles, trail_enabled=pp.trail_enabled, trail_length=pp.trail_length,
                   log_trajectory=pp.log_trajectory)
        logger.info(f"Seeded {pp.count} particle(s)")

    def reset(
        self,
        particles: Sequence[Particle],
        trail_enabled: bool = False,
        trail_length: int = 1000,
        log_trajectory: bool = False,
    ) -> None:
        """
        Install an explicit particle list, discarding history and logs.

        The time-0 state is logged when logging is enabled.
        """
        self.particles = list(particles)
        self.trail_enabled = trail_enabled
        self._trail_length = trail_length
        self._log_enabled = log_trajectory
        self._trails = [deque(maxlen=trail_length) for _ in self.particles]
        self._logs = [TrajectoryLog() for _ in self.particles]
        for i, p in enumerate(self.particles):
            p.gamma = self._gamma(p.velocity)
            if self.trail_enabled:
                self._trails[i].append(p.position.copy())
            if self._log_enabled:
                self._logs[i].append(0.0, p.position, p.velocity)

    def apply_params(self, params: PhysicsParams) -> None:
        """
        Switch to new physical parameters without re-seeding.

        Live velocities are clamped below c and gamma is refreshed at once,
        so observers never see a state that violates the new parameters.
        """
        self.params = params
        for p in self.particles:
            p.velocity = clamp_speed(p.velocity, params)
            p.gamma = self._gamma(p.velocity)

    def clear(self) -> None:
        """Drop all particles."""
        self.reset([])

    def __len__(self) -> int:
        return len(self.particles)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def snapshot(self) -> ParticleSnapshot:
        """Frozen copy of the current state, for one step's computation."""
        return ParticleSnapshot.of(self.particles)

    def commit(self, deltas: Sequence[StepDelta], time: float) -> None:
        """
        Apply one frame of deltas to every particle at once.

        Args:
            deltas: One StepDelta per particle, in particle order.
            time: Simulation time after the step (used for the log).

        Raises:
            ValueError: Wrong number of deltas.
            NumericDomainError: A delta or a resulting state is not finite.
                No particle is modified in that case.
        """
        if len(deltas) != len(self.particles):
            raise ValueError(f"expected {len(self.particles)} deltas, got {len(deltas)}")

        new_state = []
        for i, (p, d) in enumerate(zip(self.particles, deltas)):
            r = p.position + d.dr
            v = p.velocity + d.dv
            if not (all_finite(r) and all_finite(v)):
                raise NumericDomainError(f"particle {i} reached a non-finite state at t={time}")
            new_state.append((r, clamp_speed(v, self.params)))

        for i, (p, (r, v)) in enumerate(zip(self.particles, new_state)):
            p.position = r
            p.velocity = v
            p.gamma = self._gamma(v)
            if self.trail_enabled:
                self._trails[i].append(r.copy())
            if self._log_enabled:
                self._logs[i].append(time, r, v)

    # ------------------------------------------------------------------
    # Editing and observation
    # ------------------------------------------------------------------

    def set_charge(self, index: int, charge: float) -> None:
        """Edit one particle's charge; takes effect from the next step."""
        if not math.isfinite(charge):
            raise ValueError(f"charge must be finite, got {charge}")
        self.particles[index].charge = float(charge)

    def views(self) -> list[ParticleView]:
        """Per-particle copies for a renderer."""
        return [
            ParticleView(p.position.copy(), p.velocity.copy(), p.charge, p.gamma, p.color)
            for p in self.particles
        ]

    def trail(self, index: int) -> list[np.ndarray]:
        """Recent positions of one particle, oldest first."""
        return list(self._trails[index])

    def clear_trails(self) -> None:
        for t in self._trails:
            t.clear()

    def trajectory(self, index: int) -> list[TrajectorySample]:
        """The logged samples of one particle, oldest first."""
        return list(self._logs[index].samples)

    @property
    def log_enabled(self) -> bool:
        return self._log_enabled

    @log_enabled.setter
    def log_enabled(self, enabled: bool) -> None:
        self._log_enabled = bool(enabled)

    def _gamma(self, v: np.ndarray) -> float:
        if not self.params.use_relativity:
            return 1.0
        return lorentz_factor(v, self.params.c, self.params.c_squared_epsilon)
