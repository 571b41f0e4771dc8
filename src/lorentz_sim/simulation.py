# MIT License (see LICENSE)
"""
The simulation loop.

Simulation is the controller that ties the pieces together. Per frame:
    1. dt = now - last_frame_time, scaled by animation_speed, clamped to max_dt.
    2. Snapshot every particle.
    3. Compute an RK4 delta for every particle against that snapshot, with
       fields evaluated from the advanced clock total_time + dt.
    4. Commit all deltas at once and store the advanced clock.
    5. Hand the committed state to the renderer.

It is the only place that catches errors from the physics core. Any
exception while computing or committing a frame pauses the simulation,
leaves particles at their last committed state and reports the error
(log, ``last_error`` and the ``on_error`` callbacks).

Structure:
    - User creates a Simulation from a SimConfig.
    - A frame callback calls sim.update() (wall-clock driven), or tests and
      scripts call sim.step(dt) directly.
"""
from __future__ import annotations

import enum
import logging
import time
from contextlib import nullcontext
from dataclasses import replace
from typing import Callable, Mapping

import numpy as np

from .config import SimConfig
from .core.forces import ForceModel
from .core.integrators import step_all
from .errors import FieldCompileError
from .fields import FieldEvaluator
from .profiler import Profiler
from .renderer.adapter import RendererAdapter
from .store import ParticleStore

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Exception], None]


class SimState(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"


class Simulation:
    """
    Charged-particle simulation controller.

    Attributes:
        config: Current (validated) configuration.
        store: The particle state store.
        fields: Compiled field functions.
        state: RUNNING or PAUSED.
        total_time: Simulation clock, advanced by every committed step.
        last_error: The exception that last paused the simulation, if any.
        field_error: The last rejected field edit, if any.
        on_error: Callbacks invoked with the exception that paused a step.

    Example:
        sim = Simulation(presets.cyclotron())
        while True:
            sim.update()       # from a render/animation callback
    """

    def __init__(
        self,
        config: SimConfig | None = None,
        clock: Callable[[], float] = time.perf_counter,
        renderer: RendererAdapter | None = None,
        rng: np.random.Generator | None = None,
        profiler: Profiler | None = None,
    ):
        self.config = (config or SimConfig()).validate()
        self.clock = clock
        self.renderer = renderer
        self.rng = rng
        self.profiler = profiler

        self.state = SimState.RUNNING
        self.total_time = 0.0
        self.last_error: Exception | None = None
        self.field_error: FieldCompileError | None = None
        self.on_error: list[ErrorCallback] = []

        self.fields = FieldEvaluator()
        self.store = ParticleStore(self.config.physics)
        self.model = ForceModel(self.config.physics, self.fields)
        self._last_frame_time = self.clock()
        self.initialize()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Recompile the configured fields, re-seed the particles and reset
        the clock. The pause state is left as it is.

        Raises:
            FieldCompileError: The configured field expressions are invalid.
        """
        self.fields.compile(self.config.fields.as_dict())
        self.field_error = None
        self.model = ForceModel(self.config.physics, self.fields)
        self.store.seed(self.config, self.rng)
        self.total_time = 0.0
        self._last_frame_time = self.clock()
        logger.info(
            f"Initialized {len(self.store)} particle(s), "
            f"{'relativistic' if self.config.physics.use_relativity else 'classical'} mode"
        )

    def configure(self, config: SimConfig) -> None:
        """
        Install a new configuration.

        Field strings that changed are recompiled. Particles are re-seeded
        when particle parameters, base_charge or rest_mass changed; otherwise
        the running state continues under the new physics, with velocities
        clamped and gamma refreshed at once.

        Raises:
            ConfigurationError, DivisionByZeroError: Invalid config; the
                current configuration stays in effect.
            FieldCompileError: Invalid field strings; nothing is changed.
        """
        config.validate()
        old = self.config
        if config.fields != old.fields:
            self.fields.compile(config.fields.as_dict())
            self.field_error = None

        reseed = (
            config.particles != old.particles
            or config.physics.base_charge != old.physics.base_charge
            or config.physics.rest_mass != old.physics.rest_mass
        )
        self.config = config
        self.model = ForceModel(config.physics, self.fields)
        if reseed:
            self.store.seed(config, self.rng)
            self.total_time = 0.0
        else:
            self.store.apply_params(config.physics)

    def set_field_expressions(self, expressions: Mapping[str, str]) -> bool:
        """
        Apply an operator edit of one or more field expressions.

        Returns:
            True if installed. False if any expression was rejected; the
            running simulation keeps its previous fields and ``field_error``
            holds the reason.
        """
        try:
            self.fields.compile(expressions)
        except FieldCompileError as exc:
            self.field_error = exc
            logger.warning(f"Field update rejected: {exc}")
            return False
        self.field_error = None
        self.config = replace(self.config, fields=replace(self.config.fields, **dict(expressions)))
        return True

    # ------------------------------------------------------------------
    # Pause control
    # ------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self.state is SimState.PAUSED

    def pause(self) -> None:
        self.state = SimState.PAUSED

    def resume(self) -> None:
        """Resume; the time spent paused is not integrated."""
        self.state = SimState.RUNNING
        self.last_error = None
        self._last_frame_time = self.clock()

    def toggle_pause(self) -> SimState:
        if self.paused:
            self.resume()
        else:
            self.pause()
        return self.state

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def frame_dt(self, elapsed: float) -> float:
        """Wall-clock interval -> simulation timestep (scaled, clamped)."""
        p = self.config.physics
        return min(elapsed * p.animation_speed, p.max_dt)

    def update(self) -> bool:
        """
        Advance by one wall-clock-driven frame.

        Returns:
            True if a step was committed.
        """
        now = self.clock()
        elapsed = now - self._last_frame_time
        self._last_frame_time = now

        if self.paused or elapsed <= 0:
            return False
        dt = self.frame_dt(elapsed)
        if dt <= 0:
            return False
        return self.step(dt)

    def step(self, dt: float) -> bool:
        """
        Integrate every particle by ``dt`` and commit the result.

        Returns:
            True on success. False if paused, or if the step failed; the
            simulation is then paused and particles keep their last
            committed state.
        """
        if self.paused:
            return False
        # fields see the advanced clock; total_time only moves on commit
        t = self.total_time + dt
        try:
            with self._section("snapshot"):
                snapshot = self.store.snapshot()
            with self._section("integrate"):
                deltas = step_all(self.model, snapshot, dt, t)
            with self._section("commit"):
                self.store.commit(deltas, t)
        except Exception as exc:
            self._fail(exc)
            return False

        self.total_time = t
        if self.renderer is not None:
            self.renderer.render(self.total_time, self.store.views())
        return True

    def run(self, dt: float, steps: int) -> int:
        """
        Take up to ``steps`` fixed steps, stopping early on failure.

        Returns:
            Number of committed steps.
        """
        done = 0
        for _ in range(steps):
            if not self.step(dt):
                break
            done += 1
        return done

    def _fail(self, exc: Exception) -> None:
        self.state = SimState.PAUSED
        self.last_error = exc
        logger.exception(f"Simulation paused at t={self.total_time:.4f}: {exc}")
        for callback in list(self.on_error):
            callback(exc)

    def _section(self, name: str):
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)
