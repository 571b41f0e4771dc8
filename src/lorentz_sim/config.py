# MIT License (see LICENSE)
"""
Simulation configuration.

All physical, particle and field parameters live in three frozen
dataclasses bundled by SimConfig. The physics core never reads global state:
a SimConfig (or its PhysicsParams) is passed explicitly to whoever needs it.
Use dataclasses.replace() to derive a modified configuration.

Example:
    from dataclasses import replace
    cfg = SimConfig()
    cfg = replace(cfg, physics=replace(cfg.physics, use_relativity=True))
    cfg.validate()
"""
from __future__ import annotations
from dataclasses import dataclass, field
import math

from .constants import (
    C_SQUARED_EPSILON,
    DEFAULT_C,
    DEFAULT_PARTICLE_COLOR,
    DEFAULT_RING_RADIUS,
    FIELD_COMPONENTS,
    MAX_DT,
    SOFTENING,
)
from .errors import ConfigurationError, DivisionByZeroError

DRAG_MODELS = ("linear", "quadratic")

Vector3 = tuple[float, float, float]


def _vector(name: str, value) -> Vector3:
    try:
        x, y, z = (float(v) for v in value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a 3-vector, got {value!r}") from exc
    if not all(math.isfinite(v) for v in (x, y, z)):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return (x, y, z)


@dataclass(frozen=True)
class PhysicsParams:
    """
    Global physical parameters, shared by every particle.

    Attributes:
        use_relativity: Select the relativistic force branch.
        c: Speed of light (relativistic branch only).
        rest_mass: Rest mass shared by all particles. Must be > 0.
        friction: Drag coefficient.
        k_e: Coulomb constant. 0 disables inter-particle forces.
        base_charge: Charge given to seeded particles.
        animation_speed: Multiplier from wall-clock time to simulation time.
        gravity: Gravitational acceleration vector.
        external_force: Constant force applied to every particle.
        enable_gravity: Add m·g to the force sum.
        enable_external_force: Add external_force to the force sum.
        drag_model: "linear" (F = -k v) or "quadratic" (F = -k |v| v).
        relativistic_coulomb: Keep the Coulomb term in the relativistic branch.
        relativistic_drag: Keep the drag term in the relativistic branch.
        max_dt: Upper bound on a single frame's timestep.
        softening: Coulomb minimum-distance floor.
        c_squared_epsilon: Guard subtracted from c² in the Lorentz factor.
    """
    use_relativity: bool = False
    c: float = DEFAULT_C
    rest_mass: float = 1.0
    friction: float = 0.0
    k_e: float = 0.0
    base_charge: float = 1.0
    animation_speed: float = 1.5
    gravity: Vector3 = (0.0, 0.0, 0.0)
    external_force: Vector3 = (0.0, 0.0, 0.0)
    enable_gravity: bool = False
    enable_external_force: bool = False
    drag_model: str = "linear"
    relativistic_coulomb: bool = False
    relativistic_drag: bool = False
    max_dt: float = MAX_DT
    softening: float = SOFTENING
    c_squared_epsilon: float = C_SQUARED_EPSILON

    def __post_init__(self) -> None:
        object.__setattr__(self, "gravity", _vector("gravity", self.gravity))
        object.__setattr__(self, "external_force", _vector("external_force", self.external_force))

    def validate(self) -> None:
        """
        Check parameter ranges.

        Raises:
            DivisionByZeroError: rest_mass == 0.
            ConfigurationError: Any other out-of-range value.
        """
        if self.rest_mass == 0:
            raise DivisionByZeroError("rest_mass must be non-zero")
        for name in ("c", "rest_mass", "friction", "k_e", "base_charge",
                     "animation_speed", "max_dt", "softening", "c_squared_epsilon"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite")
        if self.rest_mass < 0:
            raise ConfigurationError(f"rest_mass must be positive, got {self.rest_mass}")
        if self.c <= 0:
            raise ConfigurationError(f"c must be positive, got {self.c}")
        if self.friction < 0:
            raise ConfigurationError(f"friction must be >= 0, got {self.friction}")
        if self.animation_speed < 0:
            raise ConfigurationError(f"animation_speed must be >= 0, got {self.animation_speed}")
        if self.max_dt <= 0:
            raise ConfigurationError(f"max_dt must be positive, got {self.max_dt}")
        if self.softening <= 0:
            raise ConfigurationError(f"softening must be positive, got {self.softening}")
        if not 0 < self.c_squared_epsilon < self.c * self.c:
            raise ConfigurationError("c_squared_epsilon must lie in (0, c²)")
        if self.drag_model not in DRAG_MODELS:
            raise ConfigurationError(
                f"drag_model must be one of {DRAG_MODELS}, got {self.drag_model!r}"
            )


@dataclass(frozen=True)
class ParticleParams:
    """
    How particles are seeded on (re-)initialization.

    Attributes:
        count: Number of particles, placed on a ring in the z = 0 plane.
        random_charge: Draw each charge uniformly from ±base_charge.
        init_velocity: Initial velocity shared by every particle.
        ring_radius: Radius of the seeding ring.
        seed: Seed for the random generator (None = nondeterministic).
        color: Display color of every particle.
        trail_enabled: Keep a bounded position history per particle.
        trail_length: Maximum history entries per particle.
        log_trajectory: Record every committed step in the trajectory log.
    """
    count: int = 1
    random_charge: bool = False
    init_velocity: Vector3 = (2.0, 0.0, 0.0)
    ring_radius: float = DEFAULT_RING_RADIUS
    seed: int | None = None
    color: str = DEFAULT_PARTICLE_COLOR
    trail_enabled: bool = True
    trail_length: int = 1000
    log_trajectory: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "init_velocity", _vector("init_velocity", self.init_velocity))

    def validate(self) -> None:
        for name in ("count", "trail_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.count < 0:
            raise ConfigurationError(f"count must be >= 0, got {self.count}")
        if not math.isfinite(self.ring_radius) or self.ring_radius < 0:
            raise ConfigurationError(f"ring_radius must be >= 0, got {self.ring_radius}")
        if self.trail_length < 1:
            raise ConfigurationError(f"trail_length must be >= 1, got {self.trail_length}")


@dataclass(frozen=True)
class FieldParams:
    """Source text of the six field components, each a function of x, y, z, t."""
    Ex: str = "0.0"
    Ey: str = "0.0"
    Ez: str = "0.0"
    Bx: str = "0.0"
    By: str = "0.0"
    Bz: str = "1.0"

    def as_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FIELD_COMPONENTS}


@dataclass(frozen=True)
class SimConfig:
    """Complete configuration snapshot of a simulation."""
    physics: PhysicsParams = field(default_factory=PhysicsParams)
    particles: ParticleParams = field(default_factory=ParticleParams)
    fields: FieldParams = field(default_factory=FieldParams)

    def validate(self) -> "SimConfig":
        """Validate all sections and return self, for chaining."""
        self.physics.validate()
        self.particles.validate()
        return self
