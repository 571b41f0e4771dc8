import numpy as np
import pytest

from lorentz_sim.config import FieldParams, ParticleParams, PhysicsParams, SimConfig
from lorentz_sim.types import Particle


class FakeClock:
    """Manually advanced stand-in for time.perf_counter."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def single_particle_config(
    velocity=(1.0, 0.0, 0.0),
    fields=None,
    **physics,
) -> SimConfig:
    """One particle at the origin (ring radius 0) with the given fields."""
    return SimConfig(
        physics=PhysicsParams(**physics),
        particles=ParticleParams(count=1, ring_radius=0.0, init_velocity=velocity),
        fields=FieldParams(**(fields or {})),
    )


def charged_cluster(n: int = 5, seed: int = 7) -> list[Particle]:
    """n particles scattered in a unit box with mixed charges."""
    rng = np.random.default_rng(seed)
    return [
        Particle(position=rng.uniform(-1, 1, 3), velocity=rng.uniform(-1, 1, 3),
                 charge=float(rng.choice([-1.0, 1.0]) * rng.uniform(0.5, 2.0)))
        for _ in range(n)
    ]
