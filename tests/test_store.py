import math

import numpy as np
import pytest

from lorentz_sim.config import ParticleParams, PhysicsParams, SimConfig
from lorentz_sim.errors import NumericDomainError
from lorentz_sim.store import ParticleStore, clamp_speed
from lorentz_sim.types import Particle, StepDelta


def _delta(dr=(0.0, 0.0, 0.0), dv=(0.0, 0.0, 0.0)):
    return StepDelta(np.array(dr, dtype=float), np.array(dv, dtype=float))


def test_seed_places_particles_on_ring():
    cfg = SimConfig(particles=ParticleParams(count=4, ring_radius=2.0, init_velocity=(0, 0, 1)))
    store = ParticleStore()
    store.seed(cfg)
    positions = np.stack([p.position for p in store.particles])
    assert np.allclose(positions, [[2, 0, 0], [0, 2, 0], [-2, 0, 0], [0, -2, 0]], atol=1e-12)
    assert all(np.array_equal(p.velocity, [0, 0, 1]) for p in store.particles)
    assert all(p.charge == 1.0 and p.gamma == 1.0 for p in store.particles)
    # particles do not share a velocity buffer
    assert store.particles[0].velocity is not store.particles[1].velocity


def test_commit_applies_all_deltas():
    store = ParticleStore()
    store.reset([Particle((0, 0, 0), (1, 0, 0)), Particle((1, 1, 1), (0, 0, 0))])
    store.commit([_delta(dr=(1, 0, 0)), _delta(dv=(0, 2, 0))], time=0.1)
    assert np.array_equal(store.particles[0].position, [1, 0, 0])
    assert np.array_equal(store.particles[1].velocity, [0, 2, 0])


def test_commit_is_all_or_nothing():
    store = ParticleStore()
    store.reset([Particle((0, 0, 0)), Particle((1, 1, 1))])
    with pytest.raises(NumericDomainError):
        store.commit([_delta(dr=(1, 0, 0)), _delta(dv=(math.nan, 0, 0))], time=0.1)
    assert np.array_equal(store.particles[0].position, [0, 0, 0])
    assert np.array_equal(store.particles[1].velocity, [0, 0, 0])

    with pytest.raises(ValueError):
        store.commit([_delta()], time=0.1)


def test_trajectory_log_records_every_commit():
    store = ParticleStore()
    store.reset([Particle((0, 0, 0), (1, 0, 0))], log_trajectory=True)
    for k in range(1, 4):
        store.commit([_delta(dr=(0.1, 0, 0))], time=0.1 * k)

    log = store.trajectory(0)
    assert [s.time for s in log] == pytest.approx([0.0, 0.1, 0.2, 0.3])
    assert log[-1].position[0] == pytest.approx(0.3)
    assert log[-1].as_row() == pytest.approx((0.3, 0.3, 0.0, 0.0, 1.0, 0.0, 0.0))
    # samples are copies, not views of the live particle
    store.particles[0].position[0] = 99.0
    assert log[-1].position[0] == pytest.approx(0.3)


def test_trajectory_log_disabled_by_default():
    store = ParticleStore()
    store.reset([Particle()])
    store.commit([_delta(dr=(1, 0, 0))], time=0.1)
    assert store.trajectory(0) == []
    store.log_enabled = True
    store.commit([_delta(dr=(1, 0, 0))], time=0.2)
    assert len(store.trajectory(0)) == 1


def test_trail_is_bounded():
    store = ParticleStore()
    store.reset([Particle()], trail_enabled=True, trail_length=3)
    for _ in range(10):
        store.commit([_delta(dr=(1, 0, 0))], time=0.0)
    trail = store.trail(0)
    assert len(trail) == 3
    assert [p[0] for p in trail] == [8.0, 9.0, 10.0]
    store.clear_trails()
    assert store.trail(0) == []


def test_set_charge_takes_effect_in_next_snapshot():
    store = ParticleStore()
    store.reset([Particle(charge=1.0)])
    store.set_charge(0, -3.0)
    assert store.snapshot().charges[0] == -3.0
    with pytest.raises(ValueError):
        store.set_charge(0, math.inf)


def test_views_are_copies():
    store = ParticleStore()
    store.reset([Particle((1, 2, 3), charge=2.0, color="#ff0000")])
    view = store.views()[0]
    assert view.charge == 2.0 and view.color == "#ff0000" and view.gamma == 1.0
    view.position[0] = 50.0
    assert store.particles[0].position[0] == 1.0


def test_relativistic_commit_clamps_and_updates_gamma():
    params = PhysicsParams(use_relativity=True, c=20.0)
    store = ParticleStore(params)
    store.reset([Particle(velocity=(10.0, 0.0, 0.0))])
    assert store.particles[0].gamma == pytest.approx(1 / math.sqrt(0.75))
    store.commit([_delta(dv=(100.0, 0.0, 0.0))], time=0.1)
    v = store.particles[0].velocity
    assert np.linalg.norm(v) < 20.0
    assert v[0] > 19.99
    assert math.isfinite(store.particles[0].gamma)


def test_clamp_speed_is_identity_in_classical_mode():
    v = np.array([1e9, 0.0, 0.0])
    assert clamp_speed(v, PhysicsParams()) is v


def test_apply_params_clamps_and_refreshes_gamma():
    store = ParticleStore()
    store.reset([Particle(velocity=(30.0, 0.0, 0.0)), Particle(velocity=(0.0, 10.0, 0.0))])
    assert [p.gamma for p in store.particles] == [1.0, 1.0]

    store.apply_params(PhysicsParams(use_relativity=True, c=20.0))
    fast, slow = store.particles
    assert np.linalg.norm(fast.velocity) < 20.0
    assert math.isfinite(fast.gamma) and fast.gamma > 1e3
    assert np.array_equal(slow.velocity, [0.0, 10.0, 0.0])
    assert slow.gamma == pytest.approx(1 / math.sqrt(0.75))

    store.apply_params(PhysicsParams())
    assert [p.gamma for p in store.particles] == [1.0, 1.0]
