import math

import numpy as np
import pytest

from lorentz_sim import Simulation
from lorentz_sim.config import PhysicsParams
from lorentz_sim.core import ForceModel, kinetic_energy, linear_momentum, rk4_delta, step_all
from lorentz_sim.fields import FieldEvaluator
from lorentz_sim.store import ParticleStore
from lorentz_sim.types import Particle

from conftest import single_particle_config


def test_rk4_is_exact_for_constant_acceleration():
    """
    Constant a: r(t) = r0 + v0 t + ½ a t², v(t) = v0 + a t.
    RK4 integrates polynomials of degree ≤ 4 exactly.
    """
    a = np.array([0.0, -9.81, 0.0])
    r0, v0 = np.array([0.0, 10.0, 0.0]), np.array([1.0, 0.0, 0.0])
    dt = 0.25
    d = rk4_delta(lambda r, v, t: a, r0, v0, 0.0, dt)
    assert np.allclose(d.dr, v0 * dt + 0.5 * a * dt * dt)
    assert np.allclose(d.dv, a * dt)


def test_rk4_stage_times():
    """Stages are evaluated at t, t + dt/2, t + dt/2, t + dt."""
    seen = []

    def accel(r, v, t):
        seen.append(t)
        return np.zeros(3)

    rk4_delta(accel, np.zeros(3), np.zeros(3), 2.0, 0.5)
    assert seen == [2.0, 2.25, 2.25, 2.5]


def test_rk4_time_dependent_force():
    """a = (cos t, 0, 0), v0 = 0 → v(t) = sin t after one step within O(dt⁵)."""
    dt = 0.1
    d = rk4_delta(lambda r, v, t: np.array([math.cos(t), 0.0, 0.0]),
                  np.zeros(3), np.zeros(3), 0.0, dt)
    assert d.dv[0] == pytest.approx(math.sin(dt), abs=1e-9)
    assert d.dr[0] == pytest.approx(1 - math.cos(dt), abs=1e-9)


def test_rk4_does_not_modify_inputs():
    r0, v0 = np.array([1.0, 2.0, 3.0]), np.array([4.0, 5.0, 6.0])
    rk4_delta(lambda r, v, t: -r, r0, v0, 0.0, 0.1)
    assert np.array_equal(r0, [1.0, 2.0, 3.0])
    assert np.array_equal(v0, [4.0, 5.0, 6.0])


def test_zero_field_straight_line():
    """
    E = B = 0, no friction:
      r(n dt) = r0 + v0 n dt
    """
    v0 = (1.0, -2.0, 0.5)
    sim = Simulation(single_particle_config(velocity=v0, fields={"Bz": "0"}))
    n, dt = 250, 0.02
    assert sim.run(dt, n) == n

    p = sim.store.particles[0]
    assert np.allclose(p.position, np.array(v0) * n * dt, atol=1e-9)
    assert np.allclose(p.velocity, v0)
    assert sim.total_time == pytest.approx(n * dt)


def test_cyclotron_radius_and_plane():
    """
    Uniform B = (0,0,Bz), E = 0:
      radius r = m |v⊥| / (|q| Bz); motion stays in the z = const plane.
    With q = 1, m = 1, Bz = 1, v0 = (2,0,0) from (2.5,0,0), the centre is at
    (2.5, -2, 0) and the radius is 2.
    """
    from lorentz_sim import presets
    sim = Simulation(presets.cyclotron())
    center = np.array([2.5, -2.0, 0.0])
    for _ in range(400):
        assert sim.step(0.01)
        p = sim.store.particles[0]
        assert np.linalg.norm(p.position - center) == pytest.approx(2.0, abs=1e-6)
        assert p.position[2] == 0.0


def test_cyclotron_full_period_closes():
    """
    q = 1, m = 1, v0 = (1,0,0), B = (0,0,1), dt = 0.01, 628 steps ≈ one period
    2π m/(|q| B): the particle returns to within 1e-2 of where it started.
    """
    sim = Simulation(single_particle_config(velocity=(1.0, 0.0, 0.0), fields={"Bz": "1"}))
    start = sim.store.particles[0].position.copy()
    assert np.array_equal(start, [0.0, 0.0, 0.0])

    assert sim.run(0.01, 628) == 628
    err = np.linalg.norm(sim.store.particles[0].position - start)
    print("cyclotron closure error", err)
    assert err < 1e-2


def test_cyclotron_period_scales_with_mass_and_field():
    """T = 2π m / (|q| B): m = 2, B = 2, q = -1 gives T = 2π."""
    sim = Simulation(single_particle_config(
        velocity=(0.0, 1.5, 0.0), fields={"Bz": "2"}, rest_mass=2.0, base_charge=-1.0))
    steps = 2000
    dt = 2 * math.pi / steps
    sim.run(dt, steps)
    assert np.linalg.norm(sim.store.particles[0].position) < 1e-6


def test_magnetic_field_does_no_work():
    """|v| is conserved in a pure magnetic field (kinetic energy constant)."""
    sim = Simulation(single_particle_config(velocity=(1.0, 0.5, 0.3), fields={"Bx": "0.3", "Bz": "1"}))
    ke0 = kinetic_energy(sim.store.particles, sim.config.physics)
    sim.run(0.01, 2000)
    ke1 = kinetic_energy(sim.store.particles, sim.config.physics)
    assert abs(ke1 - ke0) / ke0 < 1e-8


def test_exb_drift():
    """
    Starting at rest in E = (0, 0.5, 0), B = (0, 0, 1) with q = m = 1:
      x(t) = x0 + 0.5 (t - sin t),  y(t) = 0.5 (1 - cos t)
    i.e. a drift at E×B/B² = (0.5, 0, 0).
    """
    from lorentz_sim import presets
    sim = Simulation(presets.exb_drift())
    x0 = sim.store.particles[0].position[0]
    dt, n = 0.01, 500
    sim.run(dt, n)
    t = n * dt
    p = sim.store.particles[0].position
    assert p[0] == pytest.approx(x0 + 0.5 * (t - math.sin(t)), abs=1e-7)
    assert p[1] == pytest.approx(0.5 * (1 - math.cos(t)), abs=1e-7)


def test_step_all_rejects_bad_order():
    store = ParticleStore()
    store.reset([Particle(charge=1.0), Particle((1, 0, 0), charge=1.0)])
    model = ForceModel(PhysicsParams(), FieldEvaluator())
    with pytest.raises(ValueError):
        step_all(model, store.snapshot(), 0.01, 0.0, order=[0, 0])


def test_freefall_accuracy():
    """
    Uncharged particle under enabled gravity:
      y(t) = y0 + v0 t + 1/2 g t^2
      v(t) = v0 + g t
    """
    g = -9.81
    T = 1.0
    config = single_particle_config(
        velocity=(0.0, 0.0, 0.0),
        fields={"Bz": "0"},
        base_charge=0.0,
        gravity=(0.0, g, 0.0),
        enable_gravity=True,
    )
    sim = Simulation(config)
    n = 240
    assert sim.run(T / n, n) == n

    p = sim.store.particles[0]
    assert p.position[1] == pytest.approx(0.5 * g * T * T, rel=1e-9)
    assert p.velocity[1] == pytest.approx(g * T, rel=1e-9)
    assert sim.total_time == pytest.approx(T)


def test_linear_momentum_values():
    particles = [Particle(velocity=(1.0, 0.0, 0.0)), Particle(velocity=(0.0, 2.0, 0.0))]
    assert np.allclose(linear_momentum(particles, PhysicsParams(rest_mass=2.0)), [2.0, 4.0, 0.0])

    rel = PhysicsParams(use_relativity=True, c=2.0)
    p = [Particle(velocity=(1.0, 0.0, 0.0))]
    assert linear_momentum(p, rel)[0] == pytest.approx(1.0 / math.sqrt(0.75))


def test_coulomb_pair_nearly_conserves_momentum():
    """Two charges with no external field: total momentum stays ~0."""
    store = ParticleStore(PhysicsParams(k_e=1.0))
    store.reset([
        Particle(position=(-0.5, 0.0, 0.0), velocity=(0.0, 0.3, 0.0), charge=1.0),
        Particle(position=(0.5, 0.0, 0.0), velocity=(0.0, -0.3, 0.0), charge=-1.0),
    ])
    model = ForceModel(store.params, FieldEvaluator({"Bz": "0"}))
    t = 0.0
    for _ in range(200):
        store.commit(step_all(model, store.snapshot(), 0.001, t), t + 0.001)
        t += 0.001
    assert np.allclose(linear_momentum(store.particles, store.params), 0.0, atol=1e-4)
