# examples/coulomb_cluster.py
from dataclasses import replace

from lorentz_sim import Simulation, SimConfig
from lorentz_sim.config import FieldParams, ParticleParams, PhysicsParams
from lorentz_sim.core import kinetic_energy

# Ring of mixed charges with mutual Coulomb forces in a weak Bz.
config = SimConfig(
    physics=PhysicsParams(k_e=2.0, friction=0.05),
    particles=ParticleParams(count=8, random_charge=True, init_velocity=(0.0, 0.0, 0.5), seed=3),
    fields=FieldParams(Bz="0.2"),
)
sim = Simulation(config)

for _ in range(5):
    sim.run(1 / 60, 60)
    print(f"t={sim.total_time:5.2f}  KE={kinetic_energy(sim.store.particles, sim.config.physics):.4f}")

# same cluster, quadratic drag
sim.configure(replace(config, physics=replace(config.physics, drag_model="quadratic")))
sim.run(1 / 60, 300)
print("quadratic drag, KE:", kinetic_energy(sim.store.particles, sim.config.physics))
