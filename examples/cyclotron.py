# examples/cyclotron.py
import numpy as np

from lorentz_sim import Simulation, presets

sim = Simulation(presets.cyclotron())
p = sim.store.particles[0]
center = p.position + np.array([0.0, -2.0, 0.0])   # r = m v / (q B) = 2

# one period T = 2π m / (q B)
dt = 0.01
sim.run(dt, int(round(2 * np.pi / dt)))

print("t:", sim.total_time)
print("pos:", p.position, "radius:", float(np.linalg.norm(p.position - center)))
print("vel:", p.velocity)
