# examples/exb_drift.py
from lorentz_sim import Simulation, presets

sim = Simulation(presets.exb_drift())
p = sim.store.particles[0]
x0 = float(p.position[0])

sim.run(0.01, 1000)

# guiding center drifts along +x at |E|/|B| = 0.5
print("t:", sim.total_time)
print("mean drift speed:", (float(p.position[0]) - x0) / sim.total_time)
print("pos:", p.position)
