# examples/relativistic.py
import logging

from lorentz_sim import Simulation, presets
from lorentz_sim.renderer import DebugRenderer

logging.basicConfig(level=logging.INFO)


class EveryNth(DebugRenderer):
    def __init__(self, n):
        super().__init__(verbose=True)
        self.n = n
        self.frame = 0

    def render(self, time, views):
        self.frame += 1
        if self.frame % self.n == 0:
            super().render(time, views)


sim = Simulation(presets.relativistic(), renderer=EveryNth(100))
sim.run(0.001, 1000)

p = sim.store.particles[0]
print("speed / c:", float((p.velocity @ p.velocity) ** 0.5) / sim.config.physics.c, "gamma:", p.gamma)
