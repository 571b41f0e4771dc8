"""
Microbenchmark: time per step vs number of particles (Coulomb on).
Run:
  python benchmarks/bench_steps.py
"""
import time

from lorentz_sim import Simulation, SimConfig
from lorentz_sim.config import FieldParams, ParticleParams, PhysicsParams
from lorentz_sim.profiler import Profiler
from lorentz_sim.renderer import NullRenderer


def run(n: int, steps: int = 200, relativistic: bool = False):
    prof = Profiler()
    config = SimConfig(
        physics=PhysicsParams(k_e=1.0, friction=0.1, use_relativity=relativistic,
                              relativistic_coulomb=relativistic),
        particles=ParticleParams(count=n, random_charge=True, seed=12345,
                                 trail_enabled=False),
        fields=FieldParams(Ex="0.1*sin(t)", Bz="1 + 0.1*z"),
    )
    sim = Simulation(config, renderer=NullRenderer(), profiler=prof)

    # warmup
    sim.run(1 / 120, 10)
    prof.reset()

    t0 = time.perf_counter()
    sim.run(1 / 120, steps)
    t1 = time.perf_counter()

    per_step = (t1 - t0) / steps
    return per_step, prof.stats.summary()


if __name__ == "__main__":
    for relativistic in (False, True):
        print("relativistic" if relativistic else "classical")
        for n in [1, 10, 25, 50, 100]:
            per_step, summary = run(n, relativistic=relativistic)
            print(f"N={n:4d}  step={1e3*per_step:8.3f} ms  steps/s={1/per_step:8.1f}")
            for k in ["snapshot", "integrate", "commit"]:
                if k in summary:
                    print(" ", k, summary[k])
        print()
