# MIT License (see LICENSE)
"""
Numerical constants used throughout the simulation.

Units are simulation units (the defaults are chosen so that a unit charge
of unit mass in a unit magnetic field gyrates at one radian per second),
not SI.
"""
from __future__ import annotations

# Minimum separation floor for the Coulomb interaction. The pairwise
# denominator is max(|r|³, SOFTENING³), so the force stays finite at r → 0.
SOFTENING: float = 1e-6

# Largest timestep a single frame may integrate, in seconds. Frame hitches
# (a backgrounded window, a debugger pause) are clamped to this value.
MAX_DT: float = 1 / 30

# Guard subtracted from c² before computing the Lorentz factor, so that
# floating-point overshoot at v → c never yields a zero or negative radicand.
C_SQUARED_EPSILON: float = 1e-9

# Default speed of light for the relativistic branch.
DEFAULT_C: float = 20.0

# Radius of the ring on which particles are seeded.
DEFAULT_RING_RADIUS: float = 2.5

DEFAULT_PARTICLE_COLOR: str = "#00ffff"

FIELD_COMPONENTS: tuple[str, ...] = ("Ex", "Ey", "Ez", "Bx", "By", "Bz")
