# MIT License (see LICENSE)
"""
Named example configurations.

    cyclotron      - uniform Bz, particle gyrates in a circle.
    exb_drift      - crossed E and B, particle drifts at E×B / B².
    quadrupole     - 20 particles in a saddle-shaped E field with drag.
    relativistic   - negative charge at 0.9 c in Bz with a small Ez.
"""
from __future__ import annotations

from typing import Callable

from .config import FieldParams, ParticleParams, PhysicsParams, SimConfig


def cyclotron() -> SimConfig:
    return SimConfig(
        physics=PhysicsParams(base_charge=1.0, rest_mass=1.0),
        particles=ParticleParams(count=1, init_velocity=(2.0, 0.0, 0.0)),
        fields=FieldParams(Bz="1"),
    )


def exb_drift() -> SimConfig:
    return SimConfig(
        physics=PhysicsParams(base_charge=1.0, rest_mass=1.0),
        particles=ParticleParams(count=1, init_velocity=(0.0, 0.0, 0.0)),
        fields=FieldParams(Ey="0.5", Bz="1"),
    )


def quadrupole() -> SimConfig:
    return SimConfig(
        physics=PhysicsParams(base_charge=1.0, rest_mass=1.0, friction=0.1),
        particles=ParticleParams(count=20, init_velocity=(1.0, 1.0, 1.0)),
        fields=FieldParams(Ex="x", Ey="-y", Bz="0"),
    )


def relativistic() -> SimConfig:
    return SimConfig(
        physics=PhysicsParams(use_relativity=True, c=20.0, base_charge=-1.0, rest_mass=1.0),
        particles=ParticleParams(count=1, init_velocity=(18.0, 0.0, 0.0)),  # 0.9 c
        fields=FieldParams(Ez="0.5", Bz="5"),
    )


PRESETS: dict[str, Callable[[], SimConfig]] = {
    "cyclotron": cyclotron,
    "exb_drift": exb_drift,
    "quadrupole": quadrupole,
    "relativistic": relativistic,
}


def get_preset(name: str) -> SimConfig:
    """Look up a preset by name; raises KeyError listing the known names."""
    try:
        return PRESETS[name]()
    except KeyError:
        raise KeyError(f"unknown preset {name!r}; known: {', '.join(PRESETS)}") from None
