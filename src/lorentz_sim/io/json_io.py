# MIT License (see LICENSE)
"""
JSON serialization of simulation configurations.

Every key is optional and falls back to the dataclass default, so a file
only needs the values it changes.

JSON Schema Overview:
---------------------
{
  "preset": string,                # Optional base preset, overridden below
  "physics": {
    "use_relativity": bool,        # Default: false
    "c": float,                    # Default: 20
    "rest_mass": float,            # Default: 1
    "friction": float,             # Default: 0
    "k_e": float,                  # Default: 0
    "base_charge": float,          # Default: 1
    "animation_speed": float,      # Default: 1.5
    "gravity": [x, y, z],
    "external_force": [x, y, z],
    "enable_gravity": bool,
    "enable_external_force": bool,
    "drag_model": "linear" | "quadratic",
    "relativistic_coulomb": bool,
    "relativistic_drag": bool,
    "max_dt": float,
    "softening": float,
    "c_squared_epsilon": float
  },
  "particles": {
    "count": int,
    "random_charge": bool,
    "init_velocity": [vx, vy, vz],
    "ring_radius": float,
    "seed": int | null,
    "color": string,
    "trail_enabled": bool,
    "trail_length": int,
    "log_trajectory": bool
  },
  "fields": {
    "Ex": string, "Ey": string, "Ez": string,
    "Bx": string, "By": string, "Bz": string
  }
}
"""
from __future__ import annotations
import json
from dataclasses import asdict, fields, replace
from typing import Any, get_type_hints

from ..config import FieldParams, ParticleParams, PhysicsParams, SimConfig
from ..errors import ConfigurationError


def load_config_raw(path: str) -> dict[str, Any]:
    """Load the raw JSON dictionary from a config file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_config(path: str) -> SimConfig:
    """
    Load and validate a configuration file.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ConfigurationError: Unknown keys, values of the wrong type or
            out-of-range values.
    """
    return config_from_json(load_config_raw(path))


def save_config(config: SimConfig, path: str) -> None:
    """Write a configuration as indented JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_to_json(config), f, indent=2)
        f.write("\n")


def config_to_json(config: SimConfig) -> dict[str, Any]:
    """Convert a configuration to plain JSON-compatible data."""
    data = asdict(config)
    for section in data.values():
        for key, value in section.items():
            if isinstance(value, tuple):
                section[key] = list(value)
    return data


def _coerce(where: str, hint, value):
    """Check one JSON value against a dataclass field type."""
    if hint is bool:
        ok = isinstance(value, bool)
    elif hint is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        if ok:
            value = float(value)
    elif hint is int or hint == (int | None):
        if value is None:
            ok = hint is not int
        else:
            ok = isinstance(value, int) and not isinstance(value, bool)
    elif hint is str:
        ok = isinstance(value, str)
    else:
        # 3-vectors; element checks happen in the dataclass
        ok = isinstance(value, (list, tuple))
    if not ok:
        raise ConfigurationError(f"{where} has the wrong type: {value!r}")
    return value


def _section(cls, base, data: dict[str, Any] | None, name: str):
    if not data:
        return base
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{name}' must be an object")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"unknown key(s) in '{name}': {', '.join(unknown)}")
    hints = get_type_hints(cls)
    values = {key: _coerce(f"{name}.{key}", hints[key], value) for key, value in data.items()}
    return replace(base, **values)


def config_from_json(data: dict[str, Any]) -> SimConfig:
    """
    Build a validated SimConfig from parsed JSON.

    A "preset" key selects the starting point; the sections then override it.
    """
    from ..presets import get_preset

    base = SimConfig()
    if "preset" in data:
        try:
            base = get_preset(data["preset"])
        except KeyError as exc:
            raise ConfigurationError(str(exc.args[0])) from exc

    config = SimConfig(
        physics=_section(PhysicsParams, base.physics, data.get("physics"), "physics"),
        particles=_section(ParticleParams, base.particles, data.get("particles"), "particles"),
        fields=_section(FieldParams, base.fields, data.get("fields"), "fields"),
    )
    return config.validate()
