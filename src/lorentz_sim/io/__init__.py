# MIT License (see LICENSE)
"""
Input/Output utilities.

    - JSON configuration files: load, save, and dict conversion.

Typical usage:
    from lorentz_sim.io import load_config, save_config

    config = load_config("cyclotron.json")
    save_config(config, "copy.json")
"""
from .json_io import (
    load_config,
    load_config_raw,
    save_config,
    config_to_json,
    config_from_json,
)

__all__ = [
    "load_config",
    "load_config_raw",
    "save_config",
    "config_to_json",
    "config_from_json",
]
