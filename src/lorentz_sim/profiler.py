# MIT License (see LICENSE)
"""
Simple profiling utilities for per-frame cost.

The simulation loop times its phases ("snapshot", "integrate", "commit")
when a Profiler is attached; detached, it costs nothing.

Example:
    profiler = Profiler()
    sim = Simulation(config, profiler=profiler)
    for _ in range(100):
        sim.step(0.01)
    profiler.log_summary()
"""
from __future__ import annotations
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass
class ProfileStats:
    """
    Accumulates timing samples (seconds) per named phase.
    """
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Returns:
            Dict mapping phase name to {'n', 'mean_ms', 'max_ms', 'total_ms'}.
        """
        out = {}
        for name, times in self.samples.items():
            n = len(times)
            out[name] = {
                "n": n,
                "mean_ms": 1e3 * (sum(times) / n),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * sum(times),
            }
        return out


class Profiler:
    """Context-manager based timer for simulation phases."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time the enclosed block under ``name``; recorded even if it raises."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)

    def reset(self) -> None:
        self.stats = ProfileStats()

    def log_summary(self, level: int = logging.INFO) -> None:
        for name, s in self.stats.summary().items():
            logger.log(level, f"{name}: n={s['n']} mean={s['mean_ms']:.3f}ms max={s['max_ms']:.3f}ms")
