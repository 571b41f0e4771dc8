# MIT License (see LICENSE)
"""
Renderer adapters for particle visualization.

This module provides an abstract base class for rendering and a few
concrete implementations. The physics core has no rendering dependency: a
renderer only ever receives ParticleView copies once per committed frame
and can never mutate physics state.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, TextIO
import sys

from ..types import ParticleView


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Subclasses integrate with a graphics backend (matplotlib, vpython, a web
    front end, ...) by implementing the three drawing methods.

    Usage:
        renderer.begin_frame(sim.total_time)
        for view in sim.store.views():
            renderer.draw_particle(view)
        renderer.end_frame()

    Or use the convenience method:
        renderer.render(sim.total_time, sim.store.views())
    """

    @abstractmethod
    def begin_frame(self, time: float) -> None:
        """
        Begin a new frame.

        Args:
            time: Simulation time of the committed state.
        """
        ...

    @abstractmethod
    def draw_particle(self, view: ParticleView) -> None:
        """Draw one particle."""
        ...

    @abstractmethod
    def end_frame(self) -> None:
        """Finalize the current frame."""
        ...

    def render(self, time: float, views: Iterable[ParticleView]) -> None:
        """Draw a full frame."""
        self.begin_frame(time)
        for view in views:
            self.draw_particle(view)
        self.end_frame()


class DebugRenderer(RendererAdapter):
    """
    Text renderer for development and testing.

    Output:
        === Frame t=0.0100 ===
        [0] q=+1.00 @ (2.50, 0.02, 0.00) v=(2.00, -0.02, 0.00) γ=1.000
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True):
        """
        Args:
            output: Output stream (defaults to sys.stdout).
            verbose: Include velocity and Lorentz factor.
        """
        self.output = output or sys.stdout
        self.verbose = verbose
        self._index = 0

    def begin_frame(self, time: float) -> None:
        self._index = 0
        self.output.write(f"=== Frame t={time:.4f} ===\n")

    def draw_particle(self, view: ParticleView) -> None:
        x, y, z = view.position
        line = f"[{self._index}] q={view.charge:+.2f} @ ({x:.2f}, {y:.2f}, {z:.2f})"
        if self.verbose:
            vx, vy, vz = view.velocity
            line += f" v=({vx:.2f}, {vy:.2f}, {vz:.2f}) γ={view.gamma:.3f}"
        self.output.write(line + "\n")
        self._index += 1

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer, for benchmarks and headless runs."""

    def begin_frame(self, time: float) -> None:
        pass

    def draw_particle(self, view: ParticleView) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Records every frame for later playback or export.

    Example:
        renderer = BufferedRenderer()
        sim = Simulation(config, renderer=renderer)
        sim.run(0.01, 100)
        for frame in renderer.frames:
            print(frame["time"], frame["particles"][0]["position"])
    """

    def __init__(self):
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, time: float) -> None:
        self._current_frame = {"time": time, "particles": []}

    def draw_particle(self, view: ParticleView) -> None:
        if self._current_frame is None:
            return
        self._current_frame["particles"].append({
            "position": view.position.tolist(),
            "velocity": view.velocity.tolist(),
            "charge": view.charge,
            "gamma": view.gamma,
            "color": view.color,
        })

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
