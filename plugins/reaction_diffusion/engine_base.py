"""
Abstract Base Class for Simulation Engines

Engines implement this interface so the viewer and the headless snapshot
mode can drive any engine the same way: step it, read it, poke it.
"""

from abc import ABC, abstractmethod

from .field import check_dimensions


class SimulationEngine(ABC):
    """Base class for double-buffered grid engines."""

    engine_name = ""   # e.g. "gray_scott"
    engine_label = ""  # e.g. "Gray-Scott"

    def __init__(self, width, height):
        check_dimensions(width, height)
        self.width = int(width)
        self.height = int(height)
        self.generation = 0

    @property
    def size(self):
        return (self.width, self.height)

    @abstractmethod
    def step(self):
        """Advance one time step."""

    def step_n(self, n):
        """Advance n steps. Returns the final read-only field view."""
        for _ in range(n):
            self.step()
        return self.read_field()

    @abstractmethod
    def read_field(self):
        """Return a read-only view of the current state."""

    @abstractmethod
    def set_params(self, **params):
        """Update engine parameters."""

    @abstractmethod
    def get_params(self):
        """Return dict of current parameter values."""

    @abstractmethod
    def reset(self, params=None):
        """Reinitialize the grid with the seed pattern."""

    @abstractmethod
    def resize(self, width, height, params=None):
        """Replace storage at new dimensions and reseed."""

    @abstractmethod
    def inject(self, cx, cy, half_size=None):
        """Perturb the state locally around (cx, cy)."""

    @classmethod
    @abstractmethod
    def get_slider_defs(cls):
        """Return list of slider definitions for the control panel.

        Each entry is a dict:
            {"key": "feed", "label": "Feed Rate", "section": "REACTION",
             "min": 0.01, "max": 0.1, "fmt": ".3f", "step": 0.001}
        """
