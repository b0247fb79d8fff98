"""
Gray-Scott Reaction-Diffusion Engine

Two chemical species (A, B) react and diffuse on a 2D grid:
  A + 2B -> 3B  (autocatalytic reaction)
  A is continuously fed in, B is continuously removed.

Update per interior cell, with lap() the 9-point stencil below:
  a' = a + (dA * lap(A) - a*b*b + feed * (1 - a)) * dt
  b' = b + (dB * lap(B) + a*b*b - (kill + feed) * b) * dt
both clamped to [0, 1].

Edge cells are frozen: the step copies them forward unchanged, so they only
ever hold what reset or injection wrote. Two preallocated Fields are used
as front/back buffers; a step reads the front, writes the back, then flips
the index. Nothing is allocated per step.

References:
  Pearson, "Complex Patterns in a Simple System" (1993)
  Karl Sims, "Reaction-Diffusion Tutorial" (karlsims.com/rd.html)
"""

import logging
import threading

import numpy as np

from .engine_base import SimulationEngine
from .field import Field, check_dimensions
from .params import DEFAULT_PARAMS, Params

logger = logging.getLogger(__name__)


CARDINAL_WEIGHT = 0.2
DIAGONAL_WEIGHT = 0.05
CENTER_WEIGHT = -1.0

# Rows are y-1, y, y+1; columns are x-1, x, x+1. Sums to exactly 0.
LAPLACIAN_STENCIL = np.array([
    [DIAGONAL_WEIGHT, CARDINAL_WEIGHT, DIAGONAL_WEIGHT],
    [CARDINAL_WEIGHT, CENTER_WEIGHT, CARDINAL_WEIGHT],
    [DIAGONAL_WEIGHT, CARDINAL_WEIGHT, DIAGONAL_WEIGHT],
], dtype=np.float64)

_CARDINAL = np.float32(CARDINAL_WEIGHT)
_DIAGONAL = np.float32(DIAGONAL_WEIGHT)
_CENTER = np.float32(CENTER_WEIGHT)


class GrayScott(SimulationEngine):

    engine_name = "gray_scott"
    engine_label = "Gray-Scott"

    def __init__(self, width=500, height=500, params=None):
        super().__init__(width, height)
        self._lock = threading.Lock()
        self._params = self._merge_params(DEFAULT_PARAMS, params)
        self._allocate(self.width, self.height)
        self._reseed()
        logger.debug("Initialized %dx%d grid with %s", self.width, self.height, self._params)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    @staticmethod
    def _merge_params(base, params):
        if params is None:
            return base
        if isinstance(params, Params):
            return params
        return base.updated(**dict(params))

    def _allocate(self, width, height):
        """Build the buffer pair and the stencil work arrays."""
        self._buffers = (Field(width, height), Field(width, height))
        self._front = 0

        interior = (max(height - 2, 0), max(width - 2, 0))
        self._lap = np.empty(interior + (2,), dtype=np.float32)
        self._diag = np.empty(interior + (2,), dtype=np.float32)
        self._abb = np.empty(interior, dtype=np.float32)
        self._tmp = np.empty(interior, dtype=np.float32)

    @property
    def current(self):
        return self._buffers[self._front]

    @property
    def scratch(self):
        return self._buffers[1 - self._front]

    @property
    def params(self):
        return self._params

    def _reseed(self):
        for buf in self._buffers:
            buf.reset()
        self.current.seed(self.width // 2, self.height // 2,
                          self._params.pattern_half_size)
        self.generation = 0

    # ------------------------------------------------------------------
    # Step operator
    # ------------------------------------------------------------------

    def _laplacian(self, cells, out):
        """9-point laplacian of both species into `out` (interior only).

        Cardinal neighbours (0.2) and diagonals (0.05) are summed separately
        before weighting, so a uniform neighbourhood gives exactly 0.
        """
        np.add(cells[:-2, 1:-1], cells[2:, 1:-1], out=out)
        out += cells[1:-1, :-2]
        out += cells[1:-1, 2:]
        out *= _CARDINAL

        d = self._diag
        np.add(cells[:-2, :-2], cells[:-2, 2:], out=d)
        d += cells[2:, :-2]
        d += cells[2:, 2:]
        d *= _DIAGONAL
        out += d

        np.multiply(cells[1:-1, 1:-1], _CENTER, out=d)
        out += d

    def _step_locked(self):
        cur, nxt = self.current, self.scratch
        cur.copy_boundary_to(nxt)

        if self._abb.size:
            p = self._params
            dA = np.float32(p.dA)
            dB = np.float32(p.dB)
            feed = np.float32(p.feed)
            fk = np.float32(p.kill + p.feed)
            dt = np.float32(p.dt)

            cells = cur.cells
            a = cells[1:-1, 1:-1, 0]
            b = cells[1:-1, 1:-1, 1]
            lap, abb, tmp = self._lap, self._abb, self._tmp

            self._laplacian(cells, lap)

            # abb = a * b * b
            np.multiply(b, b, out=abb)
            abb *= a

            # a' = a + (dA*lapA - abb + feed*(1-a)) * dt
            next_a = nxt.cells[1:-1, 1:-1, 0]
            np.multiply(lap[:, :, 0], dA, out=next_a)
            next_a -= abb
            np.subtract(1.0, a, out=tmp)
            tmp *= feed
            next_a += tmp
            next_a *= dt
            next_a += a
            np.clip(next_a, 0.0, 1.0, out=next_a)

            # b' = b + (dB*lapB + abb - (kill+feed)*b) * dt
            next_b = nxt.cells[1:-1, 1:-1, 1]
            np.multiply(lap[:, :, 1], dB, out=next_b)
            next_b += abb
            np.multiply(b, fk, out=tmp)
            next_b -= tmp
            next_b *= dt
            next_b += b
            np.clip(next_b, 0.0, 1.0, out=next_b)

        self._front ^= 1
        self.generation += 1

    def step(self):
        """Advance one time step. Returns a view of the new state."""
        with self._lock:
            self._step_locked()
        return self.read_field()

    def advance_frame(self):
        """Run one display frame's worth of steps (updates_per_step)."""
        return self.step_n(max(1, self._params.updates_per_step))

    # ------------------------------------------------------------------
    # Host-facing operations
    # ------------------------------------------------------------------

    def read_field(self):
        with self._lock:
            return self.current.view()

    def inject(self, cx, cy, half_size=None):
        """Force b = 1 over a square around (cx, cy), clipped to the grid."""
        if half_size is None:
            half_size = self._params.injection_half_size
        with self._lock:
            self.current.seed(cx, cy, half_size)
        logger.debug("Injected B at (%d, %d) half-size %d", cx, cy, half_size)

    def reset(self, params=None):
        """Clear to (a=1, b=0) and reseed the centered square."""
        with self._lock:
            self._params = self._merge_params(self._params, params)
            self._reseed()
        logger.debug("Reset %dx%d grid, pattern half-size %d",
                     self.width, self.height, self._params.pattern_half_size)

    def resize(self, width, height, params=None):
        """Discard both buffers and build a reseeded pair at the new size."""
        check_dimensions(width, height)
        with self._lock:
            self._params = self._merge_params(self._params, params)
            self.width = int(width)
            self.height = int(height)
            self._allocate(self.width, self.height)
            self._reseed()
        logger.debug("Resized grid to %dx%d", self.width, self.height)

    def set_params(self, **params):
        with self._lock:
            self._params = self._params.updated(**params)

    def get_params(self):
        with self._lock:
            return self._params.as_dict()

    @property
    def stats(self):
        with self._lock:
            b = self.current.b
            return {
                "generation": self.generation,
                "mass": float(b.sum()),
                "mean": float(b.mean()),
                "max": float(b.max()),
                "alive_pct": float((b > 0.01).sum()) / b.size * 100,
            }

    @classmethod
    def get_slider_defs(cls):
        return [
            {"key": "feed", "label": "Feed Rate", "section": "REACTION",
             "min": 0.01, "max": 0.1, "fmt": ".3f", "step": 0.001},
            {"key": "kill", "label": "Kill Rate", "section": "REACTION",
             "min": 0.045, "max": 0.07, "fmt": ".3f", "step": 0.001},
            {"key": "dA", "label": "Diffusion A", "section": "DIFFUSION",
             "min": 0.5, "max": 1.5, "fmt": ".1f", "step": 0.1},
            {"key": "dB", "label": "Diffusion B", "section": "DIFFUSION",
             "min": 0.1, "max": 0.8, "fmt": ".1f", "step": 0.1},
            {"key": "dt", "label": "Time Step", "section": "DIFFUSION",
             "min": 0.5, "max": 1.5, "fmt": ".1f", "step": 0.1},
            {"key": "updates_per_step", "label": "Updates/Frame", "section": "TIMING",
             "min": 1, "max": 20, "fmt": ".0f", "step": 1},
            {"key": "pattern_half_size", "label": "Pattern Size", "section": "SEEDING",
             "min": 5, "max": 30, "fmt": ".0f", "step": 1},
            {"key": "injection_half_size", "label": "Blob Size", "section": "SEEDING",
             "min": 3, "max": 15, "fmt": ".0f", "step": 1},
        ]


# ----------------------------------------------------------------------
# Functional interface for hosts that keep an engine handle
# ----------------------------------------------------------------------

def initialize(width, height, params=None):
    return GrayScott(width, height, params)


def advance(engine):
    return engine.step()


def read_field(engine):
    return engine.read_field()


def inject(engine, cx, cy, half_size=None):
    engine.inject(cx, cy, half_size)


def reset(engine, params=None):
    engine.reset(params)


def resize(engine, width, height, params=None):
    engine.resize(width, height, params)
