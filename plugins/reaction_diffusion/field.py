"""
Concentration Field Storage

A Field holds two chemical concentrations (A, B) per cell in one flat
float32 buffer, interleaved per cell:

    index(x, y) = (x + y * width) * 2     -> a
    index(x, y) + 1                       -> b

`cells` is an (height, width, 2) view over the same memory, so numpy
slicing and flat indexing always agree.
"""

import numbers

import numpy as np

from .errors import InvalidDimensionError, OutOfBoundsError


def check_dimensions(width, height):
    """Raise InvalidDimensionError unless both sides are positive ints."""
    for side in (width, height):
        if isinstance(side, bool) or not isinstance(side, numbers.Integral) or side <= 0:
            raise InvalidDimensionError(width, height)


class Field:
    """One W x H grid of (a, b) concentration pairs."""

    def __init__(self, width, height):
        check_dimensions(width, height)
        self.width = int(width)
        self.height = int(height)

        # Flat contiguous storage (float32 for 2x bandwidth vs float64)
        self.data = np.empty(self.width * self.height * 2, dtype=np.float32)
        self.cells = self.data.reshape(self.height, self.width, 2)
        self.reset()

    @property
    def shape(self):
        return (self.height, self.width)

    @property
    def a(self):
        return self.cells[:, :, 0]

    @property
    def b(self):
        return self.cells[:, :, 1]

    def index(self, x, y):
        """Flat index of cell (x, y)'s `a` value; `b` sits at index + 1."""
        return (x + y * self.width) * 2

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def reset(self, a=1.0, b=0.0):
        """Fill every cell with (a, b)."""
        self.cells[:, :, 0] = a
        self.cells[:, :, 1] = b

    def seed(self, cx, cy, half_size):
        """Set b = 1 over the square [cx-h, cx+h) x [cy-h, cy+h).

        The square is clipped to the grid; `a` is left untouched.
        """
        x0 = max(int(cx) - int(half_size), 0)
        x1 = min(int(cx) + int(half_size), self.width)
        y0 = max(int(cy) - int(half_size), 0)
        y1 = min(int(cy) + int(half_size), self.height)
        if x0 >= x1 or y0 >= y1:
            return
        self.cells[y0:y1, x0:x1, 1] = 1.0

    def get(self, x, y):
        """Return (a, b) at (x, y)."""
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)
        i = self.index(x, y)
        return float(self.data[i]), float(self.data[i + 1])

    def copy_boundary_to(self, other):
        """Copy the outermost rows and columns into `other`."""
        src, dst = self.cells, other.cells
        dst[0, :] = src[0, :]
        dst[-1, :] = src[-1, :]
        dst[:, 0] = src[:, 0]
        dst[:, -1] = src[:, -1]

    def view(self):
        return FieldView(self)


class FieldView:
    """Read-only window onto a Field.

    The arrays alias the Field's storage, so a view reflects the buffer
    that was current when it was taken. Take a fresh view after stepping.
    """

    def __init__(self, field):
        cells = field.cells.view()
        cells.flags.writeable = False
        self._cells = cells
        self.width = field.width
        self.height = field.height

    @property
    def shape(self):
        return (self.height, self.width)

    @property
    def a(self):
        return self._cells[:, :, 0]

    @property
    def b(self):
        return self._cells[:, :, 1]

    def get(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(x, y, self.width, self.height)
        return float(self._cells[y, x, 0]), float(self._cells[y, x, 1])

    def value(self):
        """Display value per cell: (a - b) clamped to [0, 1]."""
        return np.clip(self.a - self.b, 0.0, 1.0)

    def copy(self):
        """Detached (H, W, 2) float32 copy of the concentrations."""
        return self._cells.copy()
