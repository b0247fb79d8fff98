"""
Exceptions raised by the reaction-diffusion engine.
"""


class ReactionDiffusionError(Exception):
    """Base class for engine errors."""


class InvalidDimensionError(ReactionDiffusionError, ValueError):
    """Grid width or height is not a positive integer."""

    def __init__(self, width, height):
        super().__init__(f"Grid dimensions must be positive integers, got {width}x{height}")
        self.width = width
        self.height = height


class OutOfBoundsError(ReactionDiffusionError, IndexError):
    """Cell coordinates fall outside the grid."""

    def __init__(self, x, y, width, height):
        super().__init__(f"Cell ({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y
