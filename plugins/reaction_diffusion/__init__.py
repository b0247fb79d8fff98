"""
Gray-Scott reaction-diffusion simulation with an interactive pygame viewer.
"""

from .errors import InvalidDimensionError, OutOfBoundsError, ReactionDiffusionError
from .field import Field, FieldView
from .gray_scott import LAPLACIAN_STENCIL, GrayScott
from .params import DEFAULT_PARAMS, Params

__all__ = [
    "DEFAULT_PARAMS",
    "Field",
    "FieldView",
    "GrayScott",
    "InvalidDimensionError",
    "LAPLACIAN_STENCIL",
    "OutOfBoundsError",
    "Params",
    "ReactionDiffusionError",
]
