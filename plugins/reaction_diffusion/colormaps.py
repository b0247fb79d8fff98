"""
Field-to-Color Mapping

The display value of a cell is (a - b) clamped to [0, 1]. It linearly
interpolates between a background color (value 0, where B dominates) and
a foreground color (value 1, where A dominates).
"""

import numpy as np

MATCHA_GREEN = (120, 160, 90)
WHITE = (255, 255, 255)


def palette_colors(inverted=False):
    """Return (background, foreground) for the current inversion state."""
    if inverted:
        return WHITE, MATCHA_GREEN
    return MATCHA_GREEN, WHITE


def field_to_rgb(view, background=MATCHA_GREEN, foreground=WHITE, out=None):
    """
    Render a FieldView to an (H, W, 3) uint8 image.

    Args:
        view: FieldView (anything with a `value()` returning an (H, W) array)
        background: RGB for value 0
        foreground: RGB for value 1
        out: optional preallocated (H, W, 3) uint8 array
    """
    value = view.value().astype(np.float32)
    bg = np.asarray(background, dtype=np.float32)
    fg = np.asarray(foreground, dtype=np.float32)

    rgb = bg + (fg - bg) * value[:, :, np.newaxis]
    if out is None:
        out = np.empty(rgb.shape, dtype=np.uint8)
    np.rint(rgb, out=rgb)
    np.clip(rgb, 0, 255, out=rgb)
    out[:] = rgb.astype(np.uint8)
    return out
