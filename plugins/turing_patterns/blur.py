"""
Periodic Box Blur

Averages a field over a (2r+1) x (2r+1) window with wrap-around edges,
using scipy's separable running-sum filter. The window may be wider than
the field, in which case it simply wraps more than once.

A uniform field blurs to the same value at every pixel whatever the
radius, so two blurs of a uniform image at different radii differ by one
constant and never by per-pixel round-off.

The average is multiplied by the scale's integer weight, which sets how
strongly that scale's activator/inhibitor difference counts when the
engine compares scales.
"""

import numpy as np
from scipy.ndimage import uniform_filter


def box_blur(field, radius, weight, out=None):
    """Weighted periodic box average of a 2D field.

    Args:
        field: 2D float array (height, width)
        radius: Half-width of the window, >= 1
        weight: Non-negative gain applied to the average
        out: Optional pre-allocated float64 array of the same shape

    Returns:
        The blurred field (``out`` when given)
    """
    if radius < 1:
        raise ValueError(f"Blur radius must be >= 1, got {radius}")
    if weight < 0:
        raise ValueError(f"Blur weight must be >= 0, got {weight}")

    if out is None:
        out = np.empty(field.shape, dtype=np.float64)
    uniform_filter(field, size=2 * radius + 1, output=out, mode="wrap")
    out *= weight
    return out
