# geometry.py
"""
Pure geometric helpers shared by the placement and boundary code.

Everything here is side-effect free. Angle helpers accept either Python
floats or NumPy arrays so the boundary resolver can test every token in a
single vectorized call.
"""
import math
import numpy as np
from typing import Tuple

TAU = 2.0 * math.pi

# --- Data Contracts ---
#
# sample_disk(rng, center, radius, inset) -> Tuple[float, float]:
#   - Inputs:
#     - rng: numpy.random.Generator used for all sampling.
#     - center: (x, y) of the disk.
#     - radius: outer radius of the arena.
#     - inset: distance kept clear of the wall (token radius + margin).
#   - Outputs: a point uniformly distributed by area inside the disk of
#     radius (radius - inset).
#
# angle_in_gap(angle, gap_center, gap_width) -> bool | np.ndarray:
#   - Outputs: True where `angle` lies strictly inside the open interval
#     (gap_center - gap_width/2, gap_center + gap_width/2), modulo 2*pi.
#   - Invariants: Correct for gaps that straddle the 0/2*pi seam.


def sample_disk(
    rng: np.random.Generator,
    center: Tuple[float, float],
    radius: float,
    inset: float
) -> Tuple[float, float]:
    """
    Samples a point uniformly inside a disk using the polar method.

    Taking the square root of the uniform radius sample keeps the density
    constant per unit area instead of clustering points at the center.
    """
    max_radius = max(radius - inset, 0.0)
    angle = rng.uniform(0.0, TAU)
    r = math.sqrt(rng.uniform(0.0, 1.0)) * max_radius
    return (center[0] + math.cos(angle) * r, center[1] + math.sin(angle) * r)


def normalize_angle(angle):
    """Wraps an angle (or array of angles) into [0, 2*pi)."""
    return np.mod(angle, TAU)


def angle_of(dx, dy):
    """Angle of the vector (dx, dy) measured from +x, in [0, 2*pi)."""
    return normalize_angle(np.arctan2(dy, dx))


def angle_in_gap(angle, gap_center: float, gap_width: float):
    """
    Tests gap membership with modular arithmetic.

    The angle is measured as an offset from the gap's start edge, so the
    test needs no special casing when the gap crosses angle zero.
    """
    start = gap_center - gap_width / 2.0
    offset = normalize_angle(np.asarray(angle) - start)
    inside = (offset > 0.0) & (offset < gap_width)
    if np.ndim(inside) == 0:
        return bool(inside)
    return inside
