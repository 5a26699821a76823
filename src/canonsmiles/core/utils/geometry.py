# src/canonsmiles/core/utils/geometry.py

"""
Planar geometry helpers for reading wedge drawings.

All angles are in radians and measured on the 2D drawing coordinates.
"""

import math
from typing import Sequence
import numpy as np

Point = Sequence[float]


def give_angle_both_methods(
    origin: Point, first: Point, second: Point, full_circle: bool
) -> float:
    """
    Angle at ``origin`` turning counter-clockwise from ``first`` to ``second``.

    Args:
        origin: Vertex of the angle
        first: Point the angle is measured from
        second: Point the angle is measured to
        full_circle: If True map the result into [0, 2*pi), otherwise
            return a signed angle in (-pi, pi]

    Returns:
        The angle in radians
    """
    o = np.asarray(origin, dtype=float)
    a = np.asarray(first, dtype=float) - o
    b = np.asarray(second, dtype=float) - o
    angle = float(np.arctan2(b[1], b[0]) - np.arctan2(a[1], a[0]))
    if full_circle:
        return angle % (2 * math.pi)
    if angle > math.pi:
        angle -= 2 * math.pi
    elif angle <= -math.pi:
        angle += 2 * math.pi
    return angle


def give_angle(origin: Point, first: Point, second: Point) -> float:
    """Counter-clockwise angle in [0, 2*pi)."""
    return give_angle_both_methods(origin, first, second, True)


def give_angle_from_middle(origin: Point, first: Point, second: Point) -> float:
    """Signed angle, negative when ``second`` lies clockwise of ``first``."""
    return give_angle_both_methods(origin, first, second, False)


def is_left(where: Point, view_from: Point, view_to: Point) -> bool:
    """True if ``where`` lies left of the line looking from ``view_from`` to ``view_to``."""
    return give_angle_both_methods(view_from, view_to, where, False) >= 0


def side_of_line(point: Point, line_start: Point, line_end: Point) -> float:
    """Cross product sign: positive left of the directed line, negative right."""
    s = np.asarray(line_start, dtype=float)
    d = np.asarray(line_end, dtype=float) - s
    p = np.asarray(point, dtype=float) - s
    return float(d[0] * p[1] - d[1] * p[0])
