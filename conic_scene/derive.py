"""Closed-form line and point constructions.

Lines are handled in implicit form ``(a, b, c)`` for ``ax + by + c = 0``.
Every routine here is total: degenerate inputs return ``None`` (no
intersection) or an identity fallback, never raise.  Coincident points give
the zero line ``(0, 0, 0)``, which callers tolerate as a transient state, for
example while a point is being dragged onto another.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

Point = Tuple[float, float]
LineCoeffs = Tuple[float, float, float]

_PARALLEL_EPS = 1e-9


def _as_point(pt: Sequence[float]) -> Point:
    return (float(pt[0]), float(pt[1]))


def _as_line(line: Sequence[float]) -> LineCoeffs:
    return (float(line[0]), float(line[1]), float(line[2]))


def _cross(a: Sequence[float], b: Sequence[float]) -> float:
    return float(a[0]) * float(b[1]) - float(a[1]) * float(b[0])


def line_from_two_points(p1: Sequence[float], p2: Sequence[float]) -> LineCoeffs:
    """Return the line through ``p1`` and ``p2``."""

    x1, y1 = _as_point(p1)
    x2, y2 = _as_point(p2)
    a = y1 - y2
    b = x2 - x1
    c = -a * x1 - b * y1
    return (a, b, c)


def line_from_point_and_angle(point: Sequence[float], angle: float) -> LineCoeffs:
    """Return the line through ``point`` whose direction makes ``angle`` with +x.

    A non-finite angle gives NaN coefficients, which later steps treat as
    "no intersection".
    """

    px, py = _as_point(point)
    if not math.isfinite(angle):
        return (math.nan, math.nan, math.nan)
    a = -math.sin(angle)
    b = math.cos(angle)
    c = -a * px - b * py
    return (a, b, c)


def intersect_lines(line1: Sequence[float], line2: Sequence[float]) -> Optional[Point]:
    """Return the intersection of two implicit lines, ``None`` if parallel or coincident."""

    a1, b1, c1 = _as_line(line1)
    a2, b2, c2 = _as_line(line2)
    det = _cross((a1, b1), (a2, b2))
    if not math.isfinite(det) or abs(det) < _PARALLEL_EPS:
        return None
    x = (b1 * c2 - b2 * c1) / det
    y = (c1 * a2 - c2 * a1) / det
    return (x, y)


def closest_point_on_line(px: float, py: float, line: Sequence[float]) -> Point:
    """Return the foot of the perpendicular from ``(px, py)`` to ``line``.

    A line with a zero or non-finite normal has no foot; the input point is
    returned.
    """

    a, b, c = _as_line(line)
    denom = a * a + b * b
    if denom == 0.0 or not math.isfinite(denom):
        return (float(px), float(py))
    x = (b * (b * px - a * py) - a * c) / denom
    y = (a * (a * py - b * px) - b * c) / denom
    return (x, y)


def angle_towards(origin: Sequence[float], target: Sequence[float]) -> float:
    """Return the direction angle of the ray from ``origin`` to ``target``."""

    ox, oy = _as_point(origin)
    tx, ty = _as_point(target)
    return math.atan2(ty - oy, tx - ox)


def translate_line(line: Sequence[float], dx: float, dy: float) -> LineCoeffs:
    """Return ``line`` shifted by ``(dx, dy)``; the normal is unchanged."""

    a, b, c = _as_line(line)
    return (a, b, c - a * dx - b * dy)


__all__ = [
    "LineCoeffs",
    "Point",
    "angle_towards",
    "closest_point_on_line",
    "intersect_lines",
    "line_from_point_and_angle",
    "line_from_two_points",
    "translate_line",
]
