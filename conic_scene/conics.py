"""Conic coefficient algebra, pole/polar duality and line-conic intersection."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .model import ELLIPSE, HYPERBOLA, PARABOLA, Conic, ConicCoeffs, ConicType

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
LineCoeffs = Tuple[float, float, float]

_DISCRIMINANT_EPS = 1e-9
_ROTATION_EPS = 1e-9
_VERTICAL_EPS = 1e-9


@dataclass(frozen=True)
class StandardParams:
    """Standard-form parameters recovered from general coefficients.

    Only ``conic_type`` is populated for parabolas; recovering the vertex and
    focal distance of a general parabola is not supported.
    """

    conic_type: ConicType
    cx: Optional[float] = None
    cy: Optional[float] = None
    a: Optional[float] = None
    b: Optional[float] = None
    rotation: Optional[float] = None

    def as_changes(self) -> dict:
        """Return the populated fields, ready for :func:`dataclasses.replace`."""

        changes = {"conic_type": self.conic_type}
        for attr in ("cx", "cy", "a", "b", "rotation"):
            value = getattr(self, attr)
            if value is not None:
                changes[attr] = value
        return changes


def _safe_div(num: float, den: float) -> float:
    # IEEE semantics: x/0 -> +-inf, 0/0 -> nan
    if den == 0.0:
        if num == 0.0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)
    return num / den


def standard_to_general(
    conic_type: ConicType, cx: float, cy: float, a: float, b: float, rotation: float
) -> ConicCoeffs:
    """Expand a rotated and translated standard conic into general coefficients.

    Ellipse and hyperbola use ``x^2/a^2 +- y^2/b^2 = 1``; the parabola uses
    ``y^2 = 4ax`` with its vertex at ``(cx, cy)``.  Zero semi-axes produce
    non-finite coefficients rather than an exception, and a non-finite
    rotation gives all-NaN coefficients.
    """

    if conic_type in (ELLIPSE, HYPERBOLA, PARABOLA) and not math.isfinite(rotation):
        return ConicCoeffs(*([math.nan] * 6))

    cos_t = math.cos(rotation)
    sin_t = math.sin(rotation)

    if conic_type in (ELLIPSE, HYPERBOLA):
        sign = 1.0 if conic_type == ELLIPSE else -1.0
        a0 = _safe_div(1.0, a * a)
        c0 = _safe_div(sign, b * b)
        A = a0 * cos_t * cos_t + c0 * sin_t * sin_t
        B = 2.0 * (a0 - c0) * cos_t * sin_t
        C = a0 * sin_t * sin_t + c0 * cos_t * cos_t
        D = -2.0 * A * cx - B * cy
        E = -B * cx - 2.0 * C * cy
        F = A * cx * cx + B * cx * cy + C * cy * cy - 1.0
        return ConicCoeffs(A, B, C, D, E, F)

    if conic_type == PARABOLA:
        A = sin_t * sin_t
        B = -2.0 * sin_t * cos_t
        C = cos_t * cos_t
        l1 = -4.0 * a * cos_t
        l2 = -4.0 * a * sin_t
        D = -2.0 * A * cx - B * cy + l1
        E = -B * cx - 2.0 * C * cy + l2
        F = A * cx * cx + B * cx * cy + C * cy * cy - l1 * cx - l2 * cy
        return ConicCoeffs(A, B, C, D, E, F)

    raise ValueError(f"unknown conic type {conic_type!r}")


def update_conic_coefficients(conic: Conic) -> Conic:
    """Return ``conic`` with ``coeffs`` recomputed from its standard parameters."""

    coeffs = standard_to_general(
        conic.conic_type, conic.cx, conic.cy, conic.a, conic.b, conic.rotation
    )
    return replace(conic, coeffs=coeffs)


def classify(coeffs: ConicCoeffs) -> ConicType:
    """Classify by the discriminant ``B^2 - 4AC``."""

    delta = coeffs.B * coeffs.B - 4.0 * coeffs.A * coeffs.C
    if abs(delta) < _DISCRIMINANT_EPS:
        return PARABOLA
    if delta > 0:
        return HYPERBOLA
    return ELLIPSE


def _finite_or(value: float, fallback: float) -> float:
    return value if math.isfinite(value) else fallback


def general_to_standard(coeffs: ConicCoeffs) -> StandardParams:
    """Recover standard parameters from general coefficients.

    The center solves ``[[2A, B], [B, 2C]] . (cx, cy) = (-D, -E)``.  Semi-axes
    that come out non-finite fall back to ``1``.
    """

    conic_type = classify(coeffs)
    if conic_type == PARABOLA:
        return StandardParams(conic_type=PARABOLA)

    A, B, C, D, E, F = coeffs.as_tuple()
    system = np.array([[2.0 * A, B], [B, 2.0 * C]], dtype=float)
    rhs = np.array([-D, -E], dtype=float)
    try:
        cx, cy = (float(v) for v in np.linalg.solve(system, rhs))
    except np.linalg.LinAlgError:
        logger.debug("general_to_standard: singular center system for %s", coeffs)
        return StandardParams(conic_type=conic_type)

    f_prime = F + (D * cx + E * cy) / 2.0

    theta = 0.0
    if abs(B) >= _ROTATION_EPS:
        theta = 0.5 * math.atan2(B, A - C)

    ct = math.cos(theta)
    st = math.sin(theta)
    a_prime = A * ct * ct + B * st * ct + C * st * st
    c_prime = A * st * st - B * st * ct + C * ct * ct

    semi_a = math.sqrt(abs(_safe_div(-f_prime, a_prime)))
    semi_b = math.sqrt(abs(_safe_div(-f_prime, c_prime)))

    return StandardParams(
        conic_type=conic_type,
        cx=cx,
        cy=cy,
        a=_finite_or(semi_a, 1.0),
        b=_finite_or(semi_b, 1.0),
        rotation=theta,
    )


def conic_matrix(coeffs: ConicCoeffs) -> np.ndarray:
    """Return the symmetric 3x3 matrix of the conic's quadratic form."""

    A, B, C, D, E, F = coeffs.as_tuple()
    return np.array(
        [
            [A, B / 2.0, D / 2.0],
            [B / 2.0, C, E / 2.0],
            [D / 2.0, E / 2.0, F],
        ],
        dtype=float,
    )


def polar_line(px: float, py: float, coeffs: ConicCoeffs) -> LineCoeffs:
    """Return the polar of the pole ``(px, py)`` as line coefficients ``(a, b, c)``."""

    line = conic_matrix(coeffs) @ np.array([px, py, 1.0], dtype=float)
    return (float(line[0]), float(line[1]), float(line[2]))


def _quadratic_roots(qa: float, qb: float, qc: float) -> Optional[Tuple[float, float]]:
    disc = qb * qb - 4.0 * qa * qc
    if not math.isfinite(disc) or disc < 0:
        return None
    if qa == 0.0:
        return None
    sqrt_disc = math.sqrt(disc)
    r1 = (-qb + sqrt_disc) / (2.0 * qa)
    r2 = (-qb - sqrt_disc) / (2.0 * qa)
    if not (math.isfinite(r1) and math.isfinite(r2)):
        return None
    return r1, r2


def intersect_line_conic(line: Sequence[float], coeffs: ConicCoeffs) -> List[Point]:
    """Intersect ``ax + by + c = 0`` with a conic.

    Returns ``[]`` when there is no real intersection, otherwise exactly two
    points ordered by the ``+sqrt`` then ``-sqrt`` root, even when they
    coincide at tangency.  Keeping the order fixed lets a solution index pick
    the same branch across repeated evaluations.  A line with a zero normal,
    or one that meets the conic in a single finite point (a line parallel to
    a parabola's axis, an asymptote direction of a hyperbola), yields ``[]``.
    """

    a, b, c = (float(v) for v in line)
    A, B, C, D, E, F = coeffs.as_tuple()

    if abs(b) < _VERTICAL_EPS:
        if a == 0.0:
            return []
        x = -c / a
        roots = _quadratic_roots(C, B * x + E, A * x * x + D * x + F)
        if roots is None:
            return []
        return [(x, roots[0]), (x, roots[1])]

    k = -a / b
    m = -c / b
    qa = A + B * k + C * k * k
    qb = B * m + 2.0 * C * k * m + D + E * k
    qc = C * m * m + E * m + F
    roots = _quadratic_roots(qa, qb, qc)
    if roots is None:
        return []
    x1, x2 = roots
    return [(x1, k * x1 + m), (x2, k * x2 + m)]


__all__ = [
    "StandardParams",
    "classify",
    "conic_matrix",
    "general_to_standard",
    "intersect_line_conic",
    "polar_line",
    "standard_to_general",
    "update_conic_coefficients",
]
