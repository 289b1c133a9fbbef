"""Bounded relaxation resolver.

The resolver recomputes derived attributes of every entity from the current
values of its dependencies.  Instead of ordering the graph topologically it
sweeps the whole collection a fixed number of times; each sweep reads a
lookup built from the previous sweep's output, so a chain of depth ``n``
settles after ``n`` sweeps.  The default of three covers every construction
the editor offers (point -> line -> intersection, point -> polar ->
tangency point -> tangent line).

Nothing here raises for geometric reasons.  Unresolvable dependencies leave
the entity untouched for the sweep, degenerate configurations mark the
entity hidden.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .config import ResolverConfig, get_resolver_config
from .conics import intersect_line_conic, polar_line, update_conic_coefficients
from .derive import (
    closest_point_on_line,
    intersect_lines,
    line_from_point_and_angle,
    line_from_two_points,
)
from .model import Conic, Entity, EntityId, Line, Point

logger = logging.getLogger(__name__)

Lookup = Mapping[EntityId, Entity]


@dataclass
class ResolveReport:
    """Outcome of :func:`resolve_with_report`."""

    entities: List[Entity]
    passes: int
    converged: bool
    unsettled: List[EntityId] = field(default_factory=list)
    hidden: List[EntityId] = field(default_factory=list)


def _pair(entity: Entity, lookup: Lookup) -> Optional[Tuple[Entity, Entity]]:
    if len(entity.dependencies) != 2:
        return None
    first = lookup.get(entity.dependencies[0])
    second = lookup.get(entity.dependencies[1])
    if first is None or second is None:
        return None
    return first, second


def _line_and_conic(entity: Entity, lookup: Lookup) -> Optional[Tuple[Line, Conic]]:
    pair = _pair(entity, lookup)
    if pair is None:
        return None
    first, second = pair
    if isinstance(first, Line) and isinstance(second, Conic):
        return first, second
    if isinstance(first, Conic) and isinstance(second, Line):
        return second, first
    return None


def _point_and_conic(entity: Entity, lookup: Lookup) -> Optional[Tuple[Point, Conic]]:
    pair = _pair(entity, lookup)
    if pair is None:
        return None
    first, second = pair
    if isinstance(first, Point) and isinstance(second, Conic):
        return first, second
    if isinstance(first, Conic) and isinstance(second, Point):
        return second, first
    return None


def _resolve_conic(conic: Conic, lookup: Lookup) -> Conic:
    return update_conic_coefficients(conic)


def _resolve_line(line: Line, lookup: Lookup) -> Line:
    if line.pivot_point_id is not None and line.angle is not None:
        pivot = lookup.get(line.pivot_point_id)
        if isinstance(pivot, Point):
            a, b, c = line_from_point_and_angle((pivot.x, pivot.y), line.angle)
            return replace(line, a=a, b=b, c=c)

    if line.p1_id is not None and line.p2_id is not None:
        p1 = lookup.get(line.p1_id)
        p2 = lookup.get(line.p2_id)
        if isinstance(p1, Point) and isinstance(p2, Point):
            a, b, c = line_from_two_points((p1.x, p1.y), (p2.x, p2.y))
            return replace(line, a=a, b=b, c=c)

    pole = _point_and_conic(line, lookup)
    if pole is not None:
        point, conic = pole
        coeffs = update_conic_coefficients(conic).coeffs
        a, b, c = polar_line(point.x, point.y, coeffs)
        return replace(line, a=a, b=b, c=c)

    if line.mode != "free":
        logger.debug("line %s (%s) has unresolved dependencies", line.id, line.mode)
    return line


def _resolve_point(point: Point, lookup: Lookup) -> Point:
    if not point.is_free and point.solution_index is not None:
        operands = _line_and_conic(point, lookup)
        if operands is not None:
            line, conic = operands
            coeffs = update_conic_coefficients(conic).coeffs
            solutions = intersect_line_conic(line.coeffs, coeffs)
            index = point.solution_index
            if 0 <= index < len(solutions):
                x, y = solutions[index]
                return replace(point, x=x, y=y, hidden=False)
            return replace(point, hidden=True)

    if point.on_line_id is not None:
        line = lookup.get(point.on_line_id)
        if isinstance(line, Line):
            x, y = closest_point_on_line(point.x, point.y, line.coeffs)
            return replace(point, x=x, y=y)

    if not point.is_free and point.solution_index is None:
        pair = _pair(point, lookup)
        if pair is not None and isinstance(pair[0], Line) and isinstance(pair[1], Line):
            crossing = intersect_lines(pair[0].coeffs, pair[1].coeffs)
            if crossing is None:
                return replace(point, hidden=True)
            return replace(point, x=crossing[0], y=crossing[1], hidden=False)

    if not point.is_free and (point.dependencies or point.on_line_id is not None):
        logger.debug("point %s has unresolved dependencies", point.id)
    return point


def resolve_entity(entity: Entity, lookup: Lookup) -> Entity:
    """Recompute the derived attributes of one entity against ``lookup``."""

    if isinstance(entity, Conic):
        return _resolve_conic(entity, lookup)
    if isinstance(entity, Line):
        return _resolve_line(entity, lookup)
    if isinstance(entity, Point):
        return _resolve_point(entity, lookup)
    raise TypeError(f"not a scene entity: {entity!r}")


def relaxation_pass(entities: Sequence[Entity]) -> List[Entity]:
    """Run one sweep; every entity reads its dependencies from ``entities``."""

    lookup: Dict[EntityId, Entity] = {entity.id: entity for entity in entities}
    return [resolve_entity(entity, lookup) for entity in entities]


def _close(lhs: float, rhs: float, tol: float) -> bool:
    if math.isnan(lhs) or math.isnan(rhs):
        return math.isnan(lhs) and math.isnan(rhs)
    if math.isinf(lhs) or math.isinf(rhs):
        return lhs == rhs
    return abs(lhs - rhs) <= tol


def _numeric_state(entity: Entity) -> Tuple[float, ...]:
    if isinstance(entity, Point):
        return (entity.x, entity.y)
    if isinstance(entity, Line):
        return entity.coeffs
    if isinstance(entity, Conic):
        return entity.coeffs.as_tuple()
    raise TypeError(f"not a scene entity: {entity!r}")


def _settled(before: Entity, after: Entity, tol: float) -> bool:
    if before.hidden != after.hidden:
        return False
    return all(
        _close(lhs, rhs, tol) for lhs, rhs in zip(_numeric_state(before), _numeric_state(after))
    )


def resolve_with_report(
    entities: Sequence[Entity],
    passes: Optional[int] = None,
    *,
    config: Optional[ResolverConfig] = None,
) -> ResolveReport:
    """Relax ``entities`` and report whether the result is a fixed point.

    ``unsettled`` lists the entities that one more sweep would still change.
    """

    cfg = config or get_resolver_config()
    n_passes = cfg.passes if passes is None else passes
    if n_passes < 1:
        raise ValueError(f"passes must be >= 1, got {n_passes}")

    current: List[Entity] = list(entities)
    for _ in range(n_passes):
        current = relaxation_pass(current)

    # one extra sweep only to check for a fixed point; its output is discarded
    check = relaxation_pass(current)
    unsettled = [
        before.id
        for before, after in zip(current, check)
        if not _settled(before, after, cfg.convergence_tol)
    ]
    converged = not unsettled
    if not converged and cfg.warn_on_non_convergence:
        logger.warning(
            "Resolver did not converge after %d pass(es); still changing: %s",
            n_passes,
            ", ".join(unsettled),
        )
    hidden = [entity.id for entity in current if entity.hidden]
    logger.debug(
        "Resolved %d entities in %d pass(es) (converged=%s, hidden=%d)",
        len(current),
        n_passes,
        converged,
        len(hidden),
    )
    return ResolveReport(
        entities=current,
        passes=n_passes,
        converged=converged,
        unsettled=unsettled,
        hidden=hidden,
    )


def resolve(entities: Sequence[Entity], passes: Optional[int] = None) -> List[Entity]:
    """Return a new collection with every derived attribute recomputed."""

    return resolve_with_report(entities, passes).entities


__all__ = [
    "ResolveReport",
    "relaxation_pass",
    "resolve",
    "resolve_entity",
    "resolve_with_report",
]
