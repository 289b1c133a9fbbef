"""Builders for the constructions offered by the editor.

Each builder returns fresh entities wired to their inputs; derived attributes
are left at placeholder values and filled in when the entities are inserted
through :func:`add_construction` (or :func:`conic_scene.scene.create`).
Names follow the editor's conventions (``P3``, ``L(A,B)``, ``Polar(P)``...).
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence

from .config import ResolverConfig
from .model import ELLIPSE, Conic, ConicType, Entity, EntityId, Line, Point
from .scene import create

POINT_COLOR = "#ffffff"
LINE_COLOR = "#3b82f6"
CONIC_COLOR = "#f59e0b"
POLAR_COLOR = "#ef4444"
AUXILIARY_COLOR = "#666"
TANGENCY_COLOR = "#d1d5db"
TANGENT_COLOR = "#a78bfa"


def new_id() -> EntityId:
    return str(uuid.uuid4())


def _next_name(entities: Sequence[Entity], kind: str, prefix: str) -> str:
    count = sum(1 for entity in entities if entity.kind == kind)
    return f"{prefix}{count + 1}"


def free_point(
    entities: Sequence[Entity], x: float, y: float, *, name: Optional[str] = None
) -> Point:
    return Point(
        id=new_id(),
        x=x,
        y=y,
        is_free=True,
        name=name or _next_name(entities, "point", "P"),
        color=POINT_COLOR,
    )


def point_on_line(
    entities: Sequence[Entity], line: Line, x: float, y: float, *, name: Optional[str] = None
) -> Point:
    """Point glued to ``line``; ``(x, y)`` is projected onto it on insertion."""

    return Point(
        id=new_id(),
        x=x,
        y=y,
        is_free=False,
        on_line_id=line.id,
        name=name or _next_name(entities, "point", "P"),
        color=POINT_COLOR,
    )


def conic(
    entities: Sequence[Entity],
    cx: float,
    cy: float,
    *,
    conic_type: ConicType = ELLIPSE,
    a: float = 2.0,
    b: float = 1.0,
    rotation: float = 0.0,
    name: Optional[str] = None,
) -> Conic:
    return Conic(
        id=new_id(),
        conic_type=conic_type,
        cx=cx,
        cy=cy,
        a=a,
        b=b,
        rotation=rotation,
        name=name or _next_name(entities, "conic", "C"),
        color=CONIC_COLOR,
    )


def free_line(
    entities: Sequence[Entity], x: float, y: float, *, name: Optional[str] = None
) -> Line:
    """Free-standing line of slope 1 through ``(x, y)``."""

    return Line(
        id=new_id(),
        a=1.0,
        b=-1.0,
        c=y - x,
        is_free=True,
        name=name or _next_name(entities, "line", "L"),
        color=LINE_COLOR,
    )


def pivot_line(pivot: Point, angle: float = 0.0, *, name: Optional[str] = None) -> Line:
    return Line(
        id=new_id(),
        is_free=True,
        pivot_point_id=pivot.id,
        angle=angle,
        name=name or f"L({pivot.name})",
        color=LINE_COLOR,
    )


def line_through(p1: Point, p2: Point, *, name: Optional[str] = None) -> Line:
    if p1.id == p2.id:
        raise ValueError("a line through two points needs two distinct points")
    return Line(
        id=new_id(),
        is_free=False,
        p1_id=p1.id,
        p2_id=p2.id,
        name=name or f"L({p1.name},{p2.name})",
        color=LINE_COLOR,
    )


def polar_line(
    pole: Point,
    target: Conic,
    *,
    name: Optional[str] = None,
    color: str = POLAR_COLOR,
    hidden: bool = False,
) -> Line:
    return Line(
        id=new_id(),
        is_free=False,
        dependencies=(pole.id, target.id),
        name=name or f"Polar({pole.name})",
        color=color,
        hidden=hidden,
    )


def line_line_intersection(line1: Line, line2: Line, *, name: Optional[str] = None) -> Point:
    return Point(
        id=new_id(),
        is_free=False,
        dependencies=(line1.id, line2.id),
        name=name or f"I({line1.name},{line2.name})",
        color=POINT_COLOR,
    )


def line_conic_intersections(line: Line, target: Conic) -> List[Point]:
    """Both intersection branches, solution indices 0 and 1."""

    return [
        Point(
            id=new_id(),
            is_free=False,
            dependencies=(line.id, target.id),
            solution_index=index,
            name=f"I{index + 1}({line.name},{target.name})",
            color=POINT_COLOR,
        )
        for index in (0, 1)
    ]


def tangents_from_point(pole: Point, target: Conic) -> List[Entity]:
    """Tangent lines from ``pole`` to ``target``.

    Built from the (hidden) polar of the pole: its intersections with the
    conic are the tangency points, and the tangents join them to the pole.
    When the pole lies inside the conic the tangency points are hidden.
    """

    polar = polar_line(pole, target, color=AUXILIARY_COLOR, hidden=True)
    touch_points = [
        Point(
            id=new_id(),
            is_free=False,
            dependencies=(polar.id, target.id),
            solution_index=index,
            name=f"T{index + 1}",
            color=TANGENCY_COLOR,
        )
        for index in (0, 1)
    ]
    tangents = [
        Line(
            id=new_id(),
            is_free=False,
            p1_id=pole.id,
            p2_id=touch.id,
            name=f"Tan{index + 1}({pole.name})",
            color=TANGENT_COLOR,
        )
        for index, touch in enumerate(touch_points)
    ]
    return [polar, *touch_points, *tangents]


def self_polar_triangle(vertex: Point, target: Conic) -> List[Entity]:
    """Self-polar triangle with one vertex at ``vertex``.

    The second vertex is a free point kept on the polar of the first; the
    third is where the two polars meet, and its polar closes the triangle.
    """

    first_polar = polar_line(vertex, target, name=f"p({vertex.name})", color=AUXILIARY_COLOR)
    second = Point(
        id=new_id(),
        is_free=True,
        on_line_id=first_polar.id,
        name=f"{vertex.name}'",
        color=POINT_COLOR,
    )
    second_polar = polar_line(second, target, name=f"p({second.name})", color=AUXILIARY_COLOR)
    third = Point(
        id=new_id(),
        is_free=False,
        dependencies=(first_polar.id, second_polar.id),
        name=f"{vertex.name}''",
        color=POINT_COLOR,
    )
    third_polar = polar_line(third, target, name=f"p({third.name})", color=AUXILIARY_COLOR)
    return [first_polar, second, second_polar, third, third_polar]


def add_construction(
    entities: Sequence[Entity],
    built: Sequence[Entity],
    *,
    config: Optional[ResolverConfig] = None,
) -> List[Entity]:
    """Insert ``built`` one entity at a time, relaxing after each insertion.

    Inserting in order gives every construction step its own relaxation, so
    chains deeper than the resolver's pass count still settle.
    """

    current = list(entities)
    for entity in built:
        current = create(current, entity, config=config)
    return current


__all__ = [
    "AUXILIARY_COLOR",
    "CONIC_COLOR",
    "LINE_COLOR",
    "POINT_COLOR",
    "POLAR_COLOR",
    "TANGENCY_COLOR",
    "TANGENT_COLOR",
    "add_construction",
    "conic",
    "free_line",
    "free_point",
    "line_conic_intersections",
    "line_line_intersection",
    "line_through",
    "new_id",
    "pivot_line",
    "point_on_line",
    "polar_line",
    "self_polar_triangle",
    "tangents_from_point",
]
