"""Entity data model for the scene graph.

Entities are immutable tagged records.  The ``kind`` field is the variant tag
and every consumer dispatches over :data:`Entity` exhaustively, raising
``TypeError`` for values that are not one of the three variants.  Derived
attributes are never edited in place; the resolver and the scene operations
produce new values through :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple, Union

EntityId = str
EntityKind = Literal["point", "line", "conic"]
LineMode = Literal["free", "two-point", "pivot", "polar", "dependent"]

ELLIPSE = "ELLIPSE"
HYPERBOLA = "HYPERBOLA"
PARABOLA = "PARABOLA"

ConicType = Literal["ELLIPSE", "HYPERBOLA", "PARABOLA"]
CONIC_TYPES: Tuple[str, ...] = (ELLIPSE, HYPERBOLA, PARABOLA)


@dataclass(frozen=True)
class ConicCoeffs:
    """General equation ``Ax^2 + Bxy + Cy^2 + Dx + Ey + F = 0``."""

    A: float = 0.0
    B: float = 0.0
    C: float = 0.0
    D: float = 0.0
    E: float = 0.0
    F: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float, float, float, float]:
        return (self.A, self.B, self.C, self.D, self.E, self.F)


@dataclass(frozen=True)
class Point:
    id: EntityId
    x: float = 0.0
    y: float = 0.0
    is_free: bool = True
    on_line_id: Optional[EntityId] = None
    solution_index: Optional[int] = None
    name: str = ""
    color: str = "#ffffff"
    hidden: bool = False
    dependencies: Tuple[EntityId, ...] = ()
    kind: Literal["point"] = field(default="point", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "dependencies", tuple(self.dependencies or ()))


@dataclass(frozen=True)
class Line:
    """Line ``ax + by + c = 0``.

    The construction mode follows from which optional fields are populated;
    see :attr:`mode`.  For free-standing lines the coefficients are
    authoritative, for every other mode they are recomputed by the resolver.
    """

    id: EntityId
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    is_free: bool = True
    p1_id: Optional[EntityId] = None
    p2_id: Optional[EntityId] = None
    pivot_point_id: Optional[EntityId] = None
    angle: Optional[float] = None
    name: str = ""
    color: str = "#3b82f6"
    hidden: bool = False
    dependencies: Tuple[EntityId, ...] = ()
    kind: Literal["line"] = field(default="line", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "a", float(self.a))
        object.__setattr__(self, "b", float(self.b))
        object.__setattr__(self, "c", float(self.c))
        if self.angle is not None:
            object.__setattr__(self, "angle", float(self.angle))
        object.__setattr__(self, "dependencies", tuple(self.dependencies or ()))

    @property
    def coeffs(self) -> Tuple[float, float, float]:
        return (self.a, self.b, self.c)

    @property
    def mode(self) -> LineMode:
        """Return the construction mode in resolver priority order."""

        if self.pivot_point_id is not None and self.angle is not None:
            return "pivot"
        if self.p1_id is not None and self.p2_id is not None:
            return "two-point"
        if len(self.dependencies) == 2:
            return "polar"
        if self.dependencies:
            return "dependent"
        return "free"


@dataclass(frozen=True)
class Conic:
    """Conic section kept in standard form with cached general coefficients."""

    id: EntityId
    conic_type: ConicType = ELLIPSE
    cx: float = 0.0
    cy: float = 0.0
    a: float = 1.0
    b: float = 1.0
    rotation: float = 0.0
    coeffs: ConicCoeffs = field(default_factory=ConicCoeffs)
    name: str = ""
    color: str = "#f59e0b"
    hidden: bool = False
    dependencies: Tuple[EntityId, ...] = ()
    kind: Literal["conic"] = field(default="conic", init=False)

    def __post_init__(self) -> None:
        if self.conic_type not in CONIC_TYPES:
            raise ValueError(f"unknown conic type {self.conic_type!r}")
        for attr in ("cx", "cy", "a", "b", "rotation"):
            object.__setattr__(self, attr, float(getattr(self, attr)))
        object.__setattr__(self, "dependencies", tuple(self.dependencies or ()))


Entity = Union[Point, Line, Conic]
ENTITY_TYPES = (Point, Line, Conic)


def is_entity(value: object) -> bool:
    return isinstance(value, ENTITY_TYPES)


def entity_kind(entity: Entity) -> EntityKind:
    if isinstance(entity, Point):
        return "point"
    if isinstance(entity, Line):
        return "line"
    if isinstance(entity, Conic):
        return "conic"
    raise TypeError(f"not a scene entity: {entity!r}")


__all__ = [
    "CONIC_TYPES",
    "ConicCoeffs",
    "ConicType",
    "Conic",
    "ELLIPSE",
    "ENTITY_TYPES",
    "Entity",
    "EntityId",
    "EntityKind",
    "HYPERBOLA",
    "Line",
    "LineMode",
    "PARABOLA",
    "Point",
    "entity_kind",
    "is_entity",
]
