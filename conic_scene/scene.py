"""Whole-collection operations consumed by the host application.

Every operation takes the current collection and returns a new, fully
relaxed one.  :func:`apply` is the single seam for hosts that route user
actions as values; :class:`Scene` keeps the latest collection for hosts that
prefer an object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .config import ResolverConfig
from .conics import general_to_standard
from .derive import angle_towards, translate_line as _shift_line
from .graph import cascade_delete
from .logging_utils import apply_debug_logging
from .model import Conic, ConicCoeffs, Entity, EntityId, Line, Point, is_entity
from .resolver import ResolveReport, resolve_with_report
from .validate import ensure_new_id, validate

logger = logging.getLogger(__name__)

_LINE_COEFF_FIELDS = ("a", "b", "c")
_LINE_DETACH = {
    "is_free": True,
    "p1_id": None,
    "p2_id": None,
    "pivot_point_id": None,
    "dependencies": (),
}


@dataclass(frozen=True)
class CreateEntity:
    entity: Entity


@dataclass(frozen=True)
class UpdateEntity:
    entity_id: EntityId
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteEntity:
    entity_id: EntityId


Action = Union[CreateEntity, UpdateEntity, DeleteEntity]


def _relax(entities: Sequence[Entity], config: Optional[ResolverConfig]) -> ResolveReport:
    return resolve_with_report(entities, config=config)


def _coerce_coeffs(current: ConicCoeffs, value: Any) -> ConicCoeffs:
    if isinstance(value, ConicCoeffs):
        return value
    if isinstance(value, Mapping):
        merged = dict(zip("ABCDEF", current.as_tuple()))
        merged.update({key: float(val) for key, val in value.items()})
        return ConicCoeffs(**merged)
    if isinstance(value, (list, tuple)) and len(value) == 6:
        return ConicCoeffs(*(float(v) for v in value))
    raise TypeError(f"cannot interpret {value!r} as conic coefficients")


def apply_changes(entity: Entity, changes: Mapping[str, Any]) -> Entity:
    """Return ``entity`` with ``changes`` applied, honouring edit semantics.

    Editing a conic's ``coeffs`` converts them back to standard parameters
    (type only for parabolas).  Editing a line coefficient turns the line
    into a free-standing one.
    """

    if "id" in changes and changes["id"] != entity.id:
        raise ValueError(f"cannot change id of {entity.id}")
    updates: Dict[str, Any] = {key: val for key, val in changes.items() if key != "id"}

    if isinstance(entity, Conic):
        if "coeffs" in updates:
            coeffs = _coerce_coeffs(entity.coeffs, updates["coeffs"])
            updates["coeffs"] = coeffs
            updates.update(general_to_standard(coeffs).as_changes())
    elif isinstance(entity, Line):
        if any(key in updates for key in _LINE_COEFF_FIELDS):
            for key, val in _LINE_DETACH.items():
                updates.setdefault(key, val)
    elif not isinstance(entity, Point):
        raise TypeError(f"not a scene entity: {entity!r}")

    return replace(entity, **updates)


def create_with_report(
    entities: Sequence[Entity],
    entity: Entity,
    *,
    strict: bool = False,
    config: Optional[ResolverConfig] = None,
) -> ResolveReport:
    if not is_entity(entity):
        raise TypeError(f"not a scene entity: {entity!r}")
    ensure_new_id(entities, entity)
    candidate = list(entities) + [entity]
    if strict:
        validate(candidate)
    logger.info("Creating %s %s (%s)", entity.kind, entity.id, entity.name or "unnamed")
    return _relax(candidate, config)


def update_with_report(
    entities: Sequence[Entity],
    entity_id: EntityId,
    changes: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[ResolverConfig] = None,
    **fields: Any,
) -> ResolveReport:
    merged: Dict[str, Any] = dict(changes or {})
    merged.update(fields)
    found = False
    updated: List[Entity] = []
    for entity in entities:
        if entity.id == entity_id:
            updated.append(apply_changes(entity, merged))
            found = True
        else:
            updated.append(entity)
    if not found:
        logger.warning("Update for unknown entity %s ignored", entity_id)
    else:
        logger.info("Updating %s: %s", entity_id, ", ".join(sorted(merged)) or "no fields")
    return _relax(updated, config)


def delete_with_report(
    entities: Sequence[Entity],
    entity_id: EntityId,
    *,
    config: Optional[ResolverConfig] = None,
) -> ResolveReport:
    return _relax(cascade_delete(entities, entity_id), config)


def apply_with_report(
    entities: Sequence[Entity],
    action: Action,
    *,
    strict: bool = False,
    config: Optional[ResolverConfig] = None,
) -> ResolveReport:
    if isinstance(action, CreateEntity):
        return create_with_report(entities, action.entity, strict=strict, config=config)
    if isinstance(action, UpdateEntity):
        return update_with_report(entities, action.entity_id, action.changes, config=config)
    if isinstance(action, DeleteEntity):
        return delete_with_report(entities, action.entity_id, config=config)
    raise TypeError(f"unknown action {action!r}")


def create(
    entities: Sequence[Entity],
    entity: Entity,
    *,
    strict: bool = False,
    config: Optional[ResolverConfig] = None,
) -> List[Entity]:
    """Insert ``entity`` and relax the collection.

    Raises ``ValidationError`` if the id is already taken and, with
    ``strict``, if the resulting collection is malformed.
    """

    return create_with_report(entities, entity, strict=strict, config=config).entities


def update(
    entities: Sequence[Entity],
    entity_id: EntityId,
    changes: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[ResolverConfig] = None,
    **fields: Any,
) -> List[Entity]:
    """Apply attribute changes to one entity and relax the collection.

    Changes may be passed as a mapping, as keyword arguments, or both.  An
    unknown id leaves every entity as it was (still relaxed).
    """

    return update_with_report(entities, entity_id, changes, config=config, **fields).entities


def delete(
    entities: Sequence[Entity],
    entity_id: EntityId,
    *,
    config: Optional[ResolverConfig] = None,
) -> List[Entity]:
    """Cascade-delete ``entity_id`` and relax what is left."""

    return delete_with_report(entities, entity_id, config=config).entities


def apply(
    entities: Sequence[Entity],
    action: Action,
    *,
    config: Optional[ResolverConfig] = None,
) -> List[Entity]:
    """Dispatch one host action and return the resulting collection."""

    return apply_with_report(entities, action, config=config).entities


def _find(entities: Sequence[Entity], entity_id: EntityId) -> Optional[Entity]:
    for entity in entities:
        if entity.id == entity_id:
            return entity
    return None


def _translation_changes(
    entities: Sequence[Entity], line_id: EntityId, dx: float, dy: float
) -> Optional[Dict[str, Any]]:
    line = _find(entities, line_id)
    if not isinstance(line, Line) or line.mode != "free":
        logger.debug("translate_line: %s is not a free-standing line", line_id)
        return None
    _, _, c = _shift_line(line.coeffs, dx, dy)
    return {"c": c}


def _aim_changes(
    entities: Sequence[Entity], line_id: EntityId, x: float, y: float
) -> Optional[Dict[str, Any]]:
    line = _find(entities, line_id)
    if not isinstance(line, Line) or line.mode != "pivot":
        logger.debug("aim_pivot_line: %s is not a pivot line", line_id)
        return None
    pivot = _find(entities, line.pivot_point_id)
    if not isinstance(pivot, Point):
        return None
    return {"angle": angle_towards((pivot.x, pivot.y), (x, y))}


def translate_line(
    entities: Sequence[Entity],
    line_id: EntityId,
    dx: float,
    dy: float,
    *,
    config: Optional[ResolverConfig] = None,
) -> List[Entity]:
    """Drag a free-standing line by ``(dx, dy)``; other lines are left alone."""

    changes = _translation_changes(entities, line_id, dx, dy)
    if changes is None:
        return _relax(entities, config).entities
    return update(entities, line_id, changes, config=config)


def aim_pivot_line(
    entities: Sequence[Entity],
    line_id: EntityId,
    x: float,
    y: float,
    *,
    config: Optional[ResolverConfig] = None,
) -> List[Entity]:
    """Rotate a pivot line so that it passes through ``(x, y)``."""

    changes = _aim_changes(entities, line_id, x, y)
    if changes is None:
        return _relax(entities, config).entities
    return update(entities, line_id, changes, config=config)


class Scene:
    """Holder for the current collection.

    Each call replaces the collection wholesale; readers get an immutable
    tuple, so a snapshot taken for rendering never changes under them.
    """

    def __init__(
        self,
        entities: Sequence[Entity] = (),
        *,
        strict: bool = False,
        config: Optional[ResolverConfig] = None,
    ) -> None:
        self.strict = strict
        self.config = config
        if strict:
            validate(entities)
        self._commit(_relax(entities, config))

    def _commit(self, report: ResolveReport) -> Tuple[Entity, ...]:
        self._report = report
        self._entities: Tuple[Entity, ...] = tuple(report.entities)
        return self._entities

    @property
    def entities(self) -> Tuple[Entity, ...]:
        return self._entities

    @property
    def last_report(self) -> ResolveReport:
        return self._report

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return any(entity.id == entity_id for entity in self._entities)

    def __iter__(self):
        return iter(self._entities)

    def get(self, entity_id: EntityId) -> Optional[Entity]:
        return _find(self._entities, entity_id)

    def create(self, entity: Entity) -> Tuple[Entity, ...]:
        return self._commit(
            create_with_report(self._entities, entity, strict=self.strict, config=self.config)
        )

    def update(
        self, entity_id: EntityId, changes: Optional[Mapping[str, Any]] = None, **fields: Any
    ) -> Tuple[Entity, ...]:
        return self._commit(
            update_with_report(self._entities, entity_id, changes, config=self.config, **fields)
        )

    def delete(self, entity_id: EntityId) -> Tuple[Entity, ...]:
        return self._commit(delete_with_report(self._entities, entity_id, config=self.config))

    def apply(self, action: Action) -> Tuple[Entity, ...]:
        return self._commit(
            apply_with_report(self._entities, action, strict=self.strict, config=self.config)
        )

    def translate_line(self, line_id: EntityId, dx: float, dy: float) -> Tuple[Entity, ...]:
        changes = _translation_changes(self._entities, line_id, dx, dy)
        if changes is None:
            return self._commit(_relax(self._entities, self.config))
        return self.update(line_id, changes)

    def aim_pivot_line(self, line_id: EntityId, x: float, y: float) -> Tuple[Entity, ...]:
        changes = _aim_changes(self._entities, line_id, x, y)
        if changes is None:
            return self._commit(_relax(self._entities, self.config))
        return self.update(line_id, changes)


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "Action",
    "CreateEntity",
    "DeleteEntity",
    "Scene",
    "UpdateEntity",
    "aim_pivot_line",
    "apply",
    "apply_changes",
    "apply_with_report",
    "create",
    "create_with_report",
    "delete",
    "delete_with_report",
    "translate_line",
    "update",
    "update_with_report",
]
