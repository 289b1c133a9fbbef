from typing import Iterable, List, Sequence

from .graph import dependency_ids, find_cycle
from .model import Entity, Line, entity_kind, is_entity


class ValidationError(Exception):
    pass


def _describe(entity: Entity) -> str:
    label = f" ({entity.name})" if entity.name else ""
    return f"{entity.kind} {entity.id}{label}"


def ensure_new_id(entities: Iterable[Entity], entity: Entity) -> None:
    for existing in entities:
        if existing.id == entity.id:
            raise ValidationError(f'duplicate entity id "{entity.id}"')


def validate(entities: Sequence[Entity]) -> None:
    """Check structural well-formedness of a collection.

    The resolver itself never needs this; it is meant for hosts that build
    collections by hand.  Dangling references are allowed, they only mean
    "not yet resolvable".
    """

    seen = set()
    for entity in entities:
        if not is_entity(entity):
            raise ValidationError(f"not a scene entity: {entity!r}")
        entity_kind(entity)
        if entity.id in seen:
            raise ValidationError(f'duplicate entity id "{entity.id}"')
        seen.add(entity.id)
        if entity.id in dependency_ids(entity):
            raise ValidationError(f"{_describe(entity)} depends on itself")
        if isinstance(entity, Line):
            if (entity.p1_id is None) != (entity.p2_id is None):
                raise ValidationError(f"{_describe(entity)} needs both p1_id and p2_id")
            if entity.p1_id is not None and entity.p1_id == entity.p2_id:
                raise ValidationError(f"{_describe(entity)} needs two distinct points")
            if entity.pivot_point_id is not None and entity.angle is None:
                raise ValidationError(f"{_describe(entity)} has a pivot but no angle")

    cycle: List[str] = find_cycle(entities)
    if cycle:
        raise ValidationError("dependency cycle: " + " -> ".join(cycle))
