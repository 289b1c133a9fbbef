"""Explicit dependency edges over an entity collection.

Each entity stores its dependencies in several optional fields; this module
turns them into :class:`Edge` records with an :class:`EdgeKind`, so that the
graph can be inspected and walked without knowing which field an edge came
from.  An edge ``source -> target`` means *source depends on target*.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Set

from .model import Entity, EntityId, Line, Point, entity_kind

logger = logging.getLogger(__name__)


class EdgeKind(str, Enum):
    ON_LINE = "on_line"
    PIVOT = "pivot"
    P1 = "p1"
    P2 = "p2"
    DEPENDENCY = "dependency"


@dataclass(frozen=True)
class Edge:
    source: EntityId
    target: EntityId
    kind: EdgeKind


def dependency_edges(entity: Entity) -> List[Edge]:
    """Return every outgoing edge of ``entity`` in a stable order."""

    entity_kind(entity)
    edges = [Edge(entity.id, dep, EdgeKind.DEPENDENCY) for dep in entity.dependencies]
    if isinstance(entity, Point):
        if entity.on_line_id is not None:
            edges.append(Edge(entity.id, entity.on_line_id, EdgeKind.ON_LINE))
    elif isinstance(entity, Line):
        if entity.pivot_point_id is not None:
            edges.append(Edge(entity.id, entity.pivot_point_id, EdgeKind.PIVOT))
        if entity.p1_id is not None:
            edges.append(Edge(entity.id, entity.p1_id, EdgeKind.P1))
        if entity.p2_id is not None:
            edges.append(Edge(entity.id, entity.p2_id, EdgeKind.P2))
    return edges


def dependency_ids(entity: Entity) -> Set[EntityId]:
    return {edge.target for edge in dependency_edges(entity)}


def all_edges(entities: Iterable[Entity]) -> List[Edge]:
    edges: List[Edge] = []
    for entity in entities:
        edges.extend(dependency_edges(entity))
    return edges


def dependents_index(entities: Iterable[Entity]) -> Dict[EntityId, Set[EntityId]]:
    """Return a reverse adjacency map ``target -> {sources}``."""

    index: Dict[EntityId, Set[EntityId]] = {}
    for edge in all_edges(entities):
        index.setdefault(edge.target, set()).add(edge.source)
    return index


def dangling_edges(entities: Sequence[Entity]) -> List[Edge]:
    """Return edges whose target is not part of ``entities``."""

    known = {entity.id for entity in entities}
    return [edge for edge in all_edges(entities) if edge.target not in known]


def collect_cascade(entities: Sequence[Entity], entity_id: EntityId) -> Set[EntityId]:
    """Return ``entity_id`` plus every entity that transitively depends on it."""

    doomed: Set[EntityId] = {entity_id}
    changed = True
    while changed:
        changed = False
        for entity in entities:
            if entity.id in doomed:
                continue
            if dependency_ids(entity) & doomed:
                doomed.add(entity.id)
                changed = True
    return doomed


def cascade_delete(entities: Sequence[Entity], entity_id: EntityId) -> List[Entity]:
    """Remove ``entity_id`` and its transitive dependents in one step."""

    if not any(entity.id == entity_id for entity in entities):
        logger.debug("cascade_delete: unknown id %s", entity_id)
        return list(entities)
    doomed = collect_cascade(entities, entity_id)
    logger.info("Deleting %s with %d dependent(s)", entity_id, len(doomed) - 1)
    return [entity for entity in entities if entity.id not in doomed]


def find_cycle(entities: Sequence[Entity]) -> List[EntityId]:
    """Return one dependency cycle as a list of ids, or ``[]`` if the graph is acyclic."""

    adjacency: Dict[EntityId, List[EntityId]] = {
        entity.id: [edge.target for edge in dependency_edges(entity)] for entity in entities
    }
    state: Dict[EntityId, int] = {}
    stack: List[EntityId] = []

    def visit(node: EntityId) -> List[EntityId]:
        state[node] = 1
        stack.append(node)
        for nxt in adjacency.get(node, ()):
            if nxt not in adjacency:
                continue
            if state.get(nxt) == 1:
                return stack[stack.index(nxt):] + [nxt]
            if nxt not in state:
                found = visit(nxt)
                if found:
                    return found
        stack.pop()
        state[node] = 2
        return []

    for entity in entities:
        if entity.id not in state:
            cycle = visit(entity.id)
            if cycle:
                return cycle
    return []


__all__ = [
    "Edge",
    "EdgeKind",
    "all_edges",
    "cascade_delete",
    "collect_cascade",
    "dangling_edges",
    "dependency_edges",
    "dependency_ids",
    "dependents_index",
    "find_cycle",
]
