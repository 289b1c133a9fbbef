import logging

import pytest

from conic_scene.graph import (
    Edge,
    EdgeKind,
    all_edges,
    cascade_delete,
    collect_cascade,
    dangling_edges,
    dependency_edges,
    dependents_index,
    find_cycle,
)
from conic_scene.model import Conic, Line, Point


def _chain():
    return [
        Conic(id="c"),
        Point(id="a", x=0, y=0),
        Point(id="b", x=1, y=1),
        Line(id="ab", is_free=False, p1_id="a", p2_id="b"),
        Point(id="on", is_free=False, on_line_id="ab"),
        Line(id="piv", pivot_point_id="on", angle=0.3),
        Point(id="x", is_free=False, dependencies=("piv", "c"), solution_index=0),
        Point(id="lonely", x=5, y=5),
    ]


def test_edges_carry_their_kind():
    line = Line(id="l", pivot_point_id="p", angle=0.0, p1_id="a", p2_id="b", dependencies=("d",))
    assert dependency_edges(line) == [
        Edge("l", "d", EdgeKind.DEPENDENCY),
        Edge("l", "p", EdgeKind.PIVOT),
        Edge("l", "a", EdgeKind.P1),
        Edge("l", "b", EdgeKind.P2),
    ]
    point = Point(id="q", on_line_id="l")
    assert dependency_edges(point) == [Edge("q", "l", EdgeKind.ON_LINE)]
    assert dependency_edges(Conic(id="c")) == []


def test_dependency_edges_rejects_foreign_values():
    with pytest.raises(TypeError):
        dependency_edges("not an entity")


def test_dependents_index_is_reverse_adjacency():
    index = dependents_index(_chain())
    assert index["a"] == {"ab"}
    assert index["c"] == {"x"}
    assert index["ab"] == {"on"}
    assert "lonely" not in index
    assert len(all_edges(_chain())) == 6


def test_cascade_collects_transitive_dependents():
    assert collect_cascade(_chain(), "a") == {"a", "ab", "on", "piv", "x"}
    assert collect_cascade(_chain(), "c") == {"c", "x"}
    assert collect_cascade(_chain(), "lonely") == {"lonely"}


def test_cascade_delete_leaves_no_dangling_references():
    remaining = cascade_delete(_chain(), "b")
    assert [entity.id for entity in remaining] == ["c", "a", "lonely"]
    assert dangling_edges(remaining) == []


def test_cascade_delete_of_unknown_id_returns_copy(caplog):
    entities = _chain()
    with caplog.at_level(logging.DEBUG, logger="conic_scene.graph"):
        remaining = cascade_delete(entities, "nope")
    assert remaining == entities
    assert remaining is not entities
    assert "unknown id nope" in caplog.text


def test_cascade_delete_logs_dependent_count(caplog):
    with caplog.at_level(logging.INFO, logger="conic_scene.graph"):
        cascade_delete(_chain(), "on")
    assert "Deleting on with 2 dependent(s)" in caplog.text


def test_dangling_edges_are_reported():
    entities = [Point(id="p", is_free=False, on_line_id="missing")]
    assert dangling_edges(entities) == [Edge("p", "missing", EdgeKind.ON_LINE)]


def test_find_cycle():
    assert find_cycle(_chain()) == []
    looped = [
        Line(id="l", is_free=False, p1_id="p", p2_id="q"),
        Point(id="p", is_free=False, on_line_id="l"),
        Point(id="q", x=1, y=1),
    ]
    assert find_cycle(looped) == ["l", "p", "l"]
