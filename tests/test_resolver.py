import logging
import math

import pytest

from conic_scene.config import ResolverConfig
from conic_scene.conics import standard_to_general
from conic_scene.demo import demo_entities
from conic_scene.model import ELLIPSE, Conic, Line, Point
from conic_scene.resolver import relaxation_pass, resolve, resolve_entity, resolve_with_report


def _by_id(entities):
    return {entity.id: entity for entity in entities}


def _ellipse():
    return Conic(id="c1", conic_type=ELLIPSE, cx=0, cy=0, a=3, b=2, rotation=0)


def _chord_scene(y=0.0):
    return [
        _ellipse(),
        Point(id="p1", x=-4, y=y),
        Point(id="p2", x=4, y=y),
        Line(id="l", is_free=False, p1_id="p1", p2_id="p2"),
        Point(id="i0", is_free=False, dependencies=("l", "c1"), solution_index=0),
        Point(id="i1", is_free=False, dependencies=("l", "c1"), solution_index=1),
    ]


def test_conic_coefficients_are_recomputed():
    resolved = _by_id(resolve([_ellipse()]))
    assert resolved["c1"].coeffs == standard_to_general(ELLIPSE, 0, 0, 3, 2, 0)


def test_two_point_line_and_intersections_settle_within_default_passes():
    report = resolve_with_report(_chord_scene())
    assert report.converged
    assert report.passes == 3

    resolved = _by_id(report.entities)
    line = resolved["l"]
    assert line.coeffs == pytest.approx((0.0, 8.0, 0.0))
    assert (resolved["i0"].x, resolved["i0"].y) == pytest.approx((3.0, 0.0))
    assert (resolved["i1"].x, resolved["i1"].y) == pytest.approx((-3.0, 0.0))
    assert not resolved["i0"].hidden and not resolved["i1"].hidden


def test_intersection_points_lie_on_line_and_conic():
    resolved = _by_id(resolve(demo_entities()))
    line = resolved["lRot"]
    A, B, C, D, E, F = resolved["c1"].coeffs.as_tuple()
    for pid in ("i1", "i2"):
        pt = resolved[pid]
        assert not pt.hidden
        assert line.a * pt.x + line.b * pt.y + line.c == pytest.approx(0.0, abs=1e-6)
        value = A * pt.x ** 2 + B * pt.x * pt.y + C * pt.y ** 2 + D * pt.x + E * pt.y + F
        assert value == pytest.approx(0.0, abs=1e-6)


def test_missing_line_hides_points_and_keeps_coordinates():
    resolved = resolve(_chord_scene())
    moved = [
        Point(id=e.id, x=e.x, y=5.0) if e.id in ("p1", "p2") else e for e in resolved
    ]
    after = _by_id(resolve(moved))
    assert after["i0"].hidden and after["i1"].hidden
    assert (after["i0"].x, after["i0"].y) == pytest.approx((3.0, 0.0))

    back = [Point(id=e.id, x=e.x, y=0.0) if e.id in ("p1", "p2") else e for e in resolve(moved)]
    visible = _by_id(resolve(back))
    assert not visible["i0"].hidden
    assert (visible["i0"].x, visible["i0"].y) == pytest.approx((3.0, 0.0))


def test_solution_index_out_of_range_hides_point():
    entities = _chord_scene() + [
        Point(id="i2", x=7, y=7, is_free=False, dependencies=("l", "c1"), solution_index=2)
    ]
    resolved = _by_id(resolve(entities))
    assert resolved["i2"].hidden
    assert (resolved["i2"].x, resolved["i2"].y) == (7.0, 7.0)


def test_dependency_order_between_line_and_conic_does_not_matter():
    entities = _chord_scene() + [
        Point(id="j0", is_free=False, dependencies=("c1", "l"), solution_index=0)
    ]
    resolved = _by_id(resolve(entities))
    assert (resolved["j0"].x, resolved["j0"].y) == pytest.approx((resolved["i0"].x, resolved["i0"].y))


def test_pivot_line_follows_pivot_point():
    entities = [
        Point(id="p", x=2, y=-2),
        Line(id="l", pivot_point_id="p", angle=math.pi / 2),
    ]
    line = _by_id(resolve(entities))["l"]
    assert line.coeffs == pytest.approx((-1.0, 0.0, 2.0), abs=1e-12)


def test_pivot_takes_precedence_over_two_points():
    entities = [
        Point(id="p", x=0, y=0),
        Point(id="q", x=1, y=5),
        Line(id="l", pivot_point_id="p", angle=0.0, p1_id="p", p2_id="q"),
    ]
    line = _by_id(resolve(entities))["l"]
    assert line.coeffs == pytest.approx((0.0, 1.0, 0.0))


def test_polar_line_of_external_point():
    entities = [_ellipse(), Point(id="P", x=5, y=0), Line(id="pol", is_free=False, dependencies=("P", "c1"))]
    line = _by_id(resolve(entities))["pol"]
    assert line.coeffs == pytest.approx((5 / 9, 0.0, -1.0))


def test_point_on_line_is_projected():
    entities = [
        Line(id="l", a=0, b=1, c=-1),
        Point(id="p", x=3, y=4, is_free=False, on_line_id="l"),
    ]
    point = _by_id(resolve(entities))["p"]
    assert (point.x, point.y) == pytest.approx((3.0, 1.0))


def test_line_line_intersection_hidden_when_parallel():
    entities = [
        Line(id="l1", a=1, b=-1, c=0),
        Line(id="l2", a=1, b=-1, c=2),
        Point(id="x", x=9, y=9, is_free=False, dependencies=("l1", "l2")),
    ]
    point = _by_id(resolve(entities))["x"]
    assert point.hidden
    assert (point.x, point.y) == (9.0, 9.0)

    entities[1] = Line(id="l2", a=1, b=1, c=-2)
    point = _by_id(resolve(entities))["x"]
    assert not point.hidden
    assert (point.x, point.y) == pytest.approx((1.0, 1.0))


def test_unresolvable_dependencies_leave_entities_unchanged():
    entities = [
        Point(id="x", x=1, y=2, is_free=False, dependencies=("gone1", "gone2")),
        Line(id="l", a=1, b=2, c=3, is_free=False, p1_id="gone1", p2_id="gone2"),
        Point(id="o", x=4, y=5, is_free=False, on_line_id="gone3"),
    ]
    assert resolve(entities) == entities


def test_resolve_does_not_mutate_input():
    entities = _chord_scene()
    snapshot = list(entities)
    resolved = resolve(entities)
    assert entities == snapshot
    assert resolved is not entities
    assert entities[4].hidden is False and entities[4].x == 0.0


def test_single_pass_reports_unsettled_entities(caplog):
    with caplog.at_level(logging.WARNING, logger="conic_scene.resolver"):
        report = resolve_with_report(_chord_scene(), passes=1)
    assert not report.converged
    assert "i0" in report.unsettled
    assert "l" not in report.unsettled
    assert "i0" in report.hidden
    assert "did not converge" in caplog.text


def test_convergence_warning_can_be_disabled(caplog):
    config = ResolverConfig(passes=1, warn_on_non_convergence=False)
    with caplog.at_level(logging.WARNING, logger="conic_scene.resolver"):
        report = resolve_with_report(_chord_scene(), config=config)
    assert report.passes == 1
    assert not report.converged
    assert caplog.text == ""


def test_resolving_a_settled_collection_is_a_fixed_point():
    once = resolve(demo_entities())
    assert resolve(once) == once
    assert resolve_with_report(once, passes=1).converged


def test_relaxation_pass_reads_previous_values():
    first = _by_id(relaxation_pass(_chord_scene()))
    # the line is computed, but the intersections still saw the zero line
    assert first["l"].coeffs == pytest.approx((0.0, 8.0, 0.0))
    assert first["i0"].hidden


def test_invalid_pass_count_is_rejected():
    with pytest.raises(ValueError):
        resolve(_chord_scene(), passes=0)


def test_resolve_entity_rejects_foreign_values():
    with pytest.raises(TypeError):
        resolve_entity(object(), {})


def test_point_bound_to_vertical_line():
    entities = [
        Line(id="axis", a=1, b=0, c=0),
        Point(id="p", x=1, y=1, on_line_id="axis"),
    ]
    point = _by_id(resolve(entities))["p"]
    assert (point.x, point.y) == pytest.approx((0.0, 1.0))


def test_tangent_line_gives_two_visible_coincident_points():
    entities = [
        _ellipse(),
        Line(id="t", a=0, b=1, c=-2),
        Point(id="t0", is_free=False, dependencies=("t", "c1"), solution_index=0),
        Point(id="t1", is_free=False, dependencies=("t", "c1"), solution_index=1),
    ]
    resolved = _by_id(resolve(entities))
    t0, t1 = resolved["t0"], resolved["t1"]
    assert not t0.hidden and not t1.hidden
    assert (t0.x, t0.y) == pytest.approx((0.0, 2.0))
    assert (t1.x, t1.y) == pytest.approx((t0.x, t0.y))


def test_non_finite_rotation_and_angle_do_not_break_resolution():
    entities = [
        Conic(id="c1", a=3, b=2, rotation=math.inf),
        Point(id="p", x=0, y=0),
        Line(id="l", pivot_point_id="p", angle=-math.inf),
        Line(id="m", a=1, b=0, c=-1),
        Point(id="i0", is_free=False, dependencies=("m", "c1"), solution_index=0),
        Point(id="x", is_free=False, dependencies=("l", "m")),
        Point(id="on", x=2, y=3, on_line_id="l"),
    ]
    report = resolve_with_report(entities)
    resolved = _by_id(report.entities)
    assert all(math.isnan(v) for v in resolved["l"].coeffs)
    assert resolved["i0"].hidden
    assert resolved["x"].hidden
    assert (resolved["on"].x, resolved["on"].y) == (2.0, 3.0)
    assert report.converged
