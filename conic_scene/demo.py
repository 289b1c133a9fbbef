import math
from typing import List

from .model import ELLIPSE, Conic, Entity, Line, Point
from .printer import print_scene
from .resolver import resolve


def demo_entities() -> List[Entity]:
    """Unresolved demo collection: an ellipse, a two-point line and a pivot line cutting the ellipse."""

    return [
        Conic(id="c1", conic_type=ELLIPSE, name="Ellipse", color="#f59e0b", cx=0, cy=0, a=3, b=2, rotation=0),
        Point(id="pA", name="A", x=-4, y=3, is_free=True),
        Point(id="pB", name="B", x=-1, y=4, is_free=True),
        Line(id="lAB", name="L(AB)", color="#8b5cf6", is_free=False, p1_id="pA", p2_id="pB"),
        Point(id="pPivot", name="Pivot", color="#10b981", x=2, y=-2, is_free=True),
        Line(
            id="lRot",
            name="RotLine",
            color="#10b981",
            is_free=True,
            pivot_point_id="pPivot",
            angle=math.pi / 3,
        ),
        Point(id="i1", name="I1", color="#ec4899", is_free=False, dependencies=("lRot", "c1"), solution_index=0),
        Point(id="i2", name="I2", color="#ec4899", is_free=False, dependencies=("lRot", "c1"), solution_index=1),
    ]


def demo_scene() -> List[Entity]:
    return resolve(demo_entities())


def run():
    print(print_scene(demo_scene()), end="")


if __name__ == "__main__":
    run()
