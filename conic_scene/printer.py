from typing import Iterable, List

from .model import Conic, Entity, Line, Point


def num_str(value: float) -> str:
    return f"{value:.6g}"


def _suffix(entity: Entity) -> str:
    parts: List[str] = []
    if entity.name:
        parts.append(f'name="{entity.name}"')
    if entity.hidden:
        parts.append("hidden")
    if not parts:
        return ""
    return " [" + " ".join(parts) + "]"


def point_str(point: Point) -> str:
    text = f"point {point.id} ({num_str(point.x)}, {num_str(point.y)})"
    if point.on_line_id is not None:
        text += f" on {point.on_line_id}"
    if point.dependencies:
        text += " from " + " x ".join(point.dependencies)
        if point.solution_index is not None:
            text += f" #{point.solution_index}"
    if point.is_free and (point.on_line_id is not None or point.dependencies):
        text += " free"
    return text


def line_str(line: Line) -> str:
    text = f"line {line.id} {num_str(line.a)}x + {num_str(line.b)}y + {num_str(line.c)} = 0"
    mode = line.mode
    if mode == "pivot":
        text += f" pivot {line.pivot_point_id} angle={num_str(line.angle)}"
    elif mode == "two-point":
        text += f" through {line.p1_id}, {line.p2_id}"
    elif mode == "polar":
        text += " polar " + " wrt ".join(line.dependencies)
    elif mode == "dependent":
        text += " from " + ", ".join(line.dependencies)
    return text


def conic_str(conic: Conic) -> str:
    k = conic.coeffs
    return (
        f"{conic.conic_type.lower()} {conic.id}"
        f" center=({num_str(conic.cx)}, {num_str(conic.cy)})"
        f" a={num_str(conic.a)} b={num_str(conic.b)} rotation={num_str(conic.rotation)}"
        f" coeffs=({', '.join(num_str(v) for v in k.as_tuple())})"
    )


def format_entity(entity: Entity) -> str:
    if isinstance(entity, Point):
        body = point_str(entity)
    elif isinstance(entity, Line):
        body = line_str(entity)
    elif isinstance(entity, Conic):
        body = conic_str(entity)
    else:
        raise TypeError(f"not a scene entity: {entity!r}")
    return body + _suffix(entity)


def print_scene(entities: Iterable[Entity], *, visible_only: bool = False) -> str:
    lines = []
    for entity in entities:
        if visible_only and entity.hidden:
            continue
        lines.append(format_entity(entity))
    return "\n".join(lines) + ("\n" if lines else "")
