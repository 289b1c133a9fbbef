from .model import (
    CONIC_TYPES,
    ELLIPSE,
    HYPERBOLA,
    PARABOLA,
    Conic,
    ConicCoeffs,
    Entity,
    Line,
    Point,
)
from .conics import (
    StandardParams,
    classify,
    conic_matrix,
    general_to_standard,
    intersect_line_conic,
    polar_line,
    standard_to_general,
    update_conic_coefficients,
)
from .derive import (
    closest_point_on_line,
    intersect_lines,
    line_from_point_and_angle,
    line_from_two_points,
)
from .graph import Edge, EdgeKind, cascade_delete, collect_cascade, dependency_edges
from .config import ResolverConfig, get_resolver_config, set_resolver_config
from .resolver import ResolveReport, resolve, resolve_with_report
from .scene import (
    CreateEntity,
    DeleteEntity,
    Scene,
    UpdateEntity,
    aim_pivot_line,
    apply,
    create,
    delete,
    translate_line,
    update,
)
from .validate import validate, ValidationError
from .parser import evaluate_expression, parse_number
from .numbers import SymbolicNumber
from .printer import format_entity, print_scene
from .demo import demo_scene

__all__ = [
    'CONIC_TYPES',
    'ELLIPSE',
    'HYPERBOLA',
    'PARABOLA',
    'Conic',
    'ConicCoeffs',
    'Entity',
    'Line',
    'Point',
    'StandardParams',
    'classify',
    'conic_matrix',
    'general_to_standard',
    'intersect_line_conic',
    'polar_line',
    'standard_to_general',
    'update_conic_coefficients',
    'closest_point_on_line',
    'intersect_lines',
    'line_from_point_and_angle',
    'line_from_two_points',
    'Edge',
    'EdgeKind',
    'cascade_delete',
    'collect_cascade',
    'dependency_edges',
    'ResolverConfig',
    'get_resolver_config',
    'set_resolver_config',
    'ResolveReport',
    'resolve',
    'resolve_with_report',
    'CreateEntity',
    'DeleteEntity',
    'Scene',
    'UpdateEntity',
    'aim_pivot_line',
    'apply',
    'create',
    'delete',
    'translate_line',
    'update',
    'validate',
    'ValidationError',
    'evaluate_expression',
    'parse_number',
    'SymbolicNumber',
    'format_entity',
    'print_scene',
    'demo_scene',
]
