"""
Sight line tracing and folding.
"""

from .ray_path import (
    RaySegment,
    ReflectionPoint,
    RayPath,
    SightLineTracer,
    trace_sight_line,
)
from .folding import FoldStep, FoldState, PathFolder, fold_points

__all__ = [
    'RaySegment',
    'ReflectionPoint',
    'RayPath',
    'SightLineTracer',
    'trace_sight_line',
    'FoldStep',
    'FoldState',
    'PathFolder',
    'fold_points',
]
