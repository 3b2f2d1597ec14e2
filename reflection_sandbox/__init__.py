"""
Reflection sandbox engine.

Builds the lattice of virtual rooms produced by a room with mirrored walls,
projects objects into it, traces sight lines from virtual objects to an
observer, and folds those lines back into real light paths.

Public API:
    - run_simulation(), SimulationSettings: One-call pipeline
    - RoomTreeBuilder, RoomTree: Virtual room tree
    - ObjectProjector: Virtual object placement
    - SightLineTracer, RayPath: Sight line tracing
    - PathFolder: Stepwise folding of a traced path
"""

from .layout import (
    Wall,
    GridPos,
    WallConfig,
    WallRef,
    Room,
    PlacedObject,
    ExpansionOrder,
    RoomTree,
    RoomTreeBuilder,
    ObjectProjector,
)
from .geometry import reflect_point, reflect_wall_config, reflect_cell, intersect_rooms, cover_with_outside
from .tracing import RayPath, SightLineTracer, PathFolder
from .pipeline import SimulationSettings, SimulationResult, run_simulation
from .errors import SandboxError, BrokenAncestryError, ConfigurationError

__version__ = "0.1.0"

__all__ = [
    'Wall',
    'GridPos',
    'WallConfig',
    'WallRef',
    'Room',
    'PlacedObject',
    'ExpansionOrder',
    'RoomTree',
    'RoomTreeBuilder',
    'ObjectProjector',
    'reflect_point',
    'reflect_wall_config',
    'reflect_cell',
    'intersect_rooms',
    'cover_with_outside',
    'RayPath',
    'SightLineTracer',
    'PathFolder',
    'SimulationSettings',
    'SimulationResult',
    'run_simulation',
    'SandboxError',
    'BrokenAncestryError',
    'ConfigurationError',
]
