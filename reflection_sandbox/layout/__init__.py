"""
Room lattice package.

Data model for rooms and objects, virtual room tree construction, and
projection of real objects into virtual rooms.
"""

from .room_types import (
    Wall,
    WALL_ORDER,
    GridPos,
    WallConfig,
    WallRef,
    Room,
    PlacedObject,
    ROOT_ROOM_ID,
)
from .room_tree import (
    ExpansionOrder,
    RoomTree,
    RoomTreeBuilder,
    build_room_tree,
    MAX_PRACTICAL_ORDER,
)
from .projection import ObjectProjector, project_objects

__all__ = [
    # Data model
    'Wall',
    'WALL_ORDER',
    'GridPos',
    'WallConfig',
    'WallRef',
    'Room',
    'PlacedObject',
    'ROOT_ROOM_ID',
    # Tree
    'ExpansionOrder',
    'RoomTree',
    'RoomTreeBuilder',
    'build_room_tree',
    'MAX_PRACTICAL_ORDER',
    # Projection
    'ObjectProjector',
    'project_objects',
]
