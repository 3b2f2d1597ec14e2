"""
Planar geometry for the room lattice.

Reflection formulas and the slab intersection of sight lines with rooms.
"""

from .reflection import reflect_point, reflect_wall_config, reflect_cell
from .intersect import (
    RoomSegment,
    intersect_rooms,
    cover_with_outside,
    EPSILON,
    OUTSIDE_ROOM_ID,
)

__all__ = [
    'reflect_point',
    'reflect_wall_config',
    'reflect_cell',
    'RoomSegment',
    'intersect_rooms',
    'cover_with_outside',
    'EPSILON',
    'OUTSIDE_ROOM_ID',
]
