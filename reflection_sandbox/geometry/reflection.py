"""
Reflection formulas for points and wall configurations.

A mirror wall of an axis-aligned room reflects one coordinate about the
wall's line and leaves the other untouched:

    top:    y' = 2 * top    - y
    bottom: y' = 2 * bottom - y
    left:   x' = 2 * left   - x
    right:  x' = 2 * right  - x

Every function here is pure and an involution: applying the same reflection
twice with the same parameters returns the input.
"""

from __future__ import annotations

import logging
from typing import Any, Tuple

from ..layout.room_types import Point, Wall, WallConfig

logger = logging.getLogger(__name__)

Size = Tuple[float, float]


def reflect_point(point: Point, wall: Any, room_origin: Point, room_size: Size) -> Point:
    """Reflect a global point across one wall of a room.

    Args:
        point: Point to reflect (global coordinates)
        wall: Wall to reflect across
        room_origin: Global top-left corner of the room owning the wall
        room_size: (width, height) of that room

    Returns:
        The mirrored point. An unknown wall tag returns the point unchanged.
    """
    x, y = point
    left, top = room_origin
    width, height = room_size

    parsed = Wall.parse(wall)
    if parsed is Wall.TOP:
        return (x, 2 * top - y)
    elif parsed is Wall.BOTTOM:
        return (x, 2 * (top + height) - y)
    elif parsed is Wall.RIGHT:
        return (2 * (left + width) - x, y)
    elif parsed is Wall.LEFT:
        return (2 * left - x, y)

    logger.warning(f"Invalid wall tag {wall!r}, point left unreflected")
    return point


def reflect_wall_config(walls: WallConfig, wall: Any) -> WallConfig:
    """Mirror a wall configuration across one of its walls.

    Reflecting across TOP or BOTTOM swaps the top/bottom flags, reflecting
    across LEFT or RIGHT swaps left/right. The other pair is untouched.
    """
    parsed = Wall.parse(wall)
    if parsed is None:
        logger.warning(f"Invalid wall tag {wall!r}, wall configuration left unchanged")
        return walls

    if parsed.is_horizontal:
        return WallConfig(top=walls.bottom, right=walls.right,
                          bottom=walls.top, left=walls.left)
    return WallConfig(top=walls.top, right=walls.left,
                      bottom=walls.bottom, left=walls.right)


def reflect_cell(position: Point, wall: Any, room_size: Size) -> Point:
    """Map a grid-local cell to the local cell of its image behind a wall.

    The cell centre is reflected with reflect_point across the wall of a
    room placed at the origin, then re-expressed in the local frame of the
    neighbouring room. For a 4x4 room, cell (1, 1) reflected across TOP
    lands on (1, 2), i.e. y' = height - y - 1.
    """
    parsed = Wall.parse(wall)
    if parsed is None:
        logger.warning(f"Invalid wall tag {wall!r}, cell left unreflected")
        return position

    width, height = room_size
    center = (position[0] + 0.5, position[1] + 0.5)
    mirrored = reflect_point(center, parsed, (0.0, 0.0), room_size)
    dx, dy = parsed.step
    return (mirrored[0] - dx * width - 0.5, mirrored[1] - dy * height - 0.5)
