"""
Data model for the mirror-room lattice.

Defines the core data structures shared by every engine component:
- Wall: Side of a room (TOP, RIGHT, BOTTOM, LEFT)
- GridPos: Integer room position in the lattice (x, y)
- WallConfig: Which of the four walls are mirrors
- Room: The real room or one of its virtual images
- PlacedObject: A real object or one of its virtual copies
- WallRef: A (room, wall) pair used as a key for reflection bookkeeping

Coordinate System:
- Room positions are lattice indices; +x is right, +y is DOWN (screen space)
- A room at position (px, py) covers the global box
  [px * width, (px + 1) * width] x [py * height, (py + 1) * height]
- Object positions are grid-local cell indices; cell (x, y) has its centre
  at origin + (x + 0.5, y + 0.5) in global coordinates

All types are immutable. Components never edit a structure produced by an
earlier component, they build a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# Global (float) point in lattice units
Point = Tuple[float, float]

ROOT_ROOM_ID = "original"


class Wall(Enum):
    """Side of a rectangular room."""
    TOP = "top"        # -Y direction
    RIGHT = "right"    # +X direction
    BOTTOM = "bottom"  # +Y direction
    LEFT = "left"      # -X direction

    def opposite(self) -> 'Wall':
        """Return the wall on the other side of the room."""
        opposites = {
            Wall.TOP: Wall.BOTTOM,
            Wall.BOTTOM: Wall.TOP,
            Wall.RIGHT: Wall.LEFT,
            Wall.LEFT: Wall.RIGHT,
        }
        return opposites[self]

    @property
    def is_horizontal(self) -> bool:
        """True for TOP/BOTTOM, whose reflection flips the y axis."""
        return self in (Wall.TOP, Wall.BOTTOM)

    @property
    def step(self) -> Tuple[int, int]:
        """Unit lattice offset of the room lying behind this wall."""
        offsets = {
            Wall.TOP: (0, -1),
            Wall.RIGHT: (1, 0),
            Wall.BOTTOM: (0, 1),
            Wall.LEFT: (-1, 0),
        }
        return offsets[self]

    @staticmethod
    def parse(value: Any) -> Optional['Wall']:
        """Coerce a wall tag ("top", Wall.TOP, ...) to a Wall, or None if unknown."""
        if isinstance(value, Wall):
            return value
        try:
            return Wall(str(value).lower())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


# Expansion order used by the tree builder and by every per-wall loop
WALL_ORDER: Tuple[Wall, ...] = (Wall.TOP, Wall.RIGHT, Wall.BOTTOM, Wall.LEFT)


@dataclass(frozen=True)
class GridPos:
    """Lattice position of a room."""
    x: int
    y: int

    def __add__(self, other: 'GridPos') -> 'GridPos':
        return GridPos(self.x + other.x, self.y + other.y)

    def neighbor(self, wall: Wall) -> 'GridPos':
        """Get the lattice position on the other side of the given wall."""
        dx, dy = wall.step
        return GridPos(self.x + dx, self.y + dy)

    def wall_towards(self, other: 'GridPos') -> Optional[Wall]:
        """Return the wall shared with an edge-adjacent position, else None."""
        for wall in WALL_ORDER:
            if self.neighbor(wall) == other:
                return wall
        return None

    def to_dict(self) -> Dict[str, int]:
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class WallConfig:
    """Mirror flags for the four walls of a room."""
    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    def __getitem__(self, wall: Wall) -> bool:
        return getattr(self, wall.value)

    def with_wall(self, wall: Wall, mirrored: bool) -> 'WallConfig':
        """Return a copy with one wall switched on or off."""
        return replace(self, **{wall.value: mirrored})

    def mirrored(self) -> List[Wall]:
        """Walls that are mirrors, in expansion order."""
        return [wall for wall in WALL_ORDER if self[wall]]

    def to_dict(self) -> Dict[str, bool]:
        return {wall.value: self[wall] for wall in WALL_ORDER}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'WallConfig':
        """Create from a {top, right, bottom, left} mapping; missing keys are plain walls."""
        return WallConfig(
            top=bool(data.get('top', False)),
            right=bool(data.get('right', False)),
            bottom=bool(data.get('bottom', False)),
            left=bool(data.get('left', False)),
        )


@dataclass(frozen=True)
class WallRef:
    """A specific wall of a specific room."""
    room_id: str
    wall: Wall

    def __str__(self) -> str:
        return f"{self.room_id}:{self.wall.value}"


@dataclass(frozen=True)
class Room:
    """The real room (order 0) or a mirror image of it.

    Attributes:
        id: Ancestry-encoded identifier, e.g. "original-top-1-right-2"
        width: Width in grid cells
        height: Height in grid cells
        walls: Mirror flags, already swapped for virtual rooms
        position: Lattice position
        reflection_order: Number of reflections separating it from the real room
        reflection_wall: Wall of the parent this room was mirrored across
        parent_id: Id of the parent room (None for the real room)
    """
    id: str
    width: int
    height: int
    walls: WallConfig
    position: GridPos = GridPos(0, 0)
    reflection_order: int = 0
    reflection_wall: Optional[Wall] = None
    parent_id: Optional[str] = None

    @staticmethod
    def create_root(width: int, height: int, walls: WallConfig,
                    room_id: str = ROOT_ROOM_ID) -> 'Room':
        """Factory for the real (order-0) room at the lattice origin."""
        return Room(id=room_id, width=width, height=height, walls=walls)

    @property
    def is_root(self) -> bool:
        return self.reflection_order == 0

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def origin(self) -> Point:
        """Global coordinates of the top-left corner."""
        return (float(self.position.x * self.width), float(self.position.y * self.height))

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Global bounds as (left, top, right, bottom)."""
        left, top = self.origin
        return (left, top, left + self.width, top + self.height)

    def contains_point(self, point: Point, tolerance: float = 0.0) -> bool:
        """Check if a global point lies inside (or on the boundary of) this room."""
        left, top, right, bottom = self.bounds
        x, y = point
        return (left - tolerance <= x <= right + tolerance and
                top - tolerance <= y <= bottom + tolerance)

    def cell_center(self, local: Point) -> Point:
        """Convert a grid-local cell position to the global cell centre."""
        left, top = self.origin
        return (left + local[0] + 0.5, top + local[1] + 0.5)

    def to_local(self, point: Point) -> Point:
        """Inverse of cell_center."""
        left, top = self.origin
        return (point[0] - left - 0.5, point[1] - top - 0.5)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the presentation layer."""
        return {
            'id': self.id,
            'width': self.width,
            'height': self.height,
            'walls': self.walls.to_dict(),
            'position': self.position.to_dict(),
            'reflection_order': self.reflection_order,
            'reflection_wall': self.reflection_wall.value if self.reflection_wall else None,
            'parent_id': self.parent_id,
        }


@dataclass(frozen=True)
class PlacedObject:
    """An object in grid-local coordinates of its room."""
    id: str
    position: Point
    is_virtual: bool = False
    room_id: str = ROOT_ROOM_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'position': {'x': self.position[0], 'y': self.position[1]},
            'is_virtual': self.is_virtual,
            'room_id': self.room_id,
        }
