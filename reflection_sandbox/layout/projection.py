"""
Projection of real objects into virtual rooms.

A virtual room's image of an object is obtained by replaying the room's
reflection sequence, root to leaf, on the object's grid-local cell. Every
room in the lattice has the root's size, so each reflection is a pure cell
flip along one axis.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..errors import BrokenAncestryError
from ..geometry.reflection import reflect_cell
from .room_tree import RoomTree
from .room_types import PlacedObject, Room

logger = logging.getLogger(__name__)


def virtual_object_id(object_id: str, room_id: str) -> str:
    return f"virtual-{object_id}-in-{room_id}"


class ObjectProjector:
    """Creates virtual copies of real objects in every virtual room.

    rooms may hold the virtual rooms only when root is passed separately;
    the root is then added to the lookup so ancestry chains resolve.
    """

    def __init__(self, rooms: Iterable[Room], root: Optional[Room] = None):
        rooms = list(rooms)
        if root is not None and all(room.id != root.id for room in rooms):
            rooms.insert(0, root)
        self.tree = RoomTree(rooms)
        self.root = root if root is not None else self.tree.root
        self.skipped_rooms: List[str] = []

    def project(self, real_objects: Iterable[PlacedObject]) -> List[PlacedObject]:
        """Project real objects into each room of order >= 1.

        Args:
            real_objects: Objects in grid-local coordinates of the root.
                Objects already flagged virtual are ignored.

        Returns:
            One virtual object per (real object, virtual room), grouped by
            object in room order
        """
        self.skipped_rooms = []
        objects = list(real_objects)
        real = [obj for obj in objects if not obj.is_virtual]
        if len(real) < len(objects):
            logger.debug(f"Ignoring {len(objects) - len(real)} virtual input object(s)")

        # Reflection sequences are shared by every object, resolve them once
        sequences = []
        for room in self.tree.virtual_rooms:
            try:
                walls = self.tree.reflection_walls(room)
            except BrokenAncestryError as e:
                logger.warning(f"Skipping projection into {room.id}: {e}")
                self.skipped_rooms.append(room.id)
                continue
            sequences.append((room, walls))

        room_size = self.root.size
        projected: List[PlacedObject] = []
        for obj in real:
            for room, walls in sequences:
                position = obj.position
                for wall in walls:
                    position = reflect_cell(position, wall, room_size)
                projected.append(PlacedObject(
                    id=virtual_object_id(obj.id, room.id),
                    position=position,
                    is_virtual=True,
                    room_id=room.id,
                ))

        logger.debug(f"Projected {len(real)} object(s) into {len(sequences)} virtual room(s)")
        return projected


def project_objects(real_objects: Iterable[PlacedObject], rooms: Iterable[Room],
                    root: Optional[Room] = None) -> List[PlacedObject]:
    """Convenience wrapper around ObjectProjector.project."""
    return ObjectProjector(rooms, root).project(real_objects)
