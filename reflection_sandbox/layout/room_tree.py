"""
Virtual room tree construction for a mirrored room.

Starting from the real room, every mirrored wall produces a virtual room one
lattice step away, whose own mirrors produce further rooms, up to a maximum
reflection order. Different reflection sequences can reach the same lattice
cell; only the lowest-order image of a cell is physically meaningful, so the
builder keeps exactly one room per cell:

- A candidate whose cell already belongs to a room of equal or lower order
  is discarded.
- A candidate of strictly lower order evicts the owner together with its
  whole subtree, then takes the cell and keeps expanding.

The tree is held as an arena of rooms keyed by id plus a position index.
Eviction removes ids from both; there are no parent/child object references.

RoomTree wraps a finished room list with the lookups the other components
need (by id, by cell, ancestry chain).
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Deque, Dict, Iterable, List, Optional, Set

from ..errors import BrokenAncestryError
from ..geometry.reflection import reflect_wall_config
from .room_types import GridPos, Room, Wall, WALL_ORDER

logger = logging.getLogger(__name__)

# Orders above this make the lattice large enough to be slow to trace;
# the builder accepts them but logs a warning.
MAX_PRACTICAL_ORDER = 5


class ExpansionOrder(Enum):
    """Traversal used when growing the tree."""
    BREADTH = "breadth"  # Order by order; evictions never occur
    DEPTH = "depth"      # Recursive wall-by-wall descent; relies on eviction


def generate_room_id(parent_id: str, wall: Wall, reflection_order: int) -> str:
    """Build the ancestry-encoded id of a virtual room."""
    return f"{parent_id}-{wall.value}-{reflection_order}"


def create_virtual_room(source: Room, wall: Wall) -> Room:
    """Create the image of a room mirrored across one of its walls."""
    order = source.reflection_order + 1
    return Room(
        id=generate_room_id(source.id, wall, order),
        width=source.width,
        height=source.height,
        walls=reflect_wall_config(source.walls, wall),
        position=source.position.neighbor(wall),
        reflection_order=order,
        reflection_wall=wall,
        parent_id=source.id,
    )


class RoomTree:
    """Read-only lookups over a built list of rooms."""

    def __init__(self, rooms: Iterable[Room]):
        self._rooms: List[Room] = list(rooms)
        self._by_id: Dict[str, Room] = {room.id: room for room in self._rooms}
        self._by_position: Dict[GridPos, Room] = {}
        for room in self._rooms:
            current = self._by_position.get(room.position)
            if current is None or room.reflection_order < current.reflection_order:
                self._by_position[room.position] = room

        roots = [room for room in self._rooms if room.is_root]
        self._root: Optional[Room] = roots[0] if roots else None

    @property
    def rooms(self) -> List[Room]:
        return list(self._rooms)

    @property
    def root(self) -> Room:
        if self._root is None:
            raise BrokenAncestryError("<root>")
        return self._root

    @property
    def virtual_rooms(self) -> List[Room]:
        return [room for room in self._rooms if not room.is_root]

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self):
        return iter(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._by_id

    def get(self, room_id: str) -> Optional[Room]:
        return self._by_id.get(room_id)

    def room_at(self, position: GridPos) -> Optional[Room]:
        return self._by_position.get(position)

    def children(self, room_id: str) -> List[Room]:
        return [room for room in self._rooms if room.parent_id == room_id]

    def rooms_up_to(self, order: int) -> List[Room]:
        """Rooms with reflection order <= order."""
        return [room for room in self._rooms if room.reflection_order <= order]

    def ancestry(self, room: Room) -> List[Room]:
        """Return the chain from a room back to the root (leaf first, root last).

        Raises:
            BrokenAncestryError: If a parent link cannot be resolved
        """
        chain = [room]
        current = room
        while not current.is_root:
            if current.parent_id is None or current.reflection_wall is None:
                raise BrokenAncestryError(current.id)
            parent = self._by_id.get(current.parent_id)
            if parent is None:
                raise BrokenAncestryError(current.id, current.parent_id)
            chain.append(parent)
            current = parent
            if len(chain) > len(self._by_id) + 1:
                # Cyclic parent links
                raise BrokenAncestryError(room.id, current.parent_id)
        return chain

    def reflection_walls(self, room: Room) -> List[Wall]:
        """Walls reflected across to reach a room, in root-to-leaf order."""
        chain = self.ancestry(room)
        return [r.reflection_wall for r in reversed(chain) if r.reflection_wall is not None]


class RoomTreeBuilder:
    """Expands a real room into its bounded tree of virtual rooms.

    Example:
        builder = RoomTreeBuilder()
        rooms = builder.build(root, max_order=3)
    """

    def __init__(self, expansion: ExpansionOrder = ExpansionOrder.BREADTH):
        self.expansion = expansion
        self._rooms: Dict[str, Room] = {}
        self._children: Dict[str, List[str]] = {}
        self._by_position: Dict[GridPos, str] = {}
        self._pending: Deque[str] = deque()
        self._max_order = 0
        self.eviction_count = 0

    def build(self, root: Room, max_order: int) -> List[Room]:
        """Build the room tree.

        Args:
            root: The real room (must have reflection order 0)
            max_order: Highest reflection order to generate (0 = root only)

        Returns:
            Retained rooms sorted by reflection order, root first

        Raises:
            ValueError: If max_order is negative or root is not an order-0 room
        """
        if max_order < 0:
            raise ValueError(f"max_order must be >= 0, got {max_order}")
        if not root.is_root:
            raise ValueError(f"Root room {root.id} has reflection order {root.reflection_order}")
        if max_order > MAX_PRACTICAL_ORDER:
            logger.warning(f"Reflection order {max_order} exceeds practical limit {MAX_PRACTICAL_ORDER}")

        self._reset()
        self._max_order = max_order
        self._install(root)
        self._pending.append(root.id)

        while self._pending:
            if self.expansion == ExpansionOrder.DEPTH:
                room_id = self._pending.pop()
            else:
                room_id = self._pending.popleft()
            room = self._rooms.get(room_id)
            if room is None:
                # Evicted after it was queued
                continue
            self._expand(room)

        rooms = sorted(self._rooms.values(), key=lambda r: r.reflection_order)
        logger.info(
            "Generated %d virtual rooms up to order %d (%d evictions)",
            len(rooms) - 1, max_order, self.eviction_count,
        )
        return rooms

    def _reset(self):
        self._rooms.clear()
        self._children.clear()
        self._by_position.clear()
        self._pending.clear()
        self.eviction_count = 0

    def _install(self, room: Room):
        self._rooms[room.id] = room
        self._children[room.id] = []
        self._by_position[room.position] = room.id
        if room.parent_id is not None and room.parent_id in self._children:
            self._children[room.parent_id].append(room.id)

    def _expand(self, room: Room):
        """Create candidates for every mirrored wall of a room."""
        if room.reflection_order >= self._max_order:
            return

        # Depth-first pops the most recent entry, so push in reverse to
        # descend into walls in TOP, RIGHT, BOTTOM, LEFT order.
        accepted: List[str] = []
        for wall in WALL_ORDER:
            if not room.walls[wall]:
                continue
            candidate = create_virtual_room(room, wall)
            if self._offer(candidate):
                accepted.append(candidate.id)

        if self.expansion == ExpansionOrder.DEPTH:
            accepted.reverse()
        self._pending.extend(accepted)

    def _offer(self, candidate: Room) -> bool:
        """Apply the dominance rule to a candidate. Returns True if installed."""
        owner_id = self._by_position.get(candidate.position)
        owner = self._rooms.get(owner_id) if owner_id is not None else None

        if owner is not None:
            if owner.reflection_order <= candidate.reflection_order:
                logger.debug(
                    f"Cell ({candidate.position.x}, {candidate.position.y}) already owned by "
                    f"{owner.id} (order {owner.reflection_order}), skipping {candidate.id}"
                )
                return False
            logger.debug(f"{candidate.id} (order {candidate.reflection_order}) evicts {owner.id}")
            freed = self._evict(owner.id)
            self._install(candidate)
            self._requeue_neighbours(freed - {candidate.position})
            return True

        self._install(candidate)
        return True

    def _evict(self, room_id: str) -> Set[GridPos]:
        """Remove a room and its whole subtree. Returns the freed cells."""
        freed: Set[GridPos] = set()
        room = self._rooms.get(room_id)
        if room is None:
            return freed

        try:
            self._detach_from_parent(room)
        except BrokenAncestryError as e:
            logger.warning(f"Eviction of {room_id}: {e}; removing subtree anyway")

        stack = [room_id]
        while stack:
            current_id = stack.pop()
            current = self._rooms.pop(current_id, None)
            if current is None:
                continue
            stack.extend(self._children.pop(current_id, []))
            if self._by_position.get(current.position) == current_id:
                del self._by_position[current.position]
                freed.add(current.position)
            self.eviction_count += 1
        return freed

    def _detach_from_parent(self, room: Room):
        if room.parent_id is None:
            return
        siblings = self._children.get(room.parent_id)
        if siblings is None:
            raise BrokenAncestryError(room.id, room.parent_id)
        if room.id in siblings:
            siblings.remove(room.id)

    def _requeue_neighbours(self, freed: Set[GridPos]):
        """Re-expand retained rooms that could reclaim cells freed by an eviction."""
        for cell in sorted(freed, key=lambda p: (p.x, p.y)):
            for wall in WALL_ORDER:
                neighbour_id = self._by_position.get(cell.neighbor(wall))
                if neighbour_id is None:
                    continue
                neighbour = self._rooms[neighbour_id]
                # The neighbour reaches the freed cell through its opposite wall
                if neighbour.walls[wall.opposite()] and neighbour.reflection_order < self._max_order:
                    self._pending.append(neighbour_id)


def build_room_tree(root: Room, max_order: int,
                    expansion: ExpansionOrder = ExpansionOrder.BREADTH) -> List[Room]:
    """Convenience wrapper around RoomTreeBuilder.build."""
    return RoomTreeBuilder(expansion).build(root, max_order)
