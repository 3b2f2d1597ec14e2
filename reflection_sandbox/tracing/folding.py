"""
Folding of an unfolded sight line back into the real room.

The sight line of a virtual object lives in virtual room coordinates. Walking
the object room's ancestry from leaf to root, each step mirrors the part of
the line lying in the folded room's band across the wall it was reflected
over. After the last step every point lies in the real room and the line has
become the physical zig-zag light path.

Fold progress is a pure function: fold_points(points, step, progress, size)
moves the affected points a fraction of the way toward their mirror images,
so an animation can sample it at any rate.

Types:
- FoldStep: One reflection to undo (room, parent, wall)
- FoldState: Snapshot of a PathFolder (step index + committed points)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..layout.room_tree import RoomTree
from ..layout.room_types import Point, Room, Wall
from .ray_path import RayPath

logger = logging.getLogger(__name__)

# Points within this distance of the folded room's band are folded with it
FOLD_EPSILON = 1e-6


@dataclass(frozen=True)
class FoldStep:
    """Undo the reflection that produced room_id from parent_id."""
    room_id: str
    parent_id: str
    wall: Wall
    parent_origin: Point

    @property
    def axis(self) -> int:
        """Coordinate index changed by this fold (0 = x, 1 = y)."""
        return 1 if self.wall.is_horizontal else 0

    def mirror_line(self, room_size: Tuple[float, float]) -> float:
        """Coordinate of the parent's wall line along the fold axis."""
        left, top = self.parent_origin
        width, height = room_size
        if self.wall is Wall.TOP:
            return top
        elif self.wall is Wall.BOTTOM:
            return top + height
        elif self.wall is Wall.LEFT:
            return left
        return left + width

    def band(self, room_size: Tuple[float, float]) -> Tuple[float, float]:
        """Extent of the folded room along the fold axis."""
        extent = room_size[self.axis]
        line = self.mirror_line(room_size)
        if self.wall in (Wall.TOP, Wall.LEFT):
            return (line - extent, line)
        return (line, line + extent)

    def to_dict(self) -> Dict[str, Any]:
        return {'room_id': self.room_id, 'parent_id': self.parent_id, 'wall': self.wall.value}


@dataclass(frozen=True, eq=False)
class FoldState:
    step_index: int
    points: np.ndarray

    def to_dict(self) -> Dict[str, Any]:
        return {
            'step_index': self.step_index,
            'points': [{'x': float(x), 'y': float(y)} for x, y in self.points],
        }


def fold_points(points: np.ndarray, step: FoldStep, progress: float,
                room_size: Tuple[float, float]) -> np.ndarray:
    """Move the points of the folded room toward their mirror images.

    Args:
        points: (n, 2) array of global points
        step: Reflection to undo
        progress: Fraction of the fold, clipped to [0, 1]
        room_size: (width, height) shared by every room

    Returns:
        New (n, 2) array. Points outside the folded room's band are copied
        unchanged. At progress 1 the affected coordinates equal the
        reflect_point images exactly.
    """
    result = np.array(points, dtype=float, copy=True).reshape(-1, 2)
    progress = float(np.clip(progress, 0.0, 1.0))
    if progress == 0.0 or len(result) == 0:
        return result

    axis = step.axis
    low, high = step.band(room_size)
    coords = result[:, axis]
    mask = (coords >= low - FOLD_EPSILON) & (coords <= high + FOLD_EPSILON)

    target = 2 * step.mirror_line(room_size) - coords
    if progress >= 1.0:
        moved = target
    else:
        moved = coords + (target - coords) * progress
    result[:, axis] = np.where(mask, moved, coords)
    return result


def build_fold_steps(tree: RoomTree, room: Room) -> Tuple[List[FoldStep], bool]:
    """Fold steps of a room's ancestry, leaf to root.

    Returns:
        (steps, complete). A broken parent link truncates the list at the
        last resolvable step and sets complete to False.
    """
    steps: List[FoldStep] = []
    current = room
    while not current.is_root:
        parent = tree.get(current.parent_id) if current.parent_id else None
        if parent is None or current.reflection_wall is None:
            logger.warning(
                f"Fold chain of {room.id} broken at {current.id} "
                f"(parent {current.parent_id}), folding {len(steps)} step(s) only"
            )
            return steps, False
        steps.append(FoldStep(current.id, parent.id, current.reflection_wall, parent.origin))
        current = parent
    return steps, True


class PathFolder:
    """Stepwise folding of one ray path.

    Example:
        folder = PathFolder(path, tree)
        halfway = folder.preview(0.5)
        folder.step()
        final = folder.fold_fully()
    """

    def __init__(self, ray_path: RayPath, tree: RoomTree):
        self.ray_path = ray_path
        self.room_size = tree.root.size

        source = tree.get(ray_path.source_room_id)
        if source is None:
            logger.warning(f"Source room {ray_path.source_room_id} not in tree, nothing to fold")
            self.steps: List[FoldStep] = []
            self.chain_complete = False
        else:
            self.steps, self.chain_complete = build_fold_steps(tree, source)

        self._initial = np.array(ray_path.points, dtype=float).reshape(-1, 2)
        self._points = self._initial.copy()
        self._index = 0

    @property
    def step_index(self) -> int:
        return self._index

    @property
    def points(self) -> np.ndarray:
        return self._points.copy()

    @property
    def state(self) -> FoldState:
        return FoldState(self._index, self._points.copy())

    @property
    def is_complete(self) -> bool:
        return self._index >= len(self.steps)

    @property
    def active_step(self) -> Optional[FoldStep]:
        if self.is_complete:
            return None
        return self.steps[self._index]

    @property
    def active_room(self) -> Optional[str]:
        """Id of the room the next fold collapses, None once complete."""
        step = self.active_step
        return step.room_id if step else None

    def preview(self, progress: float) -> np.ndarray:
        """Points with the next fold applied partially; does not commit."""
        step = self.active_step
        if step is None:
            return self._points.copy()
        return fold_points(self._points, step, progress, self.room_size)

    def step(self, progress: float = 1.0) -> np.ndarray:
        """Apply the next fold. The fold is committed only at progress >= 1."""
        if self.is_complete:
            logger.debug("Fold already complete")
            return self._points.copy()

        folded = self.preview(progress)
        if progress >= 1.0:
            logger.debug(f"Folded {self.steps[self._index].room_id} onto {self.steps[self._index].parent_id}")
            self._points = folded
            self._index += 1
        return folded.copy()

    def fold_fully(self) -> np.ndarray:
        """Apply every remaining fold."""
        while not self.is_complete:
            self.step()
        return self._points.copy()

    def reset(self):
        """Return to the unfolded line."""
        self._points = self._initial.copy()
        self._index = 0
