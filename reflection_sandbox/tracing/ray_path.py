"""
Sight line tracing from virtual objects to the observer.

A straight line from a virtual object to the observer, drawn across the
lattice, is the unfolded image of a real zig-zag light path. Tracing splits
the line into per-room segments and records a reflection point wherever the
line passes from one room into the next: that boundary is the mirror the
real light bounces off.

Types:
- RaySegment: Part of the sight line inside one room (global coordinates)
- ReflectionPoint: Where the line crosses a wall, and which wall it is
- RayPath: The traced sight line with its segments and reflection points

A path is visible when the line stays inside the lattice, ends in the real
room, and every wall it crosses is a mirror.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..geometry.intersect import RoomSegment, cover_with_outside, intersect_rooms
from ..layout.room_tree import RoomTree
from ..layout.room_types import GridPos, PlacedObject, Point, Room, Wall, WallRef

logger = logging.getLogger(__name__)


def _point_dict(point: Point) -> Dict[str, float]:
    return {'x': point[0], 'y': point[1]}


@dataclass(frozen=True)
class RaySegment:
    start: Point
    end: Point
    room_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'start': _point_dict(self.start), 'end': _point_dict(self.end), 'room_id': self.room_id}


@dataclass(frozen=True)
class ReflectionPoint:
    """Crossing of the sight line through a wall of the room being entered."""
    point: Point
    room_id: str
    wall: Wall

    @property
    def wall_ref(self) -> WallRef:
        return WallRef(self.room_id, self.wall)

    def to_dict(self) -> Dict[str, Any]:
        return {'point': _point_dict(self.point), 'room_id': self.room_id, 'wall': self.wall.value}


@dataclass(frozen=True)
class RayPath:
    """A traced sight line.

    Attributes:
        points: Segment endpoints from the virtual object to the observer
        segments: Consecutive per-room pieces, covering the whole line
        reflection_points: Wall crossings in travel order
        visible: Whether the path corresponds to a real light path
        virtual_object_id: Object the line starts from
        source_room_id: Room containing that object
    """
    points: Tuple[Point, ...]
    segments: Tuple[RaySegment, ...]
    reflection_points: Tuple[ReflectionPoint, ...]
    visible: bool
    virtual_object_id: str
    source_room_id: str
    issues: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def room_ids(self) -> List[str]:
        """Rooms traversed, in order."""
        return [segment.room_id for segment in self.segments]

    @property
    def reflection_count(self) -> int:
        return len(self.reflection_points)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the presentation layer."""
        return {
            'virtual_object_id': self.virtual_object_id,
            'source_room_id': self.source_room_id,
            'visible': self.visible,
            'points': [_point_dict(p) for p in self.points],
            'segments': [s.to_dict() for s in self.segments],
            'reflection_points': [r.to_dict() for r in self.reflection_points],
        }


def crossing_walls(entered: GridPos, left: GridPos) -> List[Wall]:
    """Walls of the entered room facing the room just left.

    Edge-adjacent rooms share one wall. A line passing exactly through a
    lattice corner moves diagonally and crosses one wall per axis.
    """
    wall = entered.wall_towards(left)
    if wall is not None:
        return [wall]

    dx, dy = left.x - entered.x, left.y - entered.y
    if abs(dx) == 1 and abs(dy) == 1:
        return [Wall.RIGHT if dx > 0 else Wall.LEFT, Wall.BOTTOM if dy > 0 else Wall.TOP]
    return []


class SightLineTracer:
    """Traces sight lines from virtual objects to a fixed observer.

    Example:
        tracer = SightLineTracer(rooms, observer=(2, 3))
        path = tracer.trace(virtual_object)
    """

    def __init__(self, rooms: Iterable[Room], observer: Point):
        self.tree = RoomTree(rooms)
        self.observer = observer

    @property
    def observer_point(self) -> Point:
        """Observer position in global coordinates."""
        return self.tree.root.cell_center(self.observer)

    def trace(self, virtual_object: PlacedObject) -> Optional[RayPath]:
        """Trace the sight line from one object to the observer.

        Returns None when the object's room is not part of the tree.
        """
        source = self.tree.get(virtual_object.room_id)
        if source is None:
            logger.warning(f"Object {virtual_object.id} is in unknown room {virtual_object.room_id}")
            return None

        start = source.cell_center(virtual_object.position)
        end = self.observer_point
        covered = cover_with_outside(intersect_rooms(start, end, self.tree.rooms))

        segments = tuple(self._to_ray_segment(start, end, s) for s in covered)
        points = (start,) + tuple(segment.end for segment in segments)
        reflections, issues = self._reflection_points(segments)
        issues.extend(self._visibility_issues(segments, reflections))

        if issues:
            logger.debug(f"Path from {virtual_object.id} not visible: {'; '.join(issues)}")

        return RayPath(
            points=points,
            segments=segments,
            reflection_points=tuple(reflections),
            visible=not issues,
            virtual_object_id=virtual_object.id,
            source_room_id=source.id,
            issues=tuple(issues),
        )

    def trace_all(self, virtual_objects: Iterable[PlacedObject],
                  visible_only: bool = True) -> List[RayPath]:
        """Trace every object; by default keep only visible paths."""
        paths = []
        for obj in virtual_objects:
            path = self.trace(obj)
            if path is None:
                continue
            if visible_only and not path.visible:
                continue
            paths.append(path)
        logger.info(f"Traced {len(paths)} sight line(s)")
        return paths

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _to_ray_segment(start: Point, end: Point, segment: RoomSegment) -> RaySegment:
        return RaySegment(
            start=segment.point_at(start, end, segment.t0),
            end=segment.point_at(start, end, segment.t1),
            room_id=segment.room_id,
        )

    def _reflection_points(self, segments: Tuple[RaySegment, ...]) -> Tuple[List[ReflectionPoint], List[str]]:
        reflections: List[ReflectionPoint] = []
        issues: List[str] = []
        for previous, current in zip(segments, segments[1:]):
            if previous.room_id == current.room_id:
                continue
            left_room = self.tree.get(previous.room_id)
            entered = self.tree.get(current.room_id)
            if left_room is None or entered is None:
                # One side is outside the lattice
                continue
            walls = crossing_walls(entered.position, left_room.position)
            if not walls:
                issues.append(f"{previous.room_id} and {current.room_id} are not adjacent")
                continue
            for wall in walls:
                reflections.append(ReflectionPoint(current.start, entered.id, wall))
        return reflections, issues

    def _visibility_issues(self, segments: Tuple[RaySegment, ...],
                           reflections: List[ReflectionPoint]) -> List[str]:
        issues = []
        if any(self.tree.get(s.room_id) is None for s in segments):
            issues.append("line leaves the room lattice")
        if not segments or segments[-1].room_id != self.tree.root.id:
            issues.append("line does not end in the real room")
        for reflection in reflections:
            room = self.tree.get(reflection.room_id)
            if not room.walls[reflection.wall]:
                issues.append(f"{reflection.wall_ref} is not a mirror")
        return issues


def trace_sight_line(virtual_object: PlacedObject, observer: Point,
                     rooms: Iterable[Room]) -> Optional[RayPath]:
    """Convenience wrapper around SightLineTracer.trace."""
    return SightLineTracer(rooms, observer).trace(virtual_object)
