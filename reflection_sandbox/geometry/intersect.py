"""
Sight line / room intersection using the parametric slab method.

A sight line is parametrised as start + t * (end - start), t in [0, 1].
For each room the x and y slabs give an entry/exit interval; the room's
interval is their overlap. Virtual rooms of different orders can cover the
same stretch of line (when rooms were not deduplicated, or along shared
walls), so the raw intervals are resolved into a partition where every
sub-range belongs to the lowest-order room covering it.

Types:
- RoomSegment: Parametric interval [t0, t1] of the line inside one room
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ..layout.room_types import Point, Room

logger = logging.getLogger(__name__)

# Tolerance for comparing parametric values
EPSILON = 1e-4

# Room id of synthetic segments covering parts of the line outside all rooms
OUTSIDE_ROOM_ID = "outside"


@dataclass(frozen=True)
class RoomSegment:
    """Portion of a sight line inside a room."""
    t0: float
    t1: float
    room_id: str

    @property
    def length(self) -> float:
        return self.t1 - self.t0

    @property
    def is_outside(self) -> bool:
        return self.room_id == OUTSIDE_ROOM_ID

    @property
    def midpoint(self) -> float:
        return (self.t0 + self.t1) / 2

    def point_at(self, start: Point, end: Point, t: float) -> Point:
        """Evaluate the line at parameter t."""
        return (start[0] + (end[0] - start[0]) * t, start[1] + (end[1] - start[1]) * t)


# =============================================================================
# Slab test
# =============================================================================

def _axis_interval(origin: float, delta: float, low: float, high: float) -> Tuple[float, float]:
    """Parametric interval during which one coordinate stays inside [low, high].

    A zero direction component does not constrain the line when the origin
    lies within the slab; otherwise the line never enters it (empty interval).
    """
    if delta == 0:
        if low <= origin <= high:
            return (-math.inf, math.inf)
        return (math.inf, -math.inf)
    t_low = (low - origin) / delta
    t_high = (high - origin) / delta
    if t_low > t_high:
        t_low, t_high = t_high, t_low
    return (t_low, t_high)


def slab_interval(start: Point, end: Point, room: Room) -> Tuple[float, float]:
    """Unclamped (t_enter, t_exit) of the infinite line through a room's box."""
    left, top, right, bottom = room.bounds
    tx0, tx1 = _axis_interval(start[0], end[0] - start[0], left, right)
    ty0, ty1 = _axis_interval(start[1], end[1] - start[1], top, bottom)
    return (max(tx0, ty0), min(tx1, ty1))


def raw_segments(start: Point, end: Point, rooms: Iterable[Room]) -> List[Tuple[RoomSegment, int]]:
    """Clamped intervals of every room the segment touches, with room orders.

    Sorted by t0, then reflection order, then room id.
    """
    found: List[Tuple[RoomSegment, int]] = []
    for room in rooms:
        t_enter, t_exit = slab_interval(start, end, room)
        if t_enter < t_exit and t_exit > 0 and t_enter < 1:
            segment = RoomSegment(max(t_enter, 0.0), min(t_exit, 1.0), room.id)
            found.append((segment, room.reflection_order))
    found.sort(key=lambda item: (item[0].t0, item[1], item[0].room_id))
    return found


# =============================================================================
# Overlap resolution
# =============================================================================

def _snap_breakpoints(values: List[float]) -> Dict[float, float]:
    """Cluster parametric values closer than EPSILON onto one representative.

    Clusters containing 0 or 1 snap to the line's endpoints.
    """
    ordered = sorted(set(values))
    mapping: Dict[float, float] = {}
    cluster: List[float] = []

    def flush():
        if not cluster:
            return
        if 0.0 in cluster:
            rep = 0.0
        elif 1.0 in cluster:
            rep = 1.0
        else:
            rep = cluster[0]
        for value in cluster:
            mapping[value] = rep
        cluster.clear()

    for value in ordered:
        if cluster and value - cluster[-1] > EPSILON:
            flush()
        cluster.append(value)
    flush()
    return mapping


def resolve_overlaps(candidates: List[Tuple[RoomSegment, int]]) -> List[RoomSegment]:
    """Partition the covered part of [0, 1] so each sub-range has one owner.

    The owner of a sub-range is the covering room with the lowest
    (reflection order, id). Adjacent sub-ranges with the same owner are
    merged and sub-ranges shorter than EPSILON are dropped.
    """
    if not candidates:
        return []

    values = [0.0, 1.0]
    for segment, _ in candidates:
        values.extend((segment.t0, segment.t1))
    snap = _snap_breakpoints(values)

    snapped = [
        (snap[segment.t0], snap[segment.t1], order, segment.room_id)
        for segment, order in candidates
    ]
    breakpoints = sorted(set(snap.values()))

    resolved: List[RoomSegment] = []
    for a, b in zip(breakpoints, breakpoints[1:]):
        if b - a <= EPSILON:
            continue
        covering = [(order, room_id) for t0, t1, order, room_id in snapped if t0 <= a and t1 >= b]
        if not covering:
            continue
        _, owner = min(covering)
        if resolved and resolved[-1].room_id == owner and resolved[-1].t1 == a:
            resolved[-1] = RoomSegment(resolved[-1].t0, b, owner)
        else:
            resolved.append(RoomSegment(a, b, owner))
    return resolved


def intersect_rooms(start: Point, end: Point, rooms: Iterable[Room]) -> List[RoomSegment]:
    """Find the rooms a sight line traverses.

    Args:
        start: Line start (global coordinates), usually a virtual object
        end: Line end (global coordinates), usually the observer
        rooms: Candidate rooms

    Returns:
        Segments sorted by t0 and pairwise non-overlapping. Parts of the
        line outside every room are not covered; see cover_with_outside.
    """
    candidates = raw_segments(start, end, rooms)
    segments = resolve_overlaps(candidates)
    logger.debug(
        f"Line {start} -> {end}: {len(candidates)} raw intervals, {len(segments)} segments"
    )
    return segments


def cover_with_outside(segments: List[RoomSegment]) -> List[RoomSegment]:
    """Fill leading, interior and trailing gaps with "outside" segments.

    The result covers [0, 1] exactly once. An empty input yields a single
    outside segment.
    """
    covered: List[RoomSegment] = []
    cursor = 0.0
    for segment in sorted(segments, key=lambda s: s.t0):
        if segment.t0 - cursor > EPSILON:
            covered.append(RoomSegment(cursor, segment.t0, OUTSIDE_ROOM_ID))
        covered.append(segment)
        cursor = max(cursor, segment.t1)
    if 1.0 - cursor > EPSILON:
        covered.append(RoomSegment(cursor, 1.0, OUTSIDE_ROOM_ID))
    return covered
