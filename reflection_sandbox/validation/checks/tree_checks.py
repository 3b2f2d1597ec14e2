"""
Room tree validation checks.

Validates the structural invariants of a built room tree:
- Reflection order range (TREE-001)
- Parent present (TREE-002) with order one lower (TREE-003)
- One room per grid cell (TREE-004)
- Walls mirrored from the parent (TREE-005)
- Room placed behind the parent's reflection wall (TREE-006)
- Single root (TREE-007)
"""

from typing import Dict, List, Optional

from ...geometry.reflection import reflect_wall_config
from ...layout.room_types import GridPos, Room
from ..core import ValidationIssue, ValidationResult, ValidationStage
from ..rules import ValidationRule, TREE_001, TREE_002, TREE_003, TREE_004, TREE_005, TREE_006, TREE_007


def _issue(rule: ValidationRule, room: Optional[Room], wall_name: Optional[str] = None,
           **kwargs) -> ValidationIssue:
    return ValidationIssue(
        severity=rule.severity,
        code=rule.code,
        message=rule.format_message(**kwargs),
        rule_reference=rule.rule_reference,
        remediation=rule.format_remediation(**kwargs),
        room=room.id if room else None,
        wall=wall_name,
    )


def _wall_names(room: Room) -> str:
    return "{" + ", ".join(w.value for w in room.walls.mirrored()) + "}"


def check_roots(rooms: List[Room]) -> List[ValidationIssue]:
    """TREE-007: exactly one order-0 room."""
    roots = [room for room in rooms if room.is_root]
    if len(roots) == 1:
        return []
    return [_issue(TREE_007, roots[1] if len(roots) > 1 else None, count=len(roots))]


def check_order_range(rooms: List[Room], max_order: int) -> List[ValidationIssue]:
    """TREE-001: every order within [0, max_order]."""
    return [
        _issue(TREE_001, room, order=room.reflection_order, max_order=max_order)
        for room in rooms
        if not 0 <= room.reflection_order <= max_order
    ]


def check_unique_positions(rooms: List[Room]) -> List[ValidationIssue]:
    """TREE-004: at most one room per lattice cell."""
    issues = []
    owners: Dict[GridPos, Room] = {}
    for room in rooms:
        other = owners.get(room.position)
        if other is not None:
            issues.append(_issue(TREE_004, room, x=room.position.x, y=room.position.y, other_id=other.id))
        else:
            owners[room.position] = room
    return issues


def check_parent_links(rooms: List[Room]) -> List[ValidationIssue]:
    """TREE-002, TREE-003, TREE-005, TREE-006: each virtual room against its parent."""
    issues = []
    by_id = {room.id: room for room in rooms}

    for room in rooms:
        if room.is_root:
            continue

        parent = by_id.get(room.parent_id) if room.parent_id else None
        wall = room.reflection_wall
        if parent is None or wall is None:
            issues.append(_issue(TREE_002, room, parent_id=room.parent_id, room_id=room.id))
            continue

        expected = room.reflection_order - 1
        if parent.reflection_order != expected:
            issues.append(_issue(
                TREE_003, room, wall_name=wall.value,
                parent_id=parent.id, parent_order=parent.reflection_order, expected=expected,
            ))

        mirrored = reflect_wall_config(parent.walls, wall)
        if room.walls != mirrored:
            issues.append(_issue(
                TREE_005, room, wall_name=wall.value,
                walls=_wall_names(room), parent_walls=_wall_names(parent), wall=wall.value,
            ))

        if parent.position.neighbor(wall) != room.position:
            issues.append(_issue(
                TREE_006, room, wall_name=wall.value,
                x=room.position.x, y=room.position.y, wall=wall.value, parent_id=parent.id,
            ))

    return issues


def validate_tree_structure(rooms: List[Room], max_order: int) -> ValidationResult:
    """Run every room tree check.

    Args:
        rooms: Retained rooms, root included
        max_order: Order the tree was built with

    Returns:
        ValidationResult at the TREE stage
    """
    result = ValidationResult(stage=ValidationStage.TREE)
    for issue in check_roots(rooms):
        result.add_issue(issue)
    for issue in check_order_range(rooms, max_order):
        result.add_issue(issue)
    for issue in check_unique_positions(rooms):
        result.add_issue(issue)
    for issue in check_parent_links(rooms):
        result.add_issue(issue)
    return result
