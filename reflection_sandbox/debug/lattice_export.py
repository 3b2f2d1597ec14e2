"""
Lattice export utilities for room tree debugging.

Provides export functions to inspect a built room tree in:
- ASCII format, one character per lattice cell, for quick terminal checks
- DOT format (Graphviz) for the parent/child reflection tree
- JSON format for programmatic analysis
"""

import json
from typing import Any, Dict, Iterable, Optional

import numpy as np

from ..layout.room_types import Room


def export_lattice_ascii(rooms: Iterable[Room], empty: str = '.') -> str:
    """Render the lattice as a character grid.

    Each cell shows the reflection order of the room occupying it ('0' is
    the real room, orders above 9 are shown as '+'). Rows run top to
    bottom with y growing downward.

    Args:
        rooms: Rooms to render
        empty: Character for cells without a room

    Returns:
        Multi-line string, empty for an empty room list
    """
    rooms = list(rooms)
    if not rooms:
        return ""

    xs = [room.position.x for room in rooms]
    ys = [room.position.y for room in rooms]
    min_x, min_y = min(xs), min(ys)
    grid = np.full((max(ys) - min_y + 1, max(xs) - min_x + 1), empty, dtype='<U1')

    for room in rooms:
        order = room.reflection_order
        grid[room.position.y - min_y, room.position.x - min_x] = str(order) if order < 10 else '+'

    return '\n'.join(''.join(row) for row in grid)


def export_tree_dot(rooms: Iterable[Room]) -> str:
    """Export the room tree as Graphviz DOT format.

    Nodes are rooms labelled with their order and lattice position; edges
    run from parent to child labelled with the reflection wall.
    """
    lines = ['digraph RoomTree {']
    lines.append('  rankdir=TB;')
    lines.append('  node [shape=box, style=filled];')
    lines.append('')

    # Color by reflection order
    colors = ['#90EE90', '#87CEEB', '#FFD700', '#FFB6C1', '#DDA0DD']

    rooms = list(rooms)
    for room in rooms:
        label = '\\n'.join([
            room.id,
            f"order: {room.reflection_order}",
            f"pos: ({room.position.x}, {room.position.y})",
        ])
        color = colors[room.reflection_order] if room.reflection_order < len(colors) else '#D3D3D3'
        lines.append(f'  "{room.id}" [label="{label}" fillcolor="{color}"];')

    lines.append('')

    for room in rooms:
        if room.parent_id is not None and room.reflection_wall is not None:
            lines.append(f'  "{room.parent_id}" -> "{room.id}" [label="{room.reflection_wall.value}"];')

    lines.append('}')
    return '\n'.join(lines)


def export_tree_json(rooms: Iterable[Room], max_order: Optional[int] = None) -> str:
    """Export the room tree as JSON with summary statistics."""
    rooms = list(rooms)

    by_order: Dict[int, int] = {}
    for room in rooms:
        by_order[room.reflection_order] = by_order.get(room.reflection_order, 0) + 1

    output: Dict[str, Any] = {
        'metadata': {
            'version': '1.0',
            'generator': 'reflection-sandbox',
            'max_order': max_order,
        },
        'statistics': {
            'room_count': len(rooms),
            'rooms_by_order': {str(k): v for k, v in sorted(by_order.items())},
        },
        'rooms': [room.to_dict() for room in rooms],
    }
    return json.dumps(output, indent=2)
