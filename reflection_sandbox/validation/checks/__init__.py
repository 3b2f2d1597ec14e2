"""
Validation check modules.

Each module provides specific validation checks:
- tree_checks: Room tree structure (orders, parents, walls, lattice cells)
- ray_checks: Sight line segment ordering, overlap and coverage
"""

from .tree_checks import (
    validate_tree_structure,
    check_roots,
    check_order_range,
    check_unique_positions,
    check_parent_links,
)

from .ray_checks import (
    validate_segment_partition,
    check_segments_sorted,
    check_segment_overlap,
    check_segment_coverage,
)

__all__ = [
    # Tree
    'validate_tree_structure',
    'check_roots',
    'check_order_range',
    'check_unique_positions',
    'check_parent_links',
    # Ray
    'validate_segment_partition',
    'check_segments_sorted',
    'check_segment_overlap',
    'check_segment_coverage',
]
