"""
Validation rule definitions.

Each rule has:
- Code: Unique identifier (e.g., "TREE-001")
- Severity: FAIL, WARN, or INFO
- Rule reference: The invariant the rule enforces
- Message template: Human-readable description
- Remediation: Suggested fix

Rules are organized by category:
- TREE: Room tree structure
- RAY: Sight line segmentation
"""

from dataclasses import dataclass
from typing import List, Optional

from .core import Severity


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule.

    Attributes:
        code: Unique rule code (e.g., "TREE-001")
        severity: Default severity for this rule
        rule_reference: Invariant the rule enforces
        message_template: Template for error message (use {placeholders})
        remediation_template: Template for suggested fix
        description: Full description of the rule
    """
    code: str
    severity: Severity
    rule_reference: str
    message_template: str
    remediation_template: Optional[str] = None
    description: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        """Format the message template with provided values."""
        return self.message_template.format(**kwargs)

    def format_remediation(self, **kwargs) -> Optional[str]:
        """Format the remediation template with provided values."""
        if self.remediation_template:
            return self.remediation_template.format(**kwargs)
        return None


# =============================================================================
# ROOM TREE RULES (TREE)
# =============================================================================

TREE_001 = ValidationRule(
    code="TREE-001",
    severity=Severity.FAIL,
    rule_reference="Room order - 0 <= reflection_order <= max_order",
    message_template="Reflection order {order} outside [0, {max_order}]",
    remediation_template="Rebuild the tree with max_order={max_order}",
    description="Every room's reflection order must lie within the requested range"
)

TREE_002 = ValidationRule(
    code="TREE-002",
    severity=Severity.FAIL,
    rule_reference="Room ancestry - every virtual room has a parent in the tree",
    message_template="Parent {parent_id} not found",
    remediation_template="Evict the subtree of {room_id} together with its parent",
    description="A virtual room's parent must be a retained room"
)

TREE_003 = ValidationRule(
    code="TREE-003",
    severity=Severity.FAIL,
    rule_reference="Room ancestry - parent order is child order minus one",
    message_template="Parent {parent_id} has order {parent_order}, expected {expected}",
    description="Each reflection adds exactly one to the order"
)

TREE_004 = ValidationRule(
    code="TREE-004",
    severity=Severity.FAIL,
    rule_reference="Room lattice - one room per grid cell",
    message_template="Cell ({x}, {y}) also owned by {other_id}",
    remediation_template="Keep only the lowest-order room at ({x}, {y})",
    description="Rooms reached by different reflection sequences must be deduplicated"
)

TREE_005 = ValidationRule(
    code="TREE-005",
    severity=Severity.FAIL,
    rule_reference="Room walls - child walls are parent walls mirrored across the reflection wall",
    message_template="Walls {walls} do not mirror parent walls {parent_walls} across {wall}",
    description="A virtual room swaps the wall pair along its reflection axis"
)

TREE_006 = ValidationRule(
    code="TREE-006",
    severity=Severity.FAIL,
    rule_reference="Room lattice - a child sits one step from its parent through the reflection wall",
    message_template="Position ({x}, {y}) is not behind the {wall} wall of {parent_id}",
    description="A virtual room lies directly behind the wall it was mirrored across"
)

TREE_007 = ValidationRule(
    code="TREE-007",
    severity=Severity.FAIL,
    rule_reference="Room tree - exactly one order-0 room",
    message_template="Found {count} root room(s)",
    remediation_template="Build the tree from a single real room",
    description="The tree is rooted at the single real room"
)

# =============================================================================
# SIGHT LINE RULES (RAY)
# =============================================================================

RAY_001 = ValidationRule(
    code="RAY-001",
    severity=Severity.FAIL,
    rule_reference="Segments - pairwise non-overlapping",
    message_template="Segment [{t0:.4f}, {t1:.4f}] overlaps previous segment ending at {prev_t1:.4f}",
    description="Each point of the line belongs to at most one room"
)

RAY_002 = ValidationRule(
    code="RAY-002",
    severity=Severity.WARN,
    rule_reference="Segments - cover [0, 1]",
    message_template="Gap [{t0:.4f}, {t1:.4f}] not covered by any segment",
    remediation_template="Fill gaps with cover_with_outside",
    description="Segments should partition the whole line"
)

RAY_003 = ValidationRule(
    code="RAY-003",
    severity=Severity.FAIL,
    rule_reference="Segments - sorted by t0",
    message_template="Segment starting at {t0:.4f} follows one starting at {prev_t0:.4f}",
    description="Segments are reported in travel order"
)


# =============================================================================
# RULE REGISTRY
# =============================================================================

ALL_RULES = {
    # Room tree
    'TREE-001': TREE_001,
    'TREE-002': TREE_002,
    'TREE-003': TREE_003,
    'TREE-004': TREE_004,
    'TREE-005': TREE_005,
    'TREE-006': TREE_006,
    'TREE-007': TREE_007,
    # Sight line
    'RAY-001': RAY_001,
    'RAY-002': RAY_002,
    'RAY-003': RAY_003,
}


def get_rule(code: str) -> Optional[ValidationRule]:
    """Get a rule by its code.

    Args:
        code: Rule code (e.g., "TREE-001")

    Returns:
        ValidationRule if found, None otherwise
    """
    return ALL_RULES.get(code)


def get_rules_by_category(prefix: str) -> List[ValidationRule]:
    """Get all rules with a given prefix ("TREE", "RAY")."""
    return [rule for code, rule in ALL_RULES.items() if code.startswith(prefix)]
