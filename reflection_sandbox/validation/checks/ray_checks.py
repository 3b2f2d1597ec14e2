"""
Sight line segmentation checks.

Validates the segments produced by the intersector:
- No overlap beyond tolerance (RAY-001)
- Full coverage of [0, 1] (RAY-002)
- Sorted by entry parameter (RAY-003)
"""

from typing import List

from ...geometry.intersect import EPSILON, RoomSegment
from ..core import ValidationIssue, ValidationResult, ValidationStage
from ..rules import RAY_001, RAY_002, RAY_003


def check_segments_sorted(segments: List[RoomSegment]) -> List[ValidationIssue]:
    """RAY-003: segments in non-decreasing t0 order."""
    issues = []
    for previous, current in zip(segments, segments[1:]):
        if current.t0 < previous.t0:
            issues.append(ValidationIssue(
                severity=RAY_003.severity,
                code=RAY_003.code,
                message=RAY_003.format_message(t0=current.t0, prev_t0=previous.t0),
                rule_reference=RAY_003.rule_reference,
                room=current.room_id,
            ))
    return issues


def check_segment_overlap(segments: List[RoomSegment], tolerance: float = EPSILON) -> List[ValidationIssue]:
    """RAY-001: consecutive segments (by t0) overlap by no more than tolerance."""
    issues = []
    ordered = sorted(segments, key=lambda s: s.t0)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.t1 - current.t0 > tolerance:
            issues.append(ValidationIssue(
                severity=RAY_001.severity,
                code=RAY_001.code,
                message=RAY_001.format_message(t0=current.t0, t1=current.t1, prev_t1=previous.t1),
                rule_reference=RAY_001.rule_reference,
                room=current.room_id,
            ))
    return issues


def check_segment_coverage(segments: List[RoomSegment], tolerance: float = EPSILON) -> List[ValidationIssue]:
    """RAY-002: no gap in [0, 1] longer than tolerance."""
    issues = []
    cursor = 0.0
    for segment in sorted(segments, key=lambda s: s.t0):
        if segment.t0 - cursor > tolerance:
            issues.append(_gap_issue(cursor, segment.t0))
        cursor = max(cursor, segment.t1)
    if 1.0 - cursor > tolerance:
        issues.append(_gap_issue(cursor, 1.0))
    return issues


def _gap_issue(t0: float, t1: float) -> ValidationIssue:
    return ValidationIssue(
        severity=RAY_002.severity,
        code=RAY_002.code,
        message=RAY_002.format_message(t0=t0, t1=t1),
        rule_reference=RAY_002.rule_reference,
        remediation=RAY_002.format_remediation(),
    )


def validate_segment_partition(segments: List[RoomSegment], require_coverage: bool = True) -> ValidationResult:
    """Run every segment check.

    Args:
        segments: Segments of one sight line
        require_coverage: Report gaps (disable for raw intersector output)

    Returns:
        ValidationResult at the TRACING stage
    """
    result = ValidationResult(stage=ValidationStage.TRACING)
    for issue in check_segments_sorted(segments):
        result.add_issue(issue)
    for issue in check_segment_overlap(segments):
        result.add_issue(issue)
    if require_coverage:
        for issue in check_segment_coverage(segments):
            result.add_issue(issue)
    return result
