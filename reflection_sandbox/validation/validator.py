"""
Validator orchestrator.

Coordinates the tree and sight line checks and applies the caller's
strictness: WARN promotion in strict mode and ValidationError on FAIL
issues when fail_fast is requested.
"""

import logging
from typing import Iterable, List

from ..geometry.intersect import RoomSegment
from ..layout.room_types import Room
from .checks.ray_checks import validate_segment_partition
from .checks.tree_checks import validate_tree_structure
from .core import Severity, ValidationError, ValidationResult

logger = logging.getLogger(__name__)


class SandboxValidator:
    """Runs validation checks for the engine stages.

    Attributes:
        strict_mode: If True, treat WARN as FAIL
        enabled: If False, skip all validation
    """

    def __init__(self, strict_mode: bool = False, enabled: bool = True):
        self.strict_mode = strict_mode
        self.enabled = enabled
        self._validation_history: List[ValidationResult] = []

    def validate_room_tree(self, rooms: Iterable[Room], max_order: int) -> ValidationResult:
        """Validate a built room tree.

        Stage: TREE

        Checks:
        - TREE-001 to TREE-007
        """
        if not self.enabled:
            return ValidationResult()

        result = validate_tree_structure(list(rooms), max_order)
        self._apply_strict_mode(result)
        self._record_result(result)
        return result

    def validate_segments(self, segments: List[RoomSegment],
                          require_coverage: bool = True) -> ValidationResult:
        """Validate the segments of one sight line.

        Stage: TRACING

        Checks:
        - RAY-001 to RAY-003
        """
        if not self.enabled:
            return ValidationResult()

        result = validate_segment_partition(segments, require_coverage)
        self._apply_strict_mode(result)
        self._record_result(result)
        return result

    def get_history(self) -> List[ValidationResult]:
        return self._validation_history.copy()

    def clear_history(self) -> None:
        self._validation_history.clear()

    def _apply_strict_mode(self, result: ValidationResult) -> None:
        """Promote WARN to FAIL in strict mode."""
        if self.strict_mode:
            for issue in result.issues:
                if issue.severity == Severity.WARN:
                    issue.severity = Severity.FAIL

    def _record_result(self, result: ValidationResult) -> None:
        self._validation_history.append(result)


def _finish(result: ValidationResult, fail_fast: bool) -> ValidationResult:
    for issue in result.errors + result.warnings:
        logger.warning(issue.format())
    if fail_fast and result.failed:
        raise ValidationError(result)
    return result


def validate_room_tree(rooms: Iterable[Room], max_order: int,
                       fail_fast: bool = False) -> ValidationResult:
    """Validate a room tree, logging issues.

    Raises:
        ValidationError: If fail_fast and any FAIL issue was found
    """
    return _finish(SandboxValidator().validate_room_tree(rooms, max_order), fail_fast)


def validate_segments(segments: List[RoomSegment], require_coverage: bool = True,
                      fail_fast: bool = False) -> ValidationResult:
    """Validate sight line segments, logging issues.

    Raises:
        ValidationError: If fail_fast and any FAIL issue was found
    """
    return _finish(SandboxValidator().validate_segments(segments, require_coverage), fail_fast)
