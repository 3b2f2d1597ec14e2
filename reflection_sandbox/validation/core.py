"""
Validation result types.

Issues carry a rule code from rules.py and the room (and wall) they concern.
A ValidationResult collects the issues of one room tree or one sight line
and reports them grouped by room.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..errors import SandboxError


class Severity(Enum):
    """Validation issue severity levels.

    - INFO: Informational, logged but doesn't affect pass/fail
    - WARN: Warning, the affected room or path is still usable
    - FAIL: Error, the output breaks a structural invariant
    """
    INFO = auto()
    WARN = auto()
    FAIL = auto()

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    """Engine stages where validation occurs.

    - TREE: After the room tree is built
    - TRACING: After a sight line is split into room segments
    """
    TREE = "tree"
    TRACING = "tracing"

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    """One broken invariant, located at a room and optionally one of its walls."""
    severity: Severity
    code: str
    message: str
    rule_reference: str
    remediation: Optional[str] = None
    room: Optional[str] = None
    wall: Optional[str] = None

    @property
    def category(self) -> str:
        """Rule family, "TREE" or "RAY"."""
        return self.code.split('-', 1)[0]

    @property
    def location(self) -> str:
        if self.room and self.wall:
            return f"{self.room}:{self.wall}"
        return self.room or '-'

    def format(self) -> str:
        """[SEVERITY] CODE location: message (fix: remediation)"""
        text = f"[{self.severity}] {self.code} {self.location}: {self.message}"
        if self.remediation:
            text += f" (fix: {self.remediation})"
        return text

    def __str__(self) -> str:
        return self.format()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'severity': str(self.severity),
            'code': self.code,
            'category': self.category,
            'message': self.message,
            'rule_reference': self.rule_reference,
            'remediation': self.remediation,
            'room': self.room,
            'wall': self.wall,
        }


@dataclass
class ValidationResult:
    """Issues found in one room tree or one sight line.

    passed is False as soon as any FAIL issue is present. Issues keep the
    order the checks produced them; report() and to_dict() group them by
    room so a broken subtree reads as one block.
    """
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    def _with_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is severity]

    @property
    def errors(self) -> List[ValidationIssue]:
        return self._with_severity(Severity.FAIL)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self._with_severity(Severity.WARN)

    @property
    def infos(self) -> List[ValidationIssue]:
        return self._with_severity(Severity.INFO)

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def codes(self) -> List[str]:
        """Rule codes of all issues, in order."""
        return [i.code for i in self.issues]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def by_room(self) -> Dict[str, List[ValidationIssue]]:
        """Issues keyed by room id; issues about no single room fall under '-'."""
        grouped: Dict[str, List[ValidationIssue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.room or '-', []).append(issue)
        return grouped

    def rule_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for issue in self.issues:
            counts[issue.code] = counts.get(issue.code, 0) + 1
        return counts

    def _subject(self) -> str:
        if self.stage is ValidationStage.TREE:
            return "Room tree"
        if self.stage is ValidationStage.TRACING:
            return "Sight line"
        return "Validation"

    def report(self) -> str:
        """Summary line followed by the issues of each room."""
        if not self.issues:
            return f"{self._subject()} valid: no issues"

        status = "valid" if self.passed else "INVALID"
        rooms = self.by_room()
        lines = [
            f"{self._subject()} {status}: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s) across {len(rooms)} room(s)"
        ]
        for room_id, issues in rooms.items():
            lines.append(f"  {room_id}:")
            lines.extend(f"    {issue.format()}" for issue in issues)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for the presentation layer."""
        return {
            'stage': str(self.stage) if self.stage else None,
            'passed': self.passed,
            'errors': len(self.errors),
            'warnings': len(self.warnings),
            'rules': self.rule_counts(),
            'rooms': {
                room_id: [issue.code for issue in issues]
                for room_id, issues in self.by_room().items()
            },
            'issues': [issue.to_dict() for issue in self.issues],
        }


class ValidationError(SandboxError):
    """Raised by fail_fast validation when a FAIL issue was found.

    Attributes:
        result: The ValidationResult that caused the failure
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        codes = ", ".join(sorted(result.rule_counts()))
        super().__init__(f"{len(result.errors)} validation error(s) [{codes}]\n{result.report()}")
