# Standard library imports
from dataclasses import replace

# Reflection sandbox imports
from reflection_sandbox.geometry.intersect import RoomSegment
from reflection_sandbox.layout.room_tree import build_room_tree
from reflection_sandbox.layout.room_types import GridPos
from reflection_sandbox.validation import (
    SandboxValidator,
    Severity,
    ValidationError,
    ValidationStage,
    get_rule,
    get_rules_by_category,
    validate_room_tree,
    validate_segments,
)

# Third-party imports
import pytest


@pytest.fixture
def rooms(root_room):
    """Default room expanded to order 2"""
    return build_room_tree(root_room, 2)


def with_room(rooms, room_id, **changes):
    return [replace(r, **changes) if r.id == room_id else r for r in rooms]


class TestRules:
    def test_registry(self):
        """Rules are registered by code and category"""
        assert get_rule("TREE-004").severity is Severity.FAIL
        assert get_rule("RAY-002").severity is Severity.WARN
        assert get_rule("NOPE-001") is None
        assert len(get_rules_by_category("TREE")) == 7
        assert len(get_rules_by_category("RAY")) == 3

    def test_message_formatting(self):
        """Templates format their placeholders"""
        rule = get_rule("TREE-001")
        assert rule.format_message(order=4, max_order=3) == "Reflection order 4 outside [0, 3]"
        assert rule.format_remediation(max_order=3) == "Rebuild the tree with max_order=3"


class TestTreeValidation:
    def test_built_tree_passes(self, rooms):
        """A freshly built tree has no issues"""
        result = validate_room_tree(rooms, 2)
        assert result.passed
        assert result.issues == []
        assert result.stage is ValidationStage.TREE
        assert result.report() == "Room tree valid: no issues"

    def test_order_out_of_range(self, rooms):
        """Orders above max_order are reported"""
        result = validate_room_tree(rooms, 1)
        assert "TREE-001" in result.codes()
        assert result.failed

    def test_missing_parent(self, rooms):
        """Virtual rooms whose parent is gone are reported"""
        pruned = [r for r in rooms if r.id != "original-top-1"]
        result = validate_room_tree(pruned, 2)
        assert "TREE-002" in result.codes()
        issue = next(i for i in result.issues if i.code == "TREE-002")
        assert issue.room.startswith("original-top-1-")

    def test_parent_order_mismatch(self, rooms):
        """A room must be one order above its parent"""
        result = validate_room_tree(with_room(rooms, "original-top-1", reflection_order=2), 2)
        assert "TREE-003" in result.codes()

    def test_duplicate_position(self, rooms):
        """Two rooms in one cell are reported"""
        right = next(r for r in rooms if r.id == "original-right-1")
        result = validate_room_tree(rooms + [replace(right, id="duplicate")], 2)
        assert result.codes() == ["TREE-004"]

    def test_wall_mismatch(self, rooms, root_room):
        """Walls must be the parent's walls mirrored"""
        result = validate_room_tree(with_room(rooms, "original-top-1", walls=root_room.walls), 2)
        assert "TREE-005" in result.codes()
        issue = next(i for i in result.issues if i.code == "TREE-005" and i.room == "original-top-1")
        assert issue.wall == "top"

    def test_detached_position(self, rooms):
        """A room must sit behind its parent's wall"""
        result = validate_room_tree(with_room(rooms, "original-left-1", position=GridPos(5, 5)), 2)
        assert set(result.codes()) == {"TREE-006"}

    def test_missing_root(self, rooms):
        """A tree without its real room is reported"""
        result = validate_room_tree([r for r in rooms if not r.is_root], 2)
        assert "TREE-007" in result.codes()

    def test_fail_fast(self, rooms):
        """fail_fast raises ValidationError carrying the result"""
        with pytest.raises(ValidationError) as excinfo:
            validate_room_tree(rooms, 1, fail_fast=True)
        assert excinfo.value.result.failed
        assert "TREE-001" in str(excinfo.value)

    def test_issues_logged(self, rooms, caplog):
        """Issues are logged as warnings"""
        validate_room_tree(rooms, 1)
        assert "TREE-001" in caplog.text


class TestSegmentValidation:
    def test_partition_passes(self):
        """Sorted contiguous segments covering [0, 1] pass"""
        segments = [RoomSegment(0.0, 0.4, "a"), RoomSegment(0.4, 1.0, "b")]
        result = validate_segments(segments)
        assert result.passed and not result.issues
        assert result.stage is ValidationStage.TRACING

    def test_overlap(self):
        """Overlaps beyond tolerance fail"""
        segments = [RoomSegment(0.0, 0.6, "a"), RoomSegment(0.4, 1.0, "b")]
        assert validate_segments(segments).codes() == ["RAY-001"]

    def test_gap_is_warning(self):
        """Gaps are warnings and do not fail"""
        segments = [RoomSegment(0.0, 0.4, "a"), RoomSegment(0.5, 1.0, "b")]
        result = validate_segments(segments)
        assert result.codes() == ["RAY-002"]
        assert result.passed
        assert len(result.warnings) == 1

    def test_gap_ignored_without_coverage(self):
        """Raw intersector output may leave gaps"""
        segments = [RoomSegment(0.2, 0.4, "a")]
        assert validate_segments(segments, require_coverage=False).passed

    def test_unsorted(self):
        """Segments out of order fail"""
        segments = [RoomSegment(0.5, 1.0, "b"), RoomSegment(0.0, 0.5, "a")]
        assert validate_segments(segments).codes() == ["RAY-003"]


class TestSandboxValidator:
    def test_strict_mode_promotes_warnings(self):
        """Strict mode turns WARN into FAIL"""
        validator = SandboxValidator(strict_mode=True)
        result = validator.validate_segments([RoomSegment(0.0, 0.5, "a")])
        assert result.failed
        assert result.errors[0].code == "RAY-002"

    def test_disabled(self, rooms):
        """A disabled validator reports nothing"""
        validator = SandboxValidator(enabled=False)
        assert validator.validate_room_tree(rooms, 0).passed
        assert validator.get_history() == []

    def test_history(self, rooms):
        """Results are recorded until cleared"""
        validator = SandboxValidator()
        validator.validate_room_tree(rooms, 2)
        validator.validate_segments([RoomSegment(0.0, 1.0, "a")])
        assert len(validator.get_history()) == 2
        validator.clear_history()
        assert validator.get_history() == []

    def test_result_to_dict(self, rooms):
        """Results serialise with per-rule and per-room summaries"""
        data = SandboxValidator().validate_room_tree(rooms, 1).to_dict()
        assert data["passed"] is False
        assert data["stage"] == "tree"
        assert data["errors"] == len(data["issues"])
        assert data["rules"] == {"TREE-001": data["errors"]}
        assert all(codes == ["TREE-001"] for codes in data["rooms"].values())
        assert data["issues"][0]["category"] == "TREE"


class TestResultReport:
    def test_grouped_by_room(self, rooms, root_room):
        """Issues of one room are listed together under its id"""
        broken = with_room(rooms, "original-top-1", walls=root_room.walls, reflection_order=2)
        result = validate_room_tree(broken, 2)
        grouped = result.by_room()
        assert [i.code for i in grouped["original-top-1"]] == ["TREE-003", "TREE-005"]

        report = result.report()
        assert report.startswith("Room tree INVALID:")
        assert "  original-top-1:\n" in report
        assert "[FAIL] TREE-005 original-top-1:top:" in report

    def test_issue_without_room(self, rooms):
        """Issues about no single room are grouped under '-'"""
        result = validate_room_tree([r for r in rooms if not r.is_root], 2)
        assert [i.code for i in result.by_room()["-"]] == ["TREE-007"]

    def test_sight_line_report(self):
        """Warnings alone keep a sight line valid"""
        report = validate_segments([RoomSegment(0.0, 0.5, "a")]).report()
        assert report.startswith("Sight line valid: 0 error(s), 1 warning(s)")
        assert "(fix: Fill gaps with cover_with_outside)" in report

    def test_error_message_lists_codes(self, rooms):
        """ValidationError names the failing rules"""
        with pytest.raises(ValidationError, match=r"validation error\(s\) \[TREE-001\]"):
            validate_room_tree(rooms, 1, fail_fast=True)
