"""
Validation package for the reflection sandbox engine.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: Engine stage enumeration
    - ValidationRule, get_rule: Rule definitions
    - SandboxValidator: Orchestrator with strict mode and history
    - validate_room_tree(), validate_segments(): One-shot helpers
    - ValidationError: Exception raised on FAIL issues when fail_fast=True
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
)
from .rules import ValidationRule, ALL_RULES, get_rule, get_rules_by_category
from .validator import SandboxValidator, validate_room_tree, validate_segments

__all__ = [
    # Core types
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    # Rules
    'ValidationRule',
    'ALL_RULES',
    'get_rule',
    'get_rules_by_category',
    # Validator
    'SandboxValidator',
    'validate_room_tree',
    'validate_segments',
]
