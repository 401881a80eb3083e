"""
Shared exception hierarchy for the rule compiler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from rule_compiler.rules.algebra import RuleViolation


class RuleCompilerError(Exception):
    """Base class for all compiler related errors."""


class InvalidSchemaShape(RuleCompilerError):
    """Raised when a value that is not a JSON schema is supplied where one is required."""


class UnsupportedConstruct(RuleCompilerError):
    """Raised for malformed or unsupported if/then/else structures.

    The conditional resolver swallows these; they never leave a compile call.
    """


class LeafCompileError(RuleCompilerError):
    """Raised when a leaf schema is rejected by the underlying JSON Schema validator."""


class RuleValidationError(RuleCompilerError):
    """Raised when a value does not satisfy a compiled rule."""

    def __init__(self, violations: Sequence["RuleViolation"]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(str(violation) for violation in self.violations))
