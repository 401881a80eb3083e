"""
Public entrypoint for compiling JSON Schema documents into validation rules.
"""

from __future__ import annotations

from typing import Any, Optional

from rule_compiler.compiler.parse import parse_schema
from rule_compiler.compiler.walker import compile_schema_node
from rule_compiler.errors import (
    InvalidSchemaShape,
    LeafCompileError,
    RuleCompilerError,
    RuleValidationError,
    UnsupportedConstruct,
)
from rule_compiler.logger import get_logger
from rule_compiler.rules.algebra import MISSING, RuleViolation, ValidationRule, test_sync

__version__ = "0.1.0"

logger = get_logger(__name__)


def compile_schema(payload: Any) -> Optional[ValidationRule]:
    """
    Compile a JSON Schema document into a root validation rule.

    Returns None when the document has no top-level `properties`.
    """

    schema = parse_schema(payload)
    rule = compile_schema_node(schema)
    if rule is None:
        logger.debug("Schema has no top-level properties; nothing to compile")
    return rule


__all__ = [
    "InvalidSchemaShape",
    "LeafCompileError",
    "MISSING",
    "RuleCompilerError",
    "RuleValidationError",
    "RuleViolation",
    "UnsupportedConstruct",
    "ValidationRule",
    "compile_schema",
    "test_sync",
]
