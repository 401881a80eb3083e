from rule_compiler.rules.algebra import (
    MISSING,
    AndRule,
    ArrayRule,
    ConditionalRule,
    LeafRule,
    ObjectRule,
    PropertyRuleSet,
    RuleViolation,
    ValidationRule,
    and_rules,
    array_rule,
    conditional,
    object_rule,
    test_sync,
)
from rule_compiler.rules.leaf import build_leaf_rule

__all__ = [
    "MISSING",
    "AndRule",
    "ArrayRule",
    "ConditionalRule",
    "LeafRule",
    "ObjectRule",
    "PropertyRuleSet",
    "RuleViolation",
    "ValidationRule",
    "and_rules",
    "array_rule",
    "build_leaf_rule",
    "conditional",
    "object_rule",
    "test_sync",
]
