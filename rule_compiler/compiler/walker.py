"""
Stage 2 — Walk `properties` / `items` recursively and build one rule per property.
"""

from __future__ import annotations

from typing import Any, List, Optional

from rule_compiler.compiler.conditions import has_conditional, resolve_condition
from rule_compiler.compiler.merge import build_validation, merge_rule_sets
from rule_compiler.logger import get_logger
from rule_compiler.rules.algebra import (
    ObjectRule,
    PropertyRuleSet,
    and_rules,
    array_rule,
    object_rule,
)
from rule_compiler.rules.leaf import build_leaf_rule
from rule_compiler.schema.models import ObjectSchema, PropertyEntry, extract_properties

logger = get_logger(__name__)


def compile_schema_node(schema: Any) -> Optional[ObjectRule]:
    """
    Compile an object schema into an object rule.

    Returns None when the schema has no `properties`; only object schemas are
    compiled here.
    """

    properties = extract_properties(schema)
    if properties is None:
        return None
    return object_rule(compile_properties(properties, schema))


def compile_properties(properties: List[PropertyEntry], enclosing: Optional[ObjectSchema]) -> PropertyRuleSet:
    rules: PropertyRuleSet = {}
    conditional_rules: PropertyRuleSet = {}

    for entry in properties:
        key, node = entry.key, entry.node
        # `true` / `false` property schemas carry no rule
        if not isinstance(node, ObjectSchema):
            continue

        if _is_nested_object(node):
            rules[key] = compile_schema_node(node)
        elif _is_array_of_objects(node):
            # Array-level constraints (minItems, ...) and per-element rules must both hold.
            array_constraints = build_leaf_rule(key, node.without_items(), enclosing)
            rules[key] = and_rules(array_constraints, array_rule(compile_schema_node(node.items)))
        elif _is_array_of_leaves(node):
            rules[key] = array_rule(build_leaf_rule(key, node.items, enclosing))
        else:
            rules = build_validation(rules, key, node, enclosing)
            if has_conditional(enclosing, key):
                resolved = resolve_condition(enclosing)
                if resolved:
                    conditional_rules.update(resolved)

    if conditional_rules:
        logger.debug(
            "Conditional rules for %s override leaf rules",
            sorted(conditional_rules),
        )
    return merge_rule_sets(rules, conditional_rules)


def _is_nested_object(node: ObjectSchema) -> bool:
    return node.type == "object" and node.properties is not None


def _is_array_of_objects(node: ObjectSchema) -> bool:
    return (
        node.type == "array"
        and isinstance(node.items, ObjectSchema)
        and node.items.properties is not None
    )


def _is_array_of_leaves(node: ObjectSchema) -> bool:
    return node.type == "array" and isinstance(node.items, ObjectSchema)
