"""
Stage 3 — Resolve `if` / `then` / `else` into sibling-keyed conditional rules.

Only the first declared property of an `if` schema is used as the condition.
For each usable branch, the first declared property of that branch becomes the
payload: it is required to satisfy the branch schema only when the condition
property's value matches (`then`) or does not match (`else`) the `if` schema.

Malformed conditionals are dropped; they never fail the compile.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple, Union

from rule_compiler.compiler.merge import merge_rule_sets
from rule_compiler.errors import UnsupportedConstruct
from rule_compiler.logger import get_logger
from rule_compiler.rules.algebra import (
    Predicate,
    PropertyRuleSet,
    and_rules,
    conditional,
    object_rule,
    test_sync,
)
from rule_compiler.rules.leaf import build_leaf_rule
from rule_compiler.schema.models import (
    BooleanSchema,
    ObjectSchema,
    extract_properties,
    first_entry,
)

logger = get_logger(__name__)


def has_conditional(schema: Any, key: str) -> bool:
    if not isinstance(schema, ObjectSchema) or not isinstance(schema.if_, ObjectSchema):
        return False
    return schema.if_.has_property(key)


def evaluate(
    key: str,
    node: Union[ObjectSchema, BooleanSchema],
    context: Optional[ObjectSchema],
) -> Predicate:
    """
    Build a predicate that tells whether a value satisfies `node` (compiled as
    the leaf `key` within `context`). The predicate only answers True/False.
    """

    rule = build_leaf_rule(key, node, context)

    def predicate(value: Any) -> bool:
        return test_sync(rule, value)

    return predicate


def resolve_condition(schema: Any) -> Optional[PropertyRuleSet]:
    try:
        condition_key, condition_node = _condition_head(schema)
    except UnsupportedConstruct as exc:
        logger.debug("Ignoring conditional: %s", exc)
        return None

    resolved: PropertyRuleSet = {}
    for keyword, branch, expected in (("then", schema.then, True), ("else", schema.else_, False)):
        if branch is None:
            continue
        try:
            branch_rules = _resolve_keyword_branch(keyword, branch, condition_key, condition_node, expected)
        except UnsupportedConstruct as exc:
            logger.debug("Ignoring '%s' branch of condition on '%s': %s", keyword, condition_key, exc)
            continue
        # then/else results sharing a payload key: the later branch wins
        resolved = merge_rule_sets(resolved, branch_rules)

    return resolved or None


def resolve_branch(
    branch: ObjectSchema,
    condition_key: str,
    predicate: Predicate,
    *,
    label: str = "",
) -> Optional[PropertyRuleSet]:
    # walker imports this module
    from rule_compiler.compiler.walker import compile_properties

    properties = extract_properties(branch)
    if not properties:
        return None

    head = first_entry(compile_properties(properties, branch))
    if head is None:
        return None
    payload_key, payload_rule = head

    if isinstance(branch.if_, ObjectSchema):
        nested = resolve_condition(branch)
        if nested:
            payload_rule = and_rules(payload_rule, object_rule(nested))

    return {payload_key: conditional(condition_key, predicate, payload_rule, label=label)}


def _condition_head(schema: Any) -> Tuple[str, ObjectSchema]:
    if_schema = schema.if_ if isinstance(schema, ObjectSchema) else None
    if not isinstance(if_schema, ObjectSchema):
        raise UnsupportedConstruct("'if' is missing or not a schema object")

    head = first_entry(if_schema.properties)
    if head is None:
        raise UnsupportedConstruct("'if' declares no properties")

    condition_key, condition_node = head
    if not isinstance(condition_node, ObjectSchema):
        raise UnsupportedConstruct(f"condition on '{condition_key}' is a boolean schema")
    return condition_key, condition_node


def _resolve_keyword_branch(
    keyword: str,
    branch: Union[ObjectSchema, BooleanSchema],
    condition_key: str,
    condition_node: ObjectSchema,
    expected: bool,
) -> PropertyRuleSet:
    if not isinstance(branch, ObjectSchema):
        raise UnsupportedConstruct(f"'{keyword}' is not a schema object")

    is_valid = evaluate(condition_key, condition_node, branch)

    def predicate(value: Any) -> bool:
        return is_valid(value) is expected

    outcome = "matches" if expected else "does not match"
    rules = resolve_branch(
        branch,
        condition_key,
        predicate,
        label=f"when '{condition_key}' {outcome} 'if'",
    )
    if not rules:
        raise UnsupportedConstruct(f"'{keyword}' declares no usable properties")
    return rules
