"""
Merging of per-object rule sets.
"""

from __future__ import annotations

from typing import Mapping, Optional

from rule_compiler.rules.algebra import PropertyRuleSet, ValidationRule
from rule_compiler.rules.leaf import build_leaf_rule
from rule_compiler.schema.models import BooleanSchema, ObjectSchema


def merge_rule_sets(
    base: Mapping[str, ValidationRule],
    overrides: Mapping[str, ValidationRule],
) -> PropertyRuleSet:
    """
    Ordered union of two rule sets.

    An entry in `overrides` replaces the `base` entry with the same key, no
    matter which key was declared first in the schema. Keys keep their `base`
    position; keys only present in `overrides` are appended in their own order.

    The walker passes leaf rules as `base` and conditional rules as
    `overrides`, so a replaced leaf rule is dropped entirely: the conditional's
    payload rule is built from the branch schema and must carry any
    constraints that still apply.
    """

    merged: PropertyRuleSet = dict(base)
    merged.update(overrides)
    return merged


def build_validation(
    rule_set: Mapping[str, ValidationRule],
    key: str,
    node: ObjectSchema | BooleanSchema,
    context: Optional[ObjectSchema],
) -> PropertyRuleSet:
    """
    Return a copy of `rule_set` with a leaf rule for `key` added (or replaced).
    """

    return merge_rule_sets(rule_set, {key: build_leaf_rule(key, node, context)})
