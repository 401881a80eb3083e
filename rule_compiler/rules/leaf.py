"""
Leaf rule construction.

A leaf is any property schema the walker does not descend into. Its
constraints (type, format, enum, const, bounds, pattern, ...) are enforced by a
jsonschema Draft 7 validator; whether the property may be absent comes from
the enclosing schema's `required` list.
"""

from __future__ import annotations

from typing import Optional, Union

from rule_compiler.config import config
from rule_compiler.errors import LeafCompileError
from rule_compiler.rules.algebra import LeafRule
from rule_compiler.schema.jsonschema_adapter import SchemaError, check_schema, get_validator
from rule_compiler.schema.models import BooleanSchema, ObjectSchema


def build_leaf_rule(
    key: str,
    leaf: Union[ObjectSchema, BooleanSchema],
    context: Optional[ObjectSchema],
) -> LeafRule:
    if isinstance(leaf, BooleanSchema):
        schema = leaf.value
    else:
        schema = leaf.as_json_schema()

    if config.check_leaf_schemas:
        try:
            check_schema(schema)
        except SchemaError as exc:
            raise LeafCompileError(f"Schema for '{key}' is invalid: {exc.message}") from exc

    required = isinstance(context, ObjectSchema) and key in context.required
    return LeafRule(
        key=key,
        schema=schema,
        validator=get_validator(schema, enforce_formats=config.enforce_formats),
        required=required,
    )
