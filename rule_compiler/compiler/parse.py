"""
Stage 1 — Parse a JSON Schema payload into a typed SchemaNode.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Union

from rule_compiler.errors import InvalidSchemaShape
from rule_compiler.schema.models import BooleanSchema, ObjectSchema, parse_schema_node


def parse_schema(payload: Any) -> Union[ObjectSchema, BooleanSchema]:
    """
    Accepts a JSON string, a mapping, a bool, or an already parsed node and
    returns the corresponding SchemaNode.
    """

    if isinstance(payload, (ObjectSchema, BooleanSchema)):
        return payload

    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise InvalidSchemaShape(f"Invalid JSON schema payload: {exc}") from exc
    elif isinstance(payload, (Mapping, bool)):
        data = payload
    else:
        raise InvalidSchemaShape(
            f"Unsupported payload type {type(payload).__name__}; expected str, Mapping or bool"
        )

    return parse_schema_node(data)
