from __future__ import annotations

from typing import Union

from jsonschema import ValidationError
from jsonschema.exceptions import SchemaError
from jsonschema.validators import Draft7Validator

from rule_compiler.schema.models import JsonSchema

ValidatorType = Draft7Validator


def get_validator(schema: Union[JsonSchema, bool], *, enforce_formats: bool = True) -> ValidatorType:
    """
    Build a Draft 7 validator for a single leaf schema.

    Validators are not cached: every compile builds its own so that no state
    is shared between independent compiles.
    """

    format_checker = Draft7Validator.FORMAT_CHECKER if enforce_formats else None
    return Draft7Validator(schema, format_checker=format_checker)


def check_schema(schema: Union[JsonSchema, bool]) -> None:
    """
    Ensure the provided schema is itself valid JSON Schema (raises SchemaError).
    """

    Draft7Validator.check_schema(schema)


def format_error_path(error: ValidationError, *, prefix: str = "$") -> str:
    """
    Append a jsonschema error's location inside the instance to `prefix`.
    """

    path = prefix
    for token in error.absolute_path:
        if isinstance(token, int):
            path += f"[{token}]"
        else:
            path += f".{token}"
    return path


__all__ = [
    "SchemaError",
    "ValidationError",
    "check_schema",
    "format_error_path",
    "get_validator",
]
