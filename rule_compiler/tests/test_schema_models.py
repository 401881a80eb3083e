from __future__ import annotations

import pytest

from rule_compiler.compiler.parse import parse_schema
from rule_compiler.errors import InvalidSchemaShape
from rule_compiler.schema.models import (
    BooleanSchema,
    ObjectSchema,
    extract_properties,
    first_entry,
    is_object_schema,
)


def test_properties_keep_declaration_order() -> None:
    schema = parse_schema({"properties": {"zeta": {}, "alpha": {}, "mid": True}})

    assert isinstance(schema, ObjectSchema)
    assert [entry.key for entry in schema.properties] == ["zeta", "alpha", "mid"]
    assert first_entry(schema.properties)[0] == "zeta"


def test_boolean_literals_become_boolean_schemas() -> None:
    schema = parse_schema({"properties": {"open": True, "closed": False}})

    nodes = [entry.node for entry in extract_properties(schema)]
    assert nodes == [BooleanSchema(value=True), BooleanSchema(value=False)]
    assert not any(is_object_schema(node) for node in nodes)
    assert parse_schema(False) == BooleanSchema(value=False)


def test_conditional_keywords_are_parsed() -> None:
    schema = parse_schema(
        {
            "if": {"properties": {"a": {"const": 1}}},
            "then": {"properties": {"b": {}}},
            "else": False,
        }
    )

    assert isinstance(schema.if_, ObjectSchema)
    assert isinstance(schema.then, ObjectSchema)
    assert schema.else_ == BooleanSchema(value=False)


def test_tuple_items_are_parsed_as_a_list() -> None:
    schema = parse_schema({"type": "array", "items": [{"type": "string"}, True]})

    assert isinstance(schema.items, list)
    assert isinstance(schema.items[0], ObjectSchema)
    assert schema.items[1] == BooleanSchema(value=True)


def test_without_items_keeps_array_constraints() -> None:
    schema = parse_schema(
        {"type": "array", "minItems": 2, "items": {"properties": {"x": {}}}}
    )

    trimmed = schema.without_items()

    assert trimmed.items is None
    assert trimmed.as_json_schema() == {"type": "array", "minItems": 2}
    assert schema.items is not None


def test_source_is_copied_from_input() -> None:
    raw = {"type": "string", "enum": ["a"]}
    schema = parse_schema(raw)

    raw["enum"].append("b")

    assert schema.as_json_schema() == {"type": "string", "enum": ["a"]}


def test_first_entry_handles_mappings_and_empty_inputs() -> None:
    assert first_entry({"b": 2, "a": 1}) == ("b", 2)
    assert first_entry({}) is None
    assert first_entry([]) is None
    assert first_entry(None) is None


def test_extract_properties_of_boolean_schema_is_none() -> None:
    assert extract_properties(BooleanSchema(value=True)) is None
    assert extract_properties(parse_schema({"type": "string"})) is None


def test_invalid_nested_schema_reports_location() -> None:
    with pytest.raises(InvalidSchemaShape) as excinfo:
        parse_schema({"properties": {"a": {"items": 3}}})

    assert "#/properties/a/items" in str(excinfo.value)


def test_invalid_type_keyword_is_rejected() -> None:
    with pytest.raises(InvalidSchemaShape):
        parse_schema({"type": 5})


def test_unparseable_conditional_keywords_are_left_out() -> None:
    raw = {"properties": {"a": {}}, "if": {"properties": []}, "then": None, "else": 7}

    schema = parse_schema(raw)

    assert schema.if_ is None
    assert schema.then is None
    assert schema.else_ is None
    assert schema.source["else"] == 7
