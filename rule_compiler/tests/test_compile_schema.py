from __future__ import annotations

import json

import pytest

from rule_compiler import compile_schema
from rule_compiler.errors import InvalidSchemaShape, LeafCompileError, RuleValidationError
from rule_compiler.rules.algebra import ObjectRule, ValidationRule


def _compile(schema: dict) -> ValidationRule:
    rule = compile_schema(schema)
    assert rule is not None
    return rule


def _paths(rule: ValidationRule, value: object) -> list[str]:
    return [violation.path for violation in rule.iter_errors(value)]


def test_flat_object_checks_each_property() -> None:
    rule = _compile(
        {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "number"}},
        }
    )

    assert rule.test({"a": "x", "b": 1})
    assert not rule.test({"a": "x", "b": "y"})
    assert _paths(rule, {"a": "x", "b": "y"}) == ["$.b"]


def test_nested_object_is_compiled_recursively() -> None:
    rule = _compile(
        {
            "type": "object",
            "properties": {
                "a": {"type": "object", "properties": {"b": {"type": "string"}}},
            },
        }
    )

    assert isinstance(rule, ObjectRule)
    assert isinstance(rule.fields["a"], ObjectRule)
    assert rule.test({"a": {"b": "x"}})
    assert not rule.test({"a": {"b": 1}})
    assert _paths(rule, {"a": {"b": 1}}) == ["$.a.b"]


def test_array_of_objects_enforces_array_and_element_constraints() -> None:
    rule = _compile(
        {
            "type": "object",
            "properties": {
                "points": {
                    "type": "array",
                    "items": {"type": "object", "properties": {"x": {"type": "number"}}},
                    "minItems": 1,
                }
            },
        }
    )

    assert not rule.test({"points": []})
    assert [v.validator for v in rule.iter_errors({"points": []})] == ["minItems"]
    assert not rule.test({"points": [{"x": "a"}]})
    assert _paths(rule, {"points": [{"x": "a"}]}) == ["$.points[0].x"]
    assert rule.test({"points": [{"x": 1}]})


def test_array_of_leaves_checks_each_element() -> None:
    rule = _compile(
        {
            "type": "object",
            "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
        }
    )

    assert rule.test({"tags": ["a", "b"]})
    assert _paths(rule, {"tags": ["a", 1]}) == ["$.tags[1]"]
    assert not rule.test({"tags": "a"})


def test_boolean_property_schemas_are_skipped() -> None:
    rule = _compile(
        {
            "type": "object",
            "properties": {"anything": True, "nothing": False, "name": {"type": "string"}},
        }
    )

    assert isinstance(rule, ObjectRule)
    assert list(rule.fields) == ["name"]
    assert rule.test({"anything": 1, "nothing": 2, "name": "x"})


def test_required_keys_come_from_enclosing_schema() -> None:
    rule = _compile(
        {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string"}, "nickname": {"type": "string"}},
        }
    )

    violations = list(rule.iter_errors({}))
    assert [(v.path, v.validator) for v in violations] == [("$.name", "required")]
    assert rule.test({"name": "x"})


def test_leaf_constraints_are_delegated_to_jsonschema() -> None:
    rule = _compile(
        {
            "type": "object",
            "properties": {
                "email": {"type": "string", "format": "email"},
                "size": {"enum": ["S", "M", "L"]},
                "age": {"type": "integer", "minimum": 0},
            },
        }
    )

    assert rule.test({"email": "dev@example.com", "size": "M", "age": 3})
    assert _paths(rule, {"email": "nope", "size": "XL", "age": -1}) == ["$.email", "$.size", "$.age"]


def test_non_object_value_is_rejected() -> None:
    rule = _compile({"type": "object", "properties": {"a": {"type": "string"}}})

    assert not rule.test(["a"])
    assert [v.validator for v in rule.iter_errors(None)] == ["type"]


def test_validate_raises_with_all_violations() -> None:
    rule = _compile(
        {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "number"}},
        }
    )

    with pytest.raises(RuleValidationError) as excinfo:
        rule.validate({"a": 1, "b": "y"})

    assert [v.path for v in excinfo.value.violations] == ["$.a", "$.b"]
    assert "$.a" in str(excinfo.value)


def test_schema_without_properties_compiles_to_none() -> None:
    assert compile_schema({"type": "string"}) is None
    assert compile_schema(True) is None


def test_json_text_payload_is_accepted() -> None:
    rule = compile_schema(json.dumps({"properties": {"a": {"type": "string"}}}))

    assert rule is not None
    assert rule.test({"a": "x"})


def test_repeated_compiles_are_independent() -> None:
    schema = {
        "type": "object",
        "properties": {"a": {"type": "string"}, "b": {}},
        "if": {"properties": {"a": {"const": "yes"}}},
        "then": {"properties": {"b": {"type": "string"}}},
    }
    documents = [
        {"a": "yes", "b": "x"},
        {"a": "yes", "b": 5},
        {"a": "no", "b": 5},
        {},
    ]

    first = _compile(schema)
    second = _compile(schema)

    assert first is not second
    assert [first.test(doc) for doc in documents] == [second.test(doc) for doc in documents]
    assert schema["then"] == {"properties": {"b": {"type": "string"}}}


@pytest.mark.parametrize(
    "payload",
    [
        42,
        "{not json",
        {"properties": {"a": "string"}},
        {"properties": ["a"]},
        {"required": "a", "properties": {}},
    ],
)
def test_invalid_schema_shapes_raise(payload: object) -> None:
    with pytest.raises(InvalidSchemaShape):
        compile_schema(payload)


def test_invalid_leaf_schema_raises_leaf_compile_error() -> None:
    with pytest.raises(LeafCompileError) as excinfo:
        compile_schema({"properties": {"name": {"type": "string", "minLength": "three"}}})

    assert "name" in str(excinfo.value)
