"""
Composable validation rules produced by the compiler.

Every rule validates one value position. Rules that sit inside an object also
receive the enclosing object (`parent`) so that conditional rules can read a
sibling value. Two entry points exist on every rule:

- `test(value)` returns a bool and is what conditional predicates use.
- `iter_errors(value)` / `validate(value)` report detailed violations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence, Tuple

from jsonschema.validators import Draft7Validator

from rule_compiler.errors import RuleValidationError
from rule_compiler.schema.jsonschema_adapter import format_error_path


class _Missing:
    """Marker for a key that is absent from its parent object."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

Predicate = Callable[[Any], bool]

# One object level worth of field rules, in declaration order.
PropertyRuleSet = Dict[str, "ValidationRule"]


@dataclass(frozen=True)
class RuleViolation:
    path: str
    message: str
    validator: str = ""

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ValidationRule(ABC):
    @abstractmethod
    def iter_errors(self, value: Any, *, parent: Any = None, path: str = "$") -> Iterator[RuleViolation]:
        """Yield every violation of this rule by `value`."""

    @abstractmethod
    def describe(self) -> str:
        """One-line label used when rendering a rule tree."""

    def children(self) -> Sequence[Tuple[str, "ValidationRule"]]:
        return ()

    def test(self, value: Any, *, parent: Any = None) -> bool:
        return next(iter(self.iter_errors(value, parent=parent)), None) is None

    def validate(self, value: Any) -> None:
        violations = list(self.iter_errors(value))
        if violations:
            raise RuleValidationError(violations)


@dataclass(frozen=True)
class LeafRule(ValidationRule):
    """
    A single property checked against its own JSON schema by jsonschema.

    A missing value only fails when the enclosing schema lists `key` as required.
    """

    key: str
    schema: Any
    validator: Draft7Validator = field(repr=False, compare=False)
    required: bool = False

    def iter_errors(self, value: Any, *, parent: Any = None, path: str = "$") -> Iterator[RuleViolation]:
        if value is MISSING:
            if self.required:
                yield RuleViolation(path, f"'{self.key}' is a required property", "required")
            return
        for error in self.validator.iter_errors(value):
            yield RuleViolation(
                format_error_path(error, prefix=path),
                error.message,
                str(error.validator),
            )

    def describe(self) -> str:
        constraints = self.schema if isinstance(self.schema, bool) else dict(self.schema)
        marker = " (required)" if self.required else ""
        return f"{self.key}{marker}: {constraints}"


@dataclass(frozen=True)
class ObjectRule(ValidationRule):
    fields: Mapping[str, ValidationRule]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def iter_errors(self, value: Any, *, parent: Any = None, path: str = "$") -> Iterator[RuleViolation]:
        if value is MISSING:
            return
        if not isinstance(value, Mapping):
            yield RuleViolation(path, f"{value!r} is not of type 'object'", "type")
            return
        for key, rule in self.fields.items():
            yield from rule.iter_errors(value.get(key, MISSING), parent=value, path=f"{path}.{key}")

    def describe(self) -> str:
        return f"object ({len(self.fields)} fields)"

    def children(self) -> Sequence[Tuple[str, ValidationRule]]:
        return tuple(self.fields.items())


@dataclass(frozen=True)
class ArrayRule(ValidationRule):
    element: ValidationRule

    def iter_errors(self, value: Any, *, parent: Any = None, path: str = "$") -> Iterator[RuleViolation]:
        if value is MISSING:
            return
        if not isinstance(value, (list, tuple)):
            yield RuleViolation(path, f"{value!r} is not of type 'array'", "type")
            return
        for index, item in enumerate(value):
            yield from self.element.iter_errors(item, parent=value, path=f"{path}[{index}]")

    def describe(self) -> str:
        return "array"

    def children(self) -> Sequence[Tuple[str, ValidationRule]]:
        return (("items", self.element),)


@dataclass(frozen=True)
class AndRule(ValidationRule):
    left: ValidationRule
    right: ValidationRule

    def iter_errors(self, value: Any, *, parent: Any = None, path: str = "$") -> Iterator[RuleViolation]:
        yield from self.left.iter_errors(value, parent=parent, path=path)
        yield from self.right.iter_errors(value, parent=parent, path=path)

    def describe(self) -> str:
        return "all of"

    def children(self) -> Sequence[Tuple[str, ValidationRule]]:
        return (("and", self.left), ("and", self.right))


@dataclass(frozen=True)
class ConditionalRule(ValidationRule):
    """
    Applies `then_rule` only when the sibling value under `sibling_key`
    satisfies `predicate`; otherwise accepts anything.
    """

    sibling_key: str
    predicate: Predicate = field(repr=False, compare=False)
    then_rule: ValidationRule
    label: str = ""

    def iter_errors(self, value: Any, *, parent: Any = None, path: str = "$") -> Iterator[RuleViolation]:
        sibling = parent.get(self.sibling_key, MISSING) if isinstance(parent, Mapping) else MISSING
        if not self.predicate(sibling):
            return
        yield from self.then_rule.iter_errors(value, parent=parent, path=path)

    def describe(self) -> str:
        return self.label or f"when '{self.sibling_key}' matches"

    def children(self) -> Sequence[Tuple[str, ValidationRule]]:
        return (("then", self.then_rule),)


# -----------------------------
# Rule algebra
# -----------------------------
def object_rule(rule_set: Mapping[str, ValidationRule]) -> ObjectRule:
    return ObjectRule(rule_set)


def array_rule(element: ValidationRule) -> ArrayRule:
    return ArrayRule(element)


def and_rules(left: ValidationRule, right: ValidationRule) -> AndRule:
    return AndRule(left, right)


def conditional(
    sibling_key: str,
    predicate: Predicate,
    then_rule: ValidationRule,
    *,
    label: str = "",
) -> ConditionalRule:
    return ConditionalRule(sibling_key, predicate, then_rule, label)


def test_sync(rule: ValidationRule, value: Any) -> bool:
    return rule.test(value)

