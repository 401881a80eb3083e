"""
Pydantic models describing the JSON Schema subset the rule compiler reads.

A schema node is either a full schema object or a boolean literal schema
(`true` / `false`). Object schemas keep their `properties` as an ordered list
of entries because the compiler relies on declaration order ("first declared
property") when resolving conditionals.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union, Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rule_compiler.errors import InvalidSchemaShape
from rule_compiler.logger import get_logger

logger = get_logger(__name__)

JsonSchema = Dict[str, Any]  # draft-07 style dict


class StrictModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        frozen=True,
    )


class BooleanSchema(StrictModel):
    """
    Literal `true` (accept anything) or `false` (reject everything) schema.
    """

    kind: Literal["boolean"] = "boolean"
    value: bool


class PropertyEntry(StrictModel):
    key: str
    node: "SchemaNode"


class ObjectSchema(StrictModel):
    """
    A full schema object.

    `source` holds the original mapping; leaf rules are built from it so that
    constraints the compiler does not model (format, enum, minItems, ...) still
    reach the validator.
    """

    kind: Literal["object"] = "object"
    type: Optional[Union[str, List[str]]] = None
    properties: Optional[List[PropertyEntry]] = None
    items: Optional[Union["SchemaNode", List["SchemaNode"]]] = None
    if_: Optional["SchemaNode"] = Field(default=None, alias="if")
    then: Optional["SchemaNode"] = None
    else_: Optional["SchemaNode"] = Field(default=None, alias="else")
    required: List[str] = Field(default_factory=list)
    source: JsonSchema = Field(default_factory=dict)

    def has_property(self, key: str) -> bool:
        return any(entry.key == key for entry in self.properties or [])

    def without_items(self) -> "ObjectSchema":
        """
        Return a copy of this schema with the `items` keyword removed, keeping
        array-level constraints such as minItems/maxItems.
        """
        trimmed = {name: value for name, value in self.source.items() if name != "items"}
        return parse_schema_node(trimmed)

    def as_json_schema(self) -> JsonSchema:
        return copy.deepcopy(self.source)


SchemaNode = Annotated[
    Union[BooleanSchema, ObjectSchema],
    Field(discriminator="kind"),
]

PropertyEntry.model_rebuild()
ObjectSchema.model_rebuild()


def parse_schema_node(raw: Any, *, location: str = "#") -> Union[BooleanSchema, ObjectSchema]:
    """
    Convert a raw JSON value into a SchemaNode.

    Raises InvalidSchemaShape when the value is neither a mapping nor a bool, or
    when a structural keyword has the wrong shape. An `if`, `then` or `else`
    that cannot be parsed is dropped from the node (it stays in `source`).
    """

    if isinstance(raw, (BooleanSchema, ObjectSchema)):
        return raw
    if isinstance(raw, bool):
        return BooleanSchema(value=raw)
    if not isinstance(raw, Mapping):
        raise InvalidSchemaShape(
            f"Schema at {location} must be an object or boolean, received {type(raw).__name__}"
        )

    data: Dict[str, Any] = {"source": copy.deepcopy(dict(raw))}

    if "type" in raw:
        data["type"] = raw["type"]
    if "required" in raw:
        data["required"] = raw["required"]

    if "properties" in raw:
        properties = raw["properties"]
        if not isinstance(properties, Mapping):
            raise InvalidSchemaShape(f"'properties' at {location} must be an object")
        data["properties"] = [
            PropertyEntry(
                key=key,
                node=parse_schema_node(value, location=f"{location}/properties/{key}"),
            )
            for key, value in properties.items()
        ]

    if "items" in raw:
        items = raw["items"]
        if isinstance(items, Sequence) and not isinstance(items, (str, bytes)):
            data["items"] = [
                parse_schema_node(item, location=f"{location}/items/{index}")
                for index, item in enumerate(items)
            ]
        else:
            data["items"] = parse_schema_node(items, location=f"{location}/items")

    # a malformed conditional keyword is left out instead of failing the parse
    for keyword, field_name in (("if", "if_"), ("then", "then"), ("else", "else_")):
        if keyword not in raw:
            continue
        try:
            data[field_name] = parse_schema_node(raw[keyword], location=f"{location}/{keyword}")
        except InvalidSchemaShape as exc:
            logger.debug("Ignoring '%s' at %s: %s", keyword, location, exc)

    try:
        return ObjectSchema.model_validate(data)
    except ValidationError as exc:
        raise InvalidSchemaShape(f"Schema at {location} is malformed: {exc}") from exc


# -----------------------------
# Shape helpers
# -----------------------------
def is_object_schema(node: Any) -> bool:
    return isinstance(node, ObjectSchema)


def extract_properties(schema: Any) -> Optional[List[PropertyEntry]]:
    if not isinstance(schema, ObjectSchema):
        return None
    return schema.properties


def first_entry(entries: Union[Sequence[PropertyEntry], Mapping[str, Any], None]) -> Optional[Tuple[str, Any]]:
    """
    Return the first `(key, value)` pair in declaration order, or None when empty.
    """

    if not entries:
        return None
    if isinstance(entries, Mapping):
        key = next(iter(entries))
        return key, entries[key]
    head = entries[0]
    return head.key, head.node
