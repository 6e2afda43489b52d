"""Target schema dialect: the schema shape accepted by Gemini controlled generation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import Any

__all__ = ["Schema", "Type"]


class Type(str, Enum):
    """Primitive type tags of the target dialect (Gemini wire values)."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    OBJECT = "OBJECT"
    ARRAY = "ARRAY"


# Field name -> wire key. Order is the order keys appear in to_dict().
_WIRE_KEYS = {
    "type": "type",
    "nullable": "nullable",
    "title": "title",
    "description": "description",
    "format": "format",
    "pattern": "pattern",
    "enum": "enum",
    "minimum": "minimum",
    "maximum": "maximum",
    "min_length": "minLength",
    "max_length": "maxLength",
    "min_items": "minItems",
    "max_items": "maxItems",
    "min_properties": "minProperties",
    "max_properties": "maxProperties",
    "items": "items",
    "properties": "properties",
    "required": "required",
    "any_of": "anyOf",
    "default": "default",
    "example": "example",
}

_COLLECTION_FIELDS = frozenset({"enum", "properties", "required", "any_of"})


@dataclass(frozen=True)
class Schema:
    """
    A node of the target schema dialect.

    Differences from JSON Schema:

    - ``type`` is a single tag; nullability is the separate ``nullable`` flag.
    - ``enum`` values are always strings.
    - Count bounds (``min_items`` and friends) are ``None`` both when unset
      and when zero.
    - ``example`` is a single value, not a list.

    Schemas are built once by :func:`genaischema.convert` and never mutated.
    ``properties`` is stored as a read-only mapping and a list ``example`` as
    a tuple. Schemas compare by value but are unhashable, since ``default``
    and ``example`` may hold arbitrary JSON values.

    Attributes
    ----------
        type: Primitive type tag, or None for an ``any_of``-only node.
        nullable: Whether ``null`` is an accepted value.
        enum: Allowed string values.
        items: Schema of array elements (set iff ``type`` is ARRAY).
        properties: Schemas of object properties.
        any_of: Independently converted alternatives.
        required: Required property names, in source order.

    Example:
        >>> Schema(type=Type.STRING, nullable=True).to_dict()
        {'type': 'STRING', 'nullable': True}
    """

    type: Type | None = None
    nullable: bool = False
    title: str | None = None
    description: str | None = None
    format: str | None = None
    pattern: str | None = None
    enum: tuple[str, ...] | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    min_items: int | None = None
    max_items: int | None = None
    min_properties: int | None = None
    max_properties: int | None = None
    items: Schema | None = None
    properties: Mapping[str, Schema] | None = None
    required: tuple[str, ...] | None = None
    any_of: tuple[Schema, ...] | None = None
    default: Any = None
    example: Any = None

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.properties is not None and not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        if isinstance(self.example, list):
            object.__setattr__(self, "example", tuple(self.example))

    def to_dict(self) -> dict[str, Any]:
        """
        Render as a JSON-ready dict using the API's camelCase keys.

        Unset fields, ``nullable=False`` and empty collections are omitted.
        """
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or (f.name == "nullable" and not value):
                continue
            if f.name in _COLLECTION_FIELDS and not value:
                continue

            if isinstance(value, Type):
                value = value.value
            elif isinstance(value, Schema):
                value = value.to_dict()
            elif f.name == "properties":
                value = {name: prop.to_dict() for name, prop in value.items()}
            elif f.name == "any_of":
                value = [alt.to_dict() for alt in value]
            elif isinstance(value, tuple):
                value = list(value)

            out[_WIRE_KEYS[f.name]] = value
        return out
