"""Convert source-dialect JSON Schema into the target (Gemini) schema dialect.

The source dialect is what :mod:`genaischema.schema.reflect` produces: plain
JSON Schema dicts. The target dialect is :class:`~genaischema.schema.Schema`.

Conversion rules:

- A node with ``items`` is an array; its own ``type`` tag does not decide
  the type (only a ``"null"`` member still marks it nullable).
- ``type: [X, "null"]`` (either order) folds into ``type=X, nullable=True``.
  Any other multi-member union raises AmbiguousTypeError.
- Unrecognized type tags fall back to OBJECT.
- ``enum`` values must be JSON strings.
- Count bounds (``minItems``, ``maxLength``, ...) equal to zero are dropped.
- Non-empty ``examples`` become a single ``example`` holding the whole list.

Every failure aborts the whole conversion; no partial schema is returned.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .._logging import scoped_logger
from ..exceptions import (
    AmbiguousTypeError,
    ArrayWithoutItemSchemaError,
    EnumEncodingError,
    UnsupportedAlternativeError,
)
from .reflect import reflect_type, reflect_value
from .types import Schema, Type

__all__ = ["convert", "for_type", "for_value"]

log = scoped_logger("schema")

_TYPE_MAP = {
    "string": Type.STRING,
    "number": Type.NUMBER,
    "integer": Type.INTEGER,
    "boolean": Type.BOOLEAN,
    "object": Type.OBJECT,
    "array": Type.ARRAY,
}

_NULL = "null"


def _child(path: str, *segments: str | int) -> str:
    # JSON pointer escaping (RFC 6901)
    escaped = (str(s).replace("~", "~0").replace("/", "~1") for s in segments)
    return "/".join((path, *escaped))


def _omit_zero(value: Any) -> Any:
    if value is None or value == 0:
        return None
    return value


def _map_tag(tag: Any, path: str) -> Type:
    mapped = _TYPE_MAP.get(tag) if isinstance(tag, str) else None
    if mapped is None:
        log.debug("Unrecognized type tag, using OBJECT", extra={"path": path, "tag": tag})
        return Type.OBJECT
    return mapped


def _convert_type(tag: Any, path: str, has_any_of: bool) -> tuple[Type | None, bool]:
    """Classify a ``type`` declaration into (target type, nullable)."""
    if tag is None:
        # The alternatives carry the types
        if has_any_of:
            return None, False
        return Type.OBJECT, False

    if isinstance(tag, str):
        return _map_tag(tag, path), False

    if isinstance(tag, (list, tuple)):
        if len(tag) == 1:
            return _map_tag(tag[0], path), False
        if len(tag) == 2:
            non_null = [t for t in tag if t != _NULL]
            if len(non_null) == 1:
                return _map_tag(non_null[0], path), True

    raise AmbiguousTypeError(
        f"Cannot fold type {tag!r} into a single type; only [X, \"null\"] is supported",
        details={"path": path, "type": tag},
    )


def _convert_enum(values: Any, path: str) -> tuple[str, ...] | None:
    """Re-encode enum values through JSON, requiring every element to be a string."""
    if values is None:
        return None
    if not isinstance(values, (list, tuple)):
        raise EnumEncodingError(
            f"enum must be a list, got {type(values).__name__}",
            details={"path": path, "enum": values},
        )

    try:
        decoded = json.loads(json.dumps(list(values)))
    except (TypeError, ValueError) as exc:
        raise EnumEncodingError(
            f"enum is not JSON-encodable: {exc}",
            details={"path": path},
        ) from exc

    for index, value in enumerate(decoded):
        if not isinstance(value, str):
            raise EnumEncodingError(
                f"enum value {value!r} at index {index} is not a string",
                details={"path": path, "index": index, "value": value},
            )

    return tuple(decoded) or None


def _convert_schema_or_bool(node: Any, path: str) -> Schema:
    if isinstance(node, bool) or not isinstance(node, Mapping):
        raise UnsupportedAlternativeError(
            f"Only object sub-schemas are supported, got {node!r}",
            details={"path": path},
        )
    return _convert_node(node, path)


def _convert_node(source: Mapping[str, Any], path: str) -> Schema:
    any_of: tuple[Schema, ...] | None = None
    raw_any_of = source.get("anyOf")
    if raw_any_of:
        if not isinstance(raw_any_of, (list, tuple)):
            raise UnsupportedAlternativeError(
                "anyOf must be a list of schemas",
                details={"path": _child(path, "anyOf")},
            )
        any_of = tuple(
            _convert_schema_or_bool(alt, _child(path, "anyOf", i))
            for i, alt in enumerate(raw_any_of)
        )

    properties: dict[str, Schema] | None = None
    raw_properties = source.get("properties")
    if raw_properties:
        if not isinstance(raw_properties, Mapping):
            raise UnsupportedAlternativeError(
                "properties must map names to schemas",
                details={"path": _child(path, "properties")},
            )
        properties = {
            name: _convert_schema_or_bool(sub, _child(path, "properties", name))
            for name, sub in raw_properties.items()
        }

    items: Schema | None = None
    if "items" in source:
        raw_items = source["items"]
        if raw_items is None:
            raise ArrayWithoutItemSchemaError(
                "type is array, but items carries no schema",
                details={"path": _child(path, "items")},
            )
        if isinstance(raw_items, (list, tuple)):
            raise UnsupportedAlternativeError(
                "tuple-form items are not supported",
                details={"path": _child(path, "items")},
            )
        typ: Type | None = Type.ARRAY
        items = _convert_schema_or_bool(raw_items, _child(path, "items"))
        tag = source.get("type")
        nullable = isinstance(tag, (list, tuple)) and _NULL in tag
    else:
        typ, nullable = _convert_type(source.get("type"), path, any_of is not None)
        if typ is Type.ARRAY:
            raise ArrayWithoutItemSchemaError(
                "type is array, but no items schema is declared",
                details={"path": path},
            )

    enum = _convert_enum(source.get("enum"), path)

    examples = source.get("examples")
    example = list(examples) if isinstance(examples, (list, tuple)) and examples else None

    required = source.get("required")

    return Schema(
        type=typ,
        nullable=nullable,
        title=source.get("title") or None,
        description=source.get("description") or None,
        format=source.get("format") or None,
        pattern=source.get("pattern") or None,
        enum=enum,
        minimum=source.get("minimum"),
        maximum=source.get("maximum"),
        min_length=_omit_zero(source.get("minLength")),
        max_length=_omit_zero(source.get("maxLength")),
        min_items=_omit_zero(source.get("minItems")),
        max_items=_omit_zero(source.get("maxItems")),
        min_properties=_omit_zero(source.get("minProperties")),
        max_properties=_omit_zero(source.get("maxProperties")),
        items=items,
        properties=properties,
        # property ordering is not emitted
        required=tuple(required) if isinstance(required, (list, tuple)) and required else None,
        any_of=any_of,
        default=source.get("default"),
        example=example,
    )


def convert(source: Mapping[str, Any]) -> Schema:
    """Convert a source-dialect JSON Schema dict into a target Schema.

    Args:
        source: JSON Schema document (as produced by the reflector).

    Returns
    -------
        The converted Schema.

    Raises
    ------
        AmbiguousTypeError: A type union other than ``[X, "null"]``.
        EnumEncodingError: An enum value that is not a string.
        ArrayWithoutItemSchemaError: An array node without an item schema.
        UnsupportedAlternativeError: A boolean or tuple-form sub-schema.

    Example:
        >>> convert({"type": ["string", "null"]})
        Schema(type=<Type.STRING: 'STRING'>, nullable=True, ...)
    """
    if not isinstance(source, Mapping):
        raise UnsupportedAlternativeError(
            f"Schema root must be an object, got {type(source).__name__}",
            details={"path": ""},
        )
    schema = _convert_node(source, "")
    log.debug("Converted schema", extra={"schema_type": schema.type})
    return schema


def for_value(value: Any) -> Schema:
    """Reflect ``value`` and convert the result.

    Reflection failures propagate unchanged as ReflectionError.
    """
    return convert(reflect_value(value))


def for_type(tp: type | Any) -> Schema:
    """Reflect the type ``tp`` and convert the result.

    Example:
        >>> @dataclass
        ... class Recipe:
        ...     recipe_name: str
        >>> for_type(list[Recipe]).to_dict()["items"]["properties"]
        {'recipe_name': {'type': 'STRING'}}
    """
    return convert(reflect_type(tp))
