"""Reflect Python types into source-dialect JSON Schema.

Supported types:
  - str, int, float, bool
  - list[T], tuple[T, ...], set[T] (and bare list)
  - Optional[T] / T | None: emitted as ``type: [T, "null"]``
  - Union of several types: emitted as ``anyOf``
  - Literal[...] and Enum subclasses: emitted as ``enum``
  - str subclasses with an ``enum()`` classmethod: emitted as string ``enum``
  - dataclass: Converted via dataclass_to_schema()
  - TypedDict: Converted via typeddict_to_schema()
  - Pydantic BaseModel: Converted via model_json_schema(), with ``$ref``
    references inlined (no pydantic import needed)
  - dict[str, T]: emitted as a bare object

Dataclass fields carry constraints in their metadata::

    @dataclass
    class Item:
        name: str = field(metadata={"description": "Item name", "minLength": 1})

Object-level constraints go in a ``__schema_extra__`` class attribute::

    @dataclass
    class Order:
        __schema_extra__ = {"title": "Order", "minProperties": 1}
        items: list[Item]
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Literal, get_args, get_origin, is_typeddict

from ..exceptions import ReflectionError

__all__ = [
    "MAX_SCHEMA_DEPTH",
    "dataclass_to_schema",
    "inline_refs",
    "pydantic_to_schema",
    "reflect_type",
    "reflect_value",
    "typeddict_to_schema",
]

MAX_SCHEMA_DEPTH = 32

# Field metadata keys copied into the property schema verbatim
_FIELD_METADATA_KEYS = (
    "title",
    "description",
    "format",
    "pattern",
    "enum",
    "minimum",
    "maximum",
    "minLength",
    "maxLength",
    "minItems",
    "maxItems",
    "minProperties",
    "maxProperties",
    "default",
    "examples",
)

# Keys whose values are (maps of, lists of) sub-schemas
_SCHEMA_MAP_KEYS = ("properties", "patternProperties")
_SCHEMA_KEYS = ("items", "additionalProperties", "not", "anyOf", "oneOf", "allOf", "prefixItems")

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence)


def _get_type_name(t: type[Any] | Any) -> str:
    return getattr(t, "__name__", str(t))


def _is_pydantic_model(t: Any) -> bool:
    """Check if t is a Pydantic BaseModel class (without importing pydantic)."""
    return isinstance(t, type) and callable(getattr(t, "model_json_schema", None))


def _is_enumerable_str(t: Any) -> bool:
    """str subclass that lists its own legal values via ``enum()``."""
    return isinstance(t, type) and issubclass(t, str) and callable(getattr(t, "enum", None))


def _literal_type(values: Sequence[Any]) -> str | None:
    if all(isinstance(v, str) for v in values):
        return "string"
    if all(isinstance(v, bool) for v in values):
        return "boolean"
    if all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return "integer"
    if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return "number"
    return None


def _enum_schema(values: Sequence[Any]) -> dict[str, Any]:
    schema: dict[str, Any] = {}
    tag = _literal_type(values)
    if tag is not None:
        schema["type"] = tag
    schema["enum"] = list(values)
    return schema


def _make_nullable(schema: dict[str, Any]) -> dict[str, Any]:
    tag = schema.get("type")
    if isinstance(tag, str) and tag != "null":
        schema["type"] = [tag, "null"]
    return schema


def _py_type_to_json_schema(t: type | Any, active: frozenset[Any] = frozenset()) -> dict[str, Any]:
    """Recursively convert a Python type to a JSON schema dict.

    ``active`` holds the object types currently being expanded; meeting one
    again means the type is recursive, which has no inline schema.
    """
    origin = get_origin(t)
    args = get_args(t)

    if origin is typing.Annotated:
        return _py_type_to_json_schema(args[0], active)

    if origin is typing.Union or origin is types.UnionType:
        non_none_args = [arg for arg in args if arg is not type(None)]
        if len(non_none_args) == 1:
            return _make_nullable(_py_type_to_json_schema(non_none_args[0], active))
        alternatives = [_py_type_to_json_schema(arg, active) for arg in non_none_args]
        if len(non_none_args) < len(args):
            # (A | B | None) == (A | None) | (B | None)
            alternatives = [_make_nullable(alt) for alt in alternatives]
        return {"anyOf": alternatives}

    if origin is Literal:
        return _enum_schema(args)

    if t is Any or t is object:
        return {}

    # Bare `list` has no origin; `list[T]` has origin list
    if origin in _SEQUENCE_ORIGINS or t in (list, tuple, set, frozenset):
        item_type = args[0] if args else Any
        return {"type": "array", "items": _py_type_to_json_schema(item_type, active)}

    if origin in (dict, Mapping) or t is dict:
        return {"type": "object"}

    if _is_pydantic_model(t):
        return pydantic_to_schema(t)

    if dataclasses.is_dataclass(t) or is_typeddict(t):
        if t in active:
            raise ReflectionError(
                f"Recursive type {_get_type_name(t)} cannot be inlined",
                details={"type": _get_type_name(t)},
            )
        if is_typeddict(t):
            return _typeddict_schema(t, active | {t})
        return _dataclass_schema(t, active | {t})

    if isinstance(t, type) and issubclass(t, Enum):
        return _enum_schema([e.value for e in t])

    if _is_enumerable_str(t):
        return {"type": "string", "enum": list(t.enum())}

    if t is str:
        return {"type": "string"}
    if t is bool:
        return {"type": "boolean"}
    if t is int:
        return {"type": "integer"}
    if t is float:
        return {"type": "number"}

    raise ReflectionError(
        f"Cannot reflect type {_get_type_name(t)}",
        details={"type": _get_type_name(t)},
    )


def _resolve_hints(model: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(model)
    except (NameError, TypeError) as exc:
        raise ReflectionError(
            f"Cannot resolve annotations of {_get_type_name(model)}: {exc}",
            details={"type": _get_type_name(model)},
        ) from exc


def _object_schema(model: type, properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "type": "object",
        "title": getattr(model, "__name__", str(model)),
        "properties": properties,
    }

    if required:
        schema["required"] = required

    extra = getattr(model, "__schema_extra__", None)
    if isinstance(extra, Mapping):
        schema.update(extra)

    return schema


def dataclass_to_schema(model: type | Any) -> dict[str, Any]:
    """Convert a python dataclass to JSON Schema (Draft 2020-12 compatible)."""
    if not dataclasses.is_dataclass(model):
        raise ReflectionError(f"Target must be a dataclass, got {_get_type_name(model)}")
    return _dataclass_schema(model, frozenset({model}))


def _dataclass_schema(model: Any, active: frozenset[Any]) -> dict[str, Any]:
    hints = _resolve_hints(model)
    properties: dict[str, Any] = {}
    required: list[str] = []

    for field in dataclasses.fields(model):
        field_schema = _py_type_to_json_schema(hints.get(field.name, field.type), active)
        for key in _FIELD_METADATA_KEYS:
            if key in field.metadata:
                field_schema[key] = field.metadata[key]
        properties[field.name] = field_schema

        has_default = (
            field.default is not dataclasses.MISSING
            or field.default_factory is not dataclasses.MISSING
        )
        if not has_default or field.metadata.get("required"):
            required.append(field.name)

    return _object_schema(model, properties, required)


def typeddict_to_schema(td: type) -> dict[str, Any]:
    """Convert a TypedDict to JSON Schema (Draft 2020-12 compatible)."""
    if not is_typeddict(td):
        raise ReflectionError(f"Target must be a TypedDict, got {_get_type_name(td)}")
    return _typeddict_schema(td, frozenset({td}))


def _typeddict_schema(td: Any, active: frozenset[Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for name, type_hint in _resolve_hints(td).items():
        properties[name] = _py_type_to_json_schema(type_hint, active)

    # __required_keys__ is a frozenset; keep declaration order
    required = [name for name in properties if name in td.__required_keys__]
    return _object_schema(td, properties, required)


def pydantic_to_schema(model: type) -> dict[str, Any]:
    """Convert a Pydantic v2 model via model_json_schema(), inlining ``$ref``."""
    schema = model.model_json_schema()
    if not isinstance(schema, dict):
        raise ReflectionError(
            f"model_json_schema() returned {type(schema).__name__}, expected dict",
            details={"type": _get_type_name(model)},
        )
    return inline_refs(schema)


# =============================================================================
# $ref inlining and normalization
# =============================================================================


def _is_null_schema(node: Any) -> bool:
    return isinstance(node, dict) and node.get("type") == "null" and len(node) == 1


def _normalize(node: dict[str, Any]) -> dict[str, Any]:
    """Rewrite pydantic idioms into the shapes the converter understands."""
    # allOf: [X] is pydantic v1's way of attaching a description to a $ref
    all_of = node.get("allOf")
    if isinstance(all_of, list) and len(all_of) == 1 and isinstance(all_of[0], dict):
        rest = {k: v for k, v in node.items() if k != "allOf"}
        node = {**all_of[0], **rest}

    if "oneOf" in node and "anyOf" not in node:
        node["anyOf"] = node.pop("oneOf")

    if "const" in node and "enum" not in node:
        node["enum"] = [node.pop("const")]

    # anyOf: [X, {"type": "null"}] -> X with type [x, "null"]
    any_of = node.get("anyOf")
    if isinstance(any_of, list) and len(any_of) == 2:
        nulls = [alt for alt in any_of if _is_null_schema(alt)]
        others = [alt for alt in any_of if not _is_null_schema(alt)]
        if len(nulls) == 1 and isinstance(others[0], dict):
            other = others[0]
            if isinstance(other.get("type"), str):
                rest = {k: v for k, v in node.items() if k != "anyOf"}
                node = _make_nullable({**other, **rest})

    return node


def inline_refs(schema: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``schema`` with every local ``$ref`` replaced by its target.

    Recursive references cannot be inlined and raise ReflectionError.
    """
    defs = schema.get("$defs") or schema.get("definitions") or {}

    def resolve(node: Any, active: frozenset[str]) -> Any:
        if isinstance(node, list):
            return [resolve(item, active) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            if not ref.startswith(("#/$defs/", "#/definitions/")):
                raise ReflectionError(f"Unsupported schema $ref: {ref}", details={"ref": ref})
            def_name = ref.rsplit("/", 1)[-1]
            target = defs.get(def_name)
            if target is None:
                raise ReflectionError(f"Schema $ref not found: {ref}", details={"ref": ref})
            if def_name in active:
                raise ReflectionError(
                    f"Recursive schema $ref cannot be inlined: {ref}",
                    details={"ref": ref},
                )
            siblings = {k: v for k, v in node.items() if k != "$ref"}
            return resolve({**target, **siblings}, active | {def_name})

        out: dict[str, Any] = {}
        for key, value in node.items():
            if key in ("$defs", "definitions"):
                continue
            if key in _SCHEMA_MAP_KEYS and isinstance(value, dict):
                out[key] = {name: resolve(sub, active) for name, sub in value.items()}
            elif key in _SCHEMA_KEYS:
                out[key] = resolve(value, active)
            else:
                out[key] = value
        return _normalize(out)

    return resolve(schema, frozenset())


def _validate_schema_depth(schema: dict[str, Any]) -> None:
    def walk(node: Any, depth: int) -> None:
        if depth > MAX_SCHEMA_DEPTH:
            raise ReflectionError(
                f"Schema nesting exceeds {MAX_SCHEMA_DEPTH} levels; consider simplifying the model."
            )
        if not isinstance(node, dict):
            return

        for key in _SCHEMA_MAP_KEYS:
            props = node.get(key)
            if isinstance(props, dict):
                for value in props.values():
                    walk(value, depth + 1)

        for key in _SCHEMA_KEYS:
            value = node.get(key)
            if isinstance(value, list):
                for item in value:
                    walk(item, depth + 1)
            elif isinstance(value, dict):
                walk(value, depth + 1)

    walk(schema, 0)


# =============================================================================
# Public entry points
# =============================================================================


def reflect_type(tp: type | Any) -> dict[str, Any]:
    """Reflect a Python type into a source-dialect schema dict.

    Raises
    ------
        ReflectionError: If the type is unsupported or the schema is too deep.
    """
    schema = _py_type_to_json_schema(tp)
    _validate_schema_depth(schema)
    return schema


def reflect_value(value: Any) -> dict[str, Any]:
    """Reflect the type of a value into a source-dialect schema dict.

    A ``dict`` is taken to be a JSON Schema already and is returned with its
    references inlined. Non-empty lists and tuples reflect their first element
    as the item type.
    """
    if isinstance(value, dict):
        schema = inline_refs(value)
    elif isinstance(value, (list, tuple)):
        items = reflect_value(value[0]) if value else {}
        schema = {"type": "array", "items": items}
    elif isinstance(value, type) or get_origin(value) is not None:
        schema = _py_type_to_json_schema(value)
    else:
        schema = _py_type_to_json_schema(type(value))
    _validate_schema_depth(schema)
    return schema
