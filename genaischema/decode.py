"""Decode candidate text into dataclass, TypedDict, Pydantic model or plain values."""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Literal, cast, get_args, get_origin, is_typeddict

from .exceptions import DecodeError

__all__ = ["coerce_enum", "decode", "hydrate", "is_enumerable"]


def _is_pydantic_model(cls: type | Any) -> bool:
    """Check if cls is a Pydantic BaseModel (without importing pydantic)."""
    return isinstance(cls, type) and callable(getattr(cls, "model_validate", None))


def is_enumerable(tp: Any) -> bool:
    """True for Enum subclasses and str subclasses with an ``enum()`` classmethod."""
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    if issubclass(tp, Enum):
        return True
    return issubclass(tp, str) and callable(getattr(tp, "enum", None))


def _expect(data: Any, kinds: type | tuple[type, ...], tp: Any) -> None:
    if not isinstance(data, kinds) or (isinstance(data, bool) and bool not in _as_tuple(kinds)):
        raise TypeError(f"expected {getattr(tp, '__name__', tp)}, got {type(data).__name__}")


def _as_tuple(kinds: type | tuple[type, ...]) -> tuple[type, ...]:
    return kinds if isinstance(kinds, tuple) else (kinds,)


def hydrate(tp: Any, data: Any) -> Any:
    """Recursively convert parsed JSON into an instance of ``tp``.

    Supports:
    - Pydantic BaseModel: Uses model_validate() (no pydantic import needed)
    - dataclass: Fields hydrated recursively; unknown keys are ignored
    - TypedDict: Keys hydrated recursively; unknown keys are dropped
    - list[T] / tuple[T, ...] / set[T], Optional[T], Literal, Enum
    - str, int, float, bool (type-checked, ints accepted for float)

    Raises
    ------
        TypeError: If the data does not fit the type.
        ValueError: If an Enum or Pydantic model rejects the value.
    """
    origin = get_origin(tp)
    args = get_args(tp)

    if origin is typing.Annotated:
        return hydrate(args[0], data)

    if tp is Any or tp is object:
        return data

    if origin is typing.Union or origin is types.UnionType:
        if data is None and type(None) in args:
            return None
        non_none_args = [arg for arg in args if arg is not type(None)]
        if len(non_none_args) == 1:
            return hydrate(non_none_args[0], data)
        for arg in non_none_args:
            try:
                return hydrate(arg, data)
            except (TypeError, ValueError):
                continue
        raise TypeError(f"value {data!r} matches no member of {tp}")

    if origin is Literal:
        if data not in args:
            raise ValueError(f"{data!r} is not one of {list(args)}")
        return data

    if origin in (list, tuple, set, frozenset, Sequence) or tp in (list, tuple, set, frozenset):
        _expect(data, list, tp)
        item_type = args[0] if args else Any
        items = [hydrate(item_type, item) for item in data]
        container = origin if origin in (tuple, set, frozenset) else tp
        if container in (tuple, set, frozenset):
            return container(items)
        return items

    if origin in (dict, Mapping) or tp is dict:
        _expect(data, dict, tp)
        if len(args) == 2:
            return {key: hydrate(args[1], value) for key, value in data.items()}
        return data

    # Pydantic v2 models have model_validate method
    if _is_pydantic_model(tp):
        return tp.model_validate(data)

    if is_typeddict(tp):
        _expect(data, dict, tp)
        hints = typing.get_type_hints(tp)
        missing = sorted(set(getattr(tp, "__required_keys__", ())) - set(data))
        if missing:
            raise TypeError(f"{tp.__name__} missing required key(s): {', '.join(missing)}")
        # Unknown keys are dropped, as for dataclasses
        return {key: hydrate(hints[key], value) for key, value in data.items() if key in hints}

    if dataclasses.is_dataclass(tp):
        _expect(data, dict, tp)
        hints = typing.get_type_hints(tp)
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(tp):
            if f.name in data and f.init:
                kwargs[f.name] = hydrate(hints.get(f.name, f.type), data[f.name])
        return cast(type, tp)(**kwargs)

    if is_enumerable(tp):
        return tp(data)

    if tp is bool:
        _expect(data, bool, tp)
        return data
    if tp is int:
        _expect(data, int, tp)
        return data
    if tp is float:
        _expect(data, (int, float), tp)
        return float(data)
    if tp is str:
        _expect(data, str, tp)
        return data

    return data


def decode(tp: Any, text: str, index: int | None = None) -> Any:
    """Parse a candidate's JSON text and hydrate it into ``tp``.

    Raises
    ------
        DecodeError: If the text is not JSON or does not fit ``tp``.
    """
    try:
        data = json.loads(text)
        return hydrate(tp, data)
    except (json.JSONDecodeError, TypeError, ValueError) as exc:
        raise DecodeError(text, exc, index=index) from exc


def coerce_enum(tp: type, text: str, index: int | None = None) -> Any:
    """Convert raw enum text into ``tp``.

    For str subclasses the text is wrapped without checking it against
    ``tp.enum()``. Enum subclasses look the value up themselves; a miss is
    reported as DecodeError.
    """
    try:
        return tp(text)
    except ValueError as exc:
        raise DecodeError(text, exc, index=index) from exc
