"""Schema reflection and conversion (Python types to Gemini response schemas)."""

from .convert import convert, for_type, for_value
from .reflect import (
    MAX_SCHEMA_DEPTH,
    dataclass_to_schema,
    reflect_type,
    reflect_value,
    typeddict_to_schema,
)
from .types import Schema, Type

__all__ = [
    "MAX_SCHEMA_DEPTH",
    "Schema",
    "Type",
    "convert",
    "dataclass_to_schema",
    "for_type",
    "for_value",
    "reflect_type",
    "reflect_value",
    "typeddict_to_schema",
]
