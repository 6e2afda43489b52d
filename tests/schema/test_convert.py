"""
Tests for genaischema.schema.convert.

Covers the conversion rules from source JSON Schema to the target dialect:
union folding, array precedence, enum re-encoding, count-bound omission,
fallbacks, and the for_type/for_value entry points.
"""

import copy
from dataclasses import dataclass, field
from typing import Optional

import pytest

from genaischema.exceptions import (
    AmbiguousTypeError,
    ArrayWithoutItemSchemaError,
    ConversionError,
    EnumEncodingError,
    UnsupportedAlternativeError,
)
from genaischema.schema import Schema, Type, convert, for_type, for_value

# =============================================================================
# Target Types
# =============================================================================


@dataclass
class Simple:
    text: str
    number: float
    integer: int


@dataclass
class Inner:
    text: str


@dataclass
class Nested:
    inner: Inner
    array: list[Inner]


@dataclass
class Complex:
    __schema_extra__ = {
        "title": "Complex",
        "description": "Example of complex schema generation",
        "minProperties": 3,
        "maxProperties": 4,
    }

    text: str = field(
        default="", metadata={"description": "text field", "minLength": 1, "maxLength": 100}
    )
    direction: str = field(
        default="",
        metadata={
            "title": "Direction",
            "description": "Direction of target",
            "enum": ["NORTH", "SOUTH", "EAST", "WEST"],
            "required": True,
        },
    )
    email: str = field(default="", metadata={"format": "email", "required": True})
    number: float = field(default=0.0, metadata={"maximum": 100.0})
    integer: int = field(default=0, metadata={"minimum": 1, "default": -1})
    abc: str = field(default="", metadata={"pattern": "^[abc]$"})
    array_of_string: list[str] = field(
        default_factory=list, metadata={"minItems": 1, "maxItems": 10}
    )


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """End-to-end conversion scenarios."""

    def test_nullable_string(self):
        """type [string, null] folds into a nullable string."""
        assert convert({"type": ["string", "null"]}) == Schema(type=Type.STRING, nullable=True)

    def test_array_of_strings(self):
        """An array with a string item schema converts both levels."""
        result = convert({"type": "array", "items": {"type": "string"}})

        assert result == Schema(type=Type.ARRAY, items=Schema(type=Type.STRING))

    def test_numeric_enum_rejected(self):
        """Numeric enum values are not strings and fail with EnumEncodingError."""
        with pytest.raises(EnumEncodingError) as exc_info:
            convert({"type": "integer", "enum": [1, 2, 3]})

        assert exc_info.value.code == "ENUM_ENCODING"
        assert exc_info.value.details["index"] == 0


# =============================================================================
# Union Folding
# =============================================================================


class TestUnionFolding:
    """Tests for type-union classification."""

    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("string", Type.STRING),
            ("number", Type.NUMBER),
            ("integer", Type.INTEGER),
            ("boolean", Type.BOOLEAN),
            ("object", Type.OBJECT),
        ],
    )
    def test_nullable_either_order(self, tag, expected):
        """[X, null] and [null, X] both fold to X with nullable set."""
        for union in ([tag, "null"], ["null", tag]):
            result = convert({"type": union})
            assert result.type is expected
            assert result.nullable is True

    def test_single_element_union(self):
        """A one-element union is the same as the bare tag."""
        result = convert({"type": ["integer"]})

        assert result.type is Type.INTEGER
        assert result.nullable is False

    @pytest.mark.parametrize(
        "union",
        [
            ["string", "integer"],
            ["string", "integer", "null"],
            ["null", "null"],
            [],
        ],
    )
    def test_ambiguous_union_rejected(self, union):
        """Any union outside [X, null] fails instead of picking a member."""
        with pytest.raises(AmbiguousTypeError) as exc_info:
            convert({"type": union})

        assert exc_info.value.code == "AMBIGUOUS_TYPE"
        assert exc_info.value.details["type"] == union

    def test_ambiguous_error_is_conversion_error(self):
        """AmbiguousTypeError is catchable as ConversionError and ValueError."""
        with pytest.raises(ConversionError):
            convert({"type": ["string", "boolean"]})
        with pytest.raises(ValueError):
            convert({"type": ["string", "boolean"]})


# =============================================================================
# Arrays
# =============================================================================


class TestArrays:
    """Tests for array resolution."""

    def test_items_win_over_type_tag(self):
        """A node with items is an array whatever its type tag says."""
        result = convert({"type": "string", "items": {"type": "integer"}})

        assert result.type is Type.ARRAY
        assert result.items == Schema(type=Type.INTEGER)

    def test_items_with_ambiguous_tag_not_an_error(self):
        """A stray union tag next to items is ignored, not rejected."""
        result = convert({"type": ["string", "integer"], "items": {"type": "boolean"}})

        assert result.type is Type.ARRAY
        assert result.nullable is False

    def test_nullable_array(self):
        """[array, null] with items keeps the nullable flag."""
        result = convert({"type": ["array", "null"], "items": {"type": "string"}})

        assert result.type is Type.ARRAY
        assert result.nullable is True

    def test_array_without_items(self):
        """type array with no items schema is an error."""
        with pytest.raises(ArrayWithoutItemSchemaError) as exc_info:
            convert({"type": "array"})

        assert exc_info.value.code == "ARRAY_WITHOUT_ITEM_SCHEMA"

    def test_null_items(self):
        """items explicitly set to null carries no schema."""
        with pytest.raises(ArrayWithoutItemSchemaError):
            convert({"type": "array", "items": None})

    def test_nested_arrays(self):
        result = convert({"type": "array", "items": {"type": "array", "items": {"type": "number"}}})

        assert result.items.type is Type.ARRAY
        assert result.items.items.type is Type.NUMBER


# =============================================================================
# Alternatives
# =============================================================================


class TestAlternatives:
    """Tests for anyOf and boolean sub-schemas."""

    def test_any_of_converted_independently(self):
        """Each anyOf alternative becomes its own Schema."""
        result = convert({"anyOf": [{"type": "string"}, {"type": ["integer", "null"]}]})

        assert result.type is None
        assert result.any_of == (
            Schema(type=Type.STRING),
            Schema(type=Type.INTEGER, nullable=True),
        )

    @pytest.mark.parametrize(
        "source",
        [
            {"anyOf": [True]},
            {"type": "array", "items": False},
            {"type": "object", "properties": {"a": True}},
            {"type": "array", "items": [{"type": "string"}]},
        ],
    )
    def test_non_object_sub_schema_rejected(self, source):
        """Boolean and tuple-form sub-schemas are unsupported."""
        with pytest.raises(UnsupportedAlternativeError) as exc_info:
            convert(source)

        assert exc_info.value.code == "UNSUPPORTED_ALTERNATIVE"

    @pytest.mark.parametrize("properties", [["a", "b"], "name"])
    def test_non_mapping_properties_rejected(self, properties):
        """A properties value that is not a name->schema map reports its path."""
        source = {"type": "object", "properties": {"inner": {"properties": properties}}}

        with pytest.raises(UnsupportedAlternativeError) as exc_info:
            convert(source)

        assert exc_info.value.details["path"] == "/properties/inner/properties"

    def test_non_mapping_root_rejected(self):
        with pytest.raises(UnsupportedAlternativeError):
            convert(True)

    def test_nested_failure_fails_whole_conversion(self):
        """An error deep in the tree aborts the call and reports its path."""
        source = {
            "type": "object",
            "properties": {
                "ok": {"type": "string"},
                "bad": {"type": "object", "properties": {"x/y": {"type": ["string", "integer"]}}},
            },
        }

        with pytest.raises(AmbiguousTypeError) as exc_info:
            convert(source)

        assert exc_info.value.details["path"] == "/properties/bad/properties/x~1y"


# =============================================================================
# Enums
# =============================================================================


class TestEnums:
    """Tests for enum re-encoding."""

    def test_string_enum_preserves_order(self):
        values = ["NORTH", "SOUTH", "EAST", "WEST"]

        result = convert({"type": "string", "enum": values})

        assert result.enum == tuple(values)

    def test_unicode_enum_values(self):
        result = convert({"type": "string", "enum": ["café", "日本"]})

        assert result.enum == ("café", "日本")

    @pytest.mark.parametrize("bad", [True, 1.5, None, {"a": 1}, ["x"]])
    def test_non_string_element_rejected(self, bad):
        """A single non-string element fails the whole enum."""
        with pytest.raises(EnumEncodingError):
            convert({"type": "string", "enum": ["ok", bad]})

    def test_non_list_enum_rejected(self):
        with pytest.raises(EnumEncodingError):
            convert({"type": "string", "enum": "NORTH"})

    def test_empty_enum_omitted(self):
        assert convert({"type": "string", "enum": []}).enum is None


# =============================================================================
# Constraints
# =============================================================================


class TestConstraints:
    """Tests for constraint carry-over."""

    @pytest.mark.parametrize(
        "key, attr",
        [
            ("minLength", "min_length"),
            ("maxLength", "max_length"),
            ("minItems", "min_items"),
            ("maxItems", "max_items"),
            ("minProperties", "min_properties"),
            ("maxProperties", "max_properties"),
        ],
    )
    def test_zero_count_bound_omitted(self, key, attr):
        """A zero count bound is dropped; a non-zero one is copied exactly."""
        base = {"type": "array", "items": {"type": "string"}}

        assert getattr(convert({**base, key: 0}), attr) is None
        assert getattr(convert({**base, key: 7}), attr) == 7
        assert key not in convert({**base, key: 0}).to_dict()

    def test_scalar_constraints_copied(self):
        source = {
            "type": "number",
            "title": "Score",
            "description": "A score",
            "format": "double",
            "minimum": 0,
            "maximum": 10.5,
        }

        result = convert(source)

        assert result.title == "Score"
        assert result.description == "A score"
        assert result.format == "double"
        assert result.minimum == 0
        assert result.maximum == 10.5

    def test_pattern_copied(self):
        assert convert({"type": "string", "pattern": "^[abc]$"}).pattern == "^[abc]$"

    def test_default_copied_verbatim(self):
        """Falsy defaults survive conversion and rendering."""
        result = convert({"type": "boolean", "default": False})

        assert result.default is False
        assert result.to_dict()["default"] is False

    def test_examples_collapse_to_single_example(self):
        """Non-empty examples become one aggregate example value."""
        result = convert({"type": "string", "examples": ["a", "b"]})

        assert result.example == ("a", "b")
        assert result.to_dict()["example"] == ["a", "b"]
        assert "examples" not in result.to_dict()

    def test_empty_examples_omitted(self):
        assert convert({"type": "string", "examples": []}).example is None

    def test_required_order_preserved(self):
        source = {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "string"}},
            "required": ["b", "a"],
        }

        assert convert(source).required == ("b", "a")


# =============================================================================
# Fallbacks
# =============================================================================


class TestFallbacks:
    """Tests for permissive fallback rules."""

    def test_unknown_tag_becomes_object(self):
        assert convert({"type": "date"}).type is Type.OBJECT

    def test_missing_type_becomes_object(self):
        assert convert({}).type is Type.OBJECT

    def test_null_tag_alone_becomes_object(self):
        assert convert({"type": "null"}).type is Type.OBJECT


# =============================================================================
# Purity
# =============================================================================


class TestPurity:
    """Conversion is a pure function of its input."""

    def test_idempotent(self):
        source = {
            "type": "object",
            "properties": {
                "tags": {"type": ["array", "null"], "items": {"type": "string"}, "minItems": 0},
                "kind": {"type": "string", "enum": ["a", "b"]},
            },
            "required": ["kind"],
        }

        assert convert(source) == convert(source)
        assert convert(source).to_dict() == convert(source).to_dict()

    def test_source_not_mutated(self):
        source = {"type": ["string", "null"], "examples": ["x"], "enum": ["x", "y"]}
        before = copy.deepcopy(source)

        convert(source)

        assert source == before


# =============================================================================
# Entry Points
# =============================================================================


class TestForValue:
    """Tests for for_value() on struct-like values."""

    def test_simple(self):
        result = for_value(Simple(text="", number=0.0, integer=0))

        assert result.to_dict() == {
            "type": "OBJECT",
            "title": "Simple",
            "properties": {
                "text": {"type": "STRING"},
                "number": {"type": "NUMBER"},
                "integer": {"type": "INTEGER"},
            },
            "required": ["text", "number", "integer"],
        }

    def test_nested(self):
        inner = {
            "type": "OBJECT",
            "title": "Inner",
            "properties": {"text": {"type": "STRING"}},
            "required": ["text"],
        }

        result = for_value(Nested(inner=Inner(""), array=[]))

        assert result.to_dict()["properties"] == {
            "inner": inner,
            "array": {"type": "ARRAY", "items": inner},
        }

    def test_complex(self):
        result = for_value(Complex())

        assert result.to_dict() == {
            "type": "OBJECT",
            "title": "Complex",
            "description": "Example of complex schema generation",
            "minProperties": 3,
            "maxProperties": 4,
            "properties": {
                "text": {
                    "type": "STRING",
                    "description": "text field",
                    "minLength": 1,
                    "maxLength": 100,
                },
                "direction": {
                    "type": "STRING",
                    "title": "Direction",
                    "description": "Direction of target",
                    "enum": ["NORTH", "SOUTH", "EAST", "WEST"],
                },
                "email": {"type": "STRING", "format": "email"},
                "number": {"type": "NUMBER", "maximum": 100.0},
                "integer": {"type": "INTEGER", "minimum": 1, "default": -1},
                "abc": {"type": "STRING", "pattern": "^[abc]$"},
                "array_of_string": {
                    "type": "ARRAY",
                    "items": {"type": "STRING"},
                    "minItems": 1,
                    "maxItems": 10,
                },
            },
            "required": ["direction", "email"],
        }

    def test_list_value_uses_first_element(self):
        result = for_value([Inner("a"), Inner("b")])

        assert result.type is Type.ARRAY
        assert result.items.title == "Inner"

    def test_schema_dict_passes_through(self):
        assert for_value({"type": ["string", "null"]}) == Schema(type=Type.STRING, nullable=True)


class TestForType:
    """Tests for for_type()."""

    def test_list_of_dataclass(self):
        result = for_type(list[Inner])

        assert result.type is Type.ARRAY
        assert result.items.properties == {"text": Schema(type=Type.STRING)}

    def test_optional(self):
        assert for_type(Optional[str]) == Schema(type=Type.STRING, nullable=True)

    def test_union_becomes_any_of(self):
        result = for_type(int | str)

        assert result.any_of == (Schema(type=Type.INTEGER), Schema(type=Type.STRING))

    def test_optional_union_marks_alternatives_nullable(self):
        """int | str | None becomes two nullable alternatives."""
        result = for_type(int | str | None)

        assert result.type is None
        assert result.any_of == (
            Schema(type=Type.INTEGER, nullable=True),
            Schema(type=Type.STRING, nullable=True),
        )

    def test_conversion_error_propagates(self):
        """A reflected enum of integers fails at conversion time."""
        from enum import IntEnum

        class Level(IntEnum):
            LOW = 1
            HIGH = 2

        with pytest.raises(EnumEncodingError):
            for_type(Level)
