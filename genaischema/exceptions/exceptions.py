"""
genaischema exceptions.

This module defines the exception hierarchy for genaischema:

    GenAISchemaError (base)
    ├── ReflectionError - A Python type could not be described as a schema
    ├── ConversionError - The source schema cannot be expressed for Gemini
    │   ├── AmbiguousTypeError - Type union outside the ``[X, "null"]`` shape
    │   ├── EnumEncodingError - Enum value that is not a JSON string
    │   ├── ArrayWithoutItemSchemaError - Array node with no item schema
    │   └── UnsupportedAlternativeError - Boolean or tuple sub-schema
    ├── ClientError - The model call failed
    ├── DecodeError - A candidate could not be decoded into the target type
    ├── EmptyResponseError - No usable candidate where one was required
    └── ValidationError - Invalid parameter value

Usage:
    try:
        recipe = genaischema.first_object(Recipe, "Give me a recipe", client=client)
    except genaischema.EmptyResponseError:
        print("Model returned nothing")
    except genaischema.DecodeError as e:
        print(f"Unusable output: {e.raw_text}")
    except genaischema.GenAISchemaError as e:
        print(f"Error {e.code}: {e}")
        print(f"Details: {e.details}")
"""

import json
from typing import Any

__all__ = [
    # Base
    "GenAISchemaError",
    # Reflection
    "ReflectionError",
    # Conversion
    "ConversionError",
    "AmbiguousTypeError",
    "EnumEncodingError",
    "ArrayWithoutItemSchemaError",
    "UnsupportedAlternativeError",
    # Client
    "ClientError",
    # Decoding
    "DecodeError",
    "EmptyResponseError",
    # Validation
    "ValidationError",
]


class GenAISchemaError(Exception):
    """
    Base exception for all genaischema errors.

    Attributes
    ----------
    message : str
        Human-readable error description.
    code : str
        Stable, string-based error code (e.g., "AMBIGUOUS_TYPE").
        Use this for programmatic error handling.
    details : dict[str, Any]
        Structured context (e.g., {"path": "/properties/name"}).

    Example
    -------
    >>> try:
    ...     genaischema.convert({"type": ["string", "integer"]})
    ... except genaischema.GenAISchemaError as e:
    ...     print(f"Error code: {e.code}")
    ...     print(f"Details: {e.details}")
    Error code: AMBIGUOUS_TYPE
    Details: {'path': '', 'type': ['string', 'integer']}
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, code={self.code!r})"


# =============================================================================
# Reflection Errors
# =============================================================================


class ReflectionError(GenAISchemaError, TypeError):
    """
    A Python type could not be described as a source schema.

    Raised by the reflector (and so by ``for_type``/``for_value``) when:
    - The type is not one of the supported shapes
    - A Pydantic schema contains a recursive ``$ref``
    - Nesting exceeds ``MAX_SCHEMA_DEPTH``
    """

    def __init__(
        self,
        message: str,
        code: str = "REFLECTION_FAILED",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


# =============================================================================
# Conversion Errors
# =============================================================================


class ConversionError(GenAISchemaError, ValueError):
    """
    Base class for schema conversion failures.

    Every conversion error is terminal: the converter never returns a
    partial schema. ``details["path"]`` locates the offending node using
    JSON-pointer syntax (``""`` is the root).
    """

    def __init__(
        self,
        message: str,
        code: str = "CONVERSION_FAILED",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class AmbiguousTypeError(ConversionError):
    """
    Type union that cannot be folded into a single type.

    Only ``[X, "null"]`` (in either order) is supported. Two non-null
    members, three or more members, or an empty union raise this error.
    """

    def __init__(
        self,
        message: str,
        code: str = "AMBIGUOUS_TYPE",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class EnumEncodingError(ConversionError):
    """Enum element that does not survive re-encoding as a JSON string."""

    def __init__(
        self,
        message: str,
        code: str = "ENUM_ENCODING",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class ArrayWithoutItemSchemaError(ConversionError):
    """Node claims to be an array but carries no item schema."""

    def __init__(
        self,
        message: str,
        code: str = "ARRAY_WITHOUT_ITEM_SCHEMA",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class UnsupportedAlternativeError(ConversionError):
    """
    Sub-schema that is not an object.

    The target dialect only accepts object-shaped sub-schemas, so boolean
    schemas (``true``/``false``) and tuple-form ``items`` are rejected.
    """

    def __init__(
        self,
        message: str,
        code: str = "UNSUPPORTED_ALTERNATIVE",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(GenAISchemaError, RuntimeError):
    """
    The model call failed.

    Raised by client adapters when the underlying SDK reports a transport
    or API error. The original exception is chained as ``__cause__``.
    genaischema never retries.
    """

    def __init__(
        self,
        message: str,
        code: str = "CLIENT_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


# =============================================================================
# Decode Errors
# =============================================================================


class DecodeError(GenAISchemaError, ValueError):
    """
    A candidate's text could not be decoded into the target type.

    Raised when the text is not valid JSON, when the JSON does not fit the
    target type, or when enum coercion fails.

    Attributes
    ----------
        raw_text: The candidate text that failed to decode
        partial_data: Parsed JSON if the text was valid JSON, else None
        index: Position of the candidate in the response (or None)
        cause: The underlying parse or hydration error
    """

    def __init__(
        self,
        raw_text: str,
        cause: Exception,
        index: int | None = None,
        code: str = "DECODE_FAILED",
    ):
        self.raw_text = raw_text
        try:
            self.partial_data = json.loads(raw_text)
        except (json.JSONDecodeError, TypeError):
            self.partial_data = None
        self.index = index
        self.cause = cause
        where = f"candidate {index}" if index is not None else "candidate"
        super().__init__(
            f"Failed to decode {where}: {cause}",
            code,
            {"raw_text": raw_text, "partial_data": self.partial_data, "index": index},
        )


class EmptyResponseError(GenAISchemaError, LookupError):
    """The model returned no usable candidate where one was required."""

    def __init__(
        self,
        message: str | None = None,
        code: str = "EMPTY_RESPONSE",
        details: dict[str, Any] | None = None,
    ):
        if message is None:
            message = "empty response from model"
        super().__init__(message, code, details)


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(GenAISchemaError, ValueError):
    """
    Invalid parameter value.

    Raised when a function receives an argument of the correct type
    but an inappropriate value (e.g., a non-enumerable type passed to
    ``first_enum``).

    This exception inherits from both GenAISchemaError and ValueError::

        except genaischema.GenAISchemaError:   # catches all genaischema errors
        except ValueError:                     # catches validation errors (Pythonic)
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)
