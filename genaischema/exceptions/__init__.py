"""
genaischema exceptions.

    GenAISchemaError (base)
    ├── ReflectionError - A Python type could not be described as a schema
    ├── ConversionError - The source schema cannot be expressed for Gemini
    │   ├── AmbiguousTypeError
    │   ├── EnumEncodingError
    │   ├── ArrayWithoutItemSchemaError
    │   └── UnsupportedAlternativeError
    ├── ClientError - The model call failed
    ├── DecodeError - A candidate could not be decoded
    ├── EmptyResponseError - No usable candidate
    └── ValidationError - Invalid parameter value
"""

from .exceptions import (
    AmbiguousTypeError,
    ArrayWithoutItemSchemaError,
    ClientError,
    ConversionError,
    DecodeError,
    EmptyResponseError,
    EnumEncodingError,
    GenAISchemaError,
    ReflectionError,
    UnsupportedAlternativeError,
    ValidationError,
)

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
