"""
genaischema - Typed controlled generation for Gemini.

Describe the output you want as a Python type; genaischema turns it into a
Gemini response schema, sends the request and decodes the candidates back
into that type.

Quick Start
-----------

    >>> from dataclasses import dataclass
    >>> import genaischema
    >>> from genaischema.client import GenaiClient
    >>>
    >>> @dataclass
    ... class Recipe:
    ...     recipe_name: str
    ...     ingredients: list[str]
    >>>
    >>> client = GenaiClient()  # google.genai.Client() under the hood
    >>> recipes = genaischema.first_object(
    ...     list[Recipe], "List a few popular cookie recipes.", client=client
    ... )

Several candidates, decoded lazily:

    >>> config = genaischema.GenerationConfig(candidate_count=3)
    >>> with genaischema.object_candidates(Recipe, prompt, config, client=client) as stream:
    ...     for recipe in stream:
    ...         print(recipe.recipe_name)

Enum classification:

    >>> class Category(str):
    ...     @classmethod
    ...     def enum(cls):
    ...         return ["Percussion", "String", "Woodwind", "Brass", "Keyboard"]
    >>> genaischema.first_enum(Category, "What kind of instrument is an oboe?", client=client)
    'Woodwind'

Schemas only:

    >>> genaischema.for_type(Recipe).to_dict()
    {'type': 'OBJECT', 'title': 'Recipe', 'properties': {...}, 'required': [...]}
    >>> genaischema.convert({"type": ["string", "null"]})
    Schema(type=<Type.STRING: 'STRING'>, nullable=True, ...)


Async Support
-------------

Every accessor has an ``*_async`` twin taking an ``AsyncModelClient``
(``GenaiClient`` implements both):

    >>> recipe = await genaischema.first_object_async(Recipe, prompt, client=client)


Errors
------

All errors derive from ``GenAISchemaError`` (see ``genaischema.exceptions``).
Client failures propagate from the model client; nothing is retried.


Logging
-------

    >>> genaischema.setup_logging("DEBUG", format="human")

or set ``GENAISCHEMA_LOG_LEVEL`` / ``GENAISCHEMA_LOG_FORMAT``.
"""

from genaischema._logging import setup_logging
from genaischema._version import __version__ as __version__

# Client boundary
from genaischema.client import (
    AsyncModelClient,
    Candidate,
    Content,
    GenaiClient,
    GenerateContentResponse,
    ModelClient,
    Part,
    part_from_bytes,
    part_from_text,
    part_from_uri,
    text,
)

# Configuration
from genaischema.config import (
    DEFAULT_MODEL,
    ENUM_MIME_TYPE,
    JSON_MIME_TYPE,
    GenerationConfig,
)

# Exceptions (commonly-used exceptions at root; all via genaischema.exceptions)
from genaischema.exceptions import (
    ClientError,
    ConversionError,
    DecodeError,
    EmptyResponseError,
    GenAISchemaError,
    ReflectionError,
    ValidationError,
)

# Generation
from genaischema.generate import (
    AsyncCandidateStream,
    CandidateStream,
    all_objects,
    all_objects_async,
    first_enum,
    first_enum_async,
    first_object,
    first_object_async,
    object_candidates,
    object_candidates_async,
    raw_generate,
    raw_generate_async,
    text_candidates,
    text_candidates_async,
)

# Schema
from genaischema.schema import Schema, Type, convert, for_type, for_value

__all__ = [
    # Generation
    "raw_generate",
    "text_candidates",
    "object_candidates",
    "first_object",
    "all_objects",
    "first_enum",
    "raw_generate_async",
    "text_candidates_async",
    "object_candidates_async",
    "first_object_async",
    "all_objects_async",
    "first_enum_async",
    "CandidateStream",
    "AsyncCandidateStream",
    # Schema
    "Schema",
    "Type",
    "convert",
    "for_type",
    "for_value",
    # Configuration
    "GenerationConfig",
    "DEFAULT_MODEL",
    "JSON_MIME_TYPE",
    "ENUM_MIME_TYPE",
    # Client
    "ModelClient",
    "AsyncModelClient",
    "GenaiClient",
    "Content",
    "Part",
    "Candidate",
    "GenerateContentResponse",
    "part_from_text",
    "part_from_uri",
    "part_from_bytes",
    "text",
    # Exceptions
    "GenAISchemaError",
    "ReflectionError",
    "ConversionError",
    "ClientError",
    "DecodeError",
    "EmptyResponseError",
    "ValidationError",
    # Logging
    "setup_logging",
]
