"""
Blocking generation pipeline.

Each accessor derives a response schema from ``tp``, sends one non-streaming
request through ``client`` and interprets the candidates:

    raw_generate       -> GenerateContentResponse
    text_candidates    -> list[str]
    object_candidates  -> CandidateStream[T]   (lazy)
    first_object       -> T
    all_objects        -> list[T]
    first_enum         -> T

Client errors propagate unchanged; nothing is retried.
"""

from __future__ import annotations

from typing import Any, TypeVar

from ..client.base import ModelClient
from ..client.types import GenerateContentResponse
from ..config import ENUM_MIME_TYPE, JSON_MIME_TYPE, GenerationConfig, default_model
from ..decode import coerce_enum, decode
from ..exceptions import EmptyResponseError
from ._common import extract_texts, prepare, require_enumerable
from .candidates import CandidateStream

__all__ = [
    "all_objects",
    "first_enum",
    "first_object",
    "object_candidates",
    "raw_generate",
    "text_candidates",
]

T = TypeVar("T")


def raw_generate(
    tp: Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: ModelClient,
    model: str | None = None,
) -> GenerateContentResponse:
    """
    Run one generate call constrained by the schema of ``tp``.

    Args:
        tp: Type (or schema-bearing value) describing the expected output.
        contents: Prompt as a string, Part, Content or list of them.
        config: Generation settings. Not mutated; its response schema is
            replaced by the one derived from ``tp``.
        client: Model client performing the call.
        model: Model name; defaults to ``GENAISCHEMA_MODEL`` or DEFAULT_MODEL.

    Returns
    -------
        The client's response, unmodified.

    Raises
    ------
        ReflectionError: If ``tp`` cannot be described as a schema.
        ConversionError: If the schema has no Gemini equivalent.
        ValidationError: If ``contents`` is not a supported prompt shape.
    """
    request = prepare(tp, contents, config, model)
    return client.generate_content(**request.as_kwargs())


def text_candidates(
    tp: Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: ModelClient,
    model: str | None = None,
) -> list[str]:
    """Primary text of each candidate; candidates with no text part are skipped."""
    return extract_texts(raw_generate(tp, contents, config, client=client, model=model))


def object_candidates(
    tp: type[T] | Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: ModelClient,
    model: str | None = None,
) -> CandidateStream[T]:
    """
    Lazily decode each candidate into ``tp``.

    Forces the JSON response MIME type. The schema is derived (and any
    conversion error raised) immediately; the model call happens on the
    first pull, and each pull decodes exactly one candidate.

    Example:
        >>> for recipe in object_candidates(list[Recipe], prompt, client=client):
        ...     print(recipe)
    """
    request = prepare(tp, contents, config, model, mime_type=JSON_MIME_TYPE)

    def fetch() -> list[str]:
        return extract_texts(client.generate_content(**request.as_kwargs()))

    return CandidateStream(fetch, lambda text, index: decode(tp, text, index))


def first_object(
    tp: type[T] | Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: ModelClient,
    model: str | None = None,
) -> T:
    """
    Decode the first candidate into ``tp``.

    Later candidates are never decoded.

    Raises
    ------
        EmptyResponseError: If the response holds no text candidate.
        DecodeError: If the first candidate does not decode into ``tp``.
    """
    with object_candidates(tp, contents, config, client=client, model=model) as stream:
        for value in stream:
            return value
    raise EmptyResponseError(details={"model": model or default_model()})


def all_objects(
    tp: type[T] | Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: ModelClient,
    model: str | None = None,
) -> list[T]:
    """
    Decode every candidate into ``tp``.

    All-or-nothing: the first DecodeError is raised and values decoded
    before it are discarded. An empty response gives an empty list.
    """
    with object_candidates(tp, contents, config, client=client, model=model) as stream:
        return list(stream)


def first_enum(
    tp: type[T],
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: ModelClient,
    model: str | None = None,
) -> T:
    """
    Ask for one of ``tp``'s values and return the first candidate as ``tp``.

    ``tp`` must be an Enum subclass or a str subclass with an ``enum()``
    classmethod listing its values. Forces the ``text/x.enum`` MIME type.
    The returned value is ``tp(text)``; for str subclasses the text is not
    checked against ``tp.enum()``.

    Raises
    ------
        ValidationError: If ``tp`` is not enumerable.
        EmptyResponseError: If the response holds no text candidate.
        DecodeError: If an Enum subclass rejects the text.

    Example:
        >>> class Category(str):
        ...     @classmethod
        ...     def enum(cls): return ["Instrument", "Food"]
        >>> first_enum(Category, "What is a guitar?", client=client)
        'Instrument'
    """
    require_enumerable(tp)
    request = prepare(tp, contents, config, model, mime_type=ENUM_MIME_TYPE)
    texts = extract_texts(client.generate_content(**request.as_kwargs()))
    if not texts:
        raise EmptyResponseError(details={"model": model or default_model()})
    return coerce_enum(tp, texts[0], 0)
