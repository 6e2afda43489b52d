"""Async generation pipeline; mirrors :mod:`genaischema.generate.sync`."""

from __future__ import annotations

from typing import Any, TypeVar

from ..client.base import AsyncModelClient
from ..client.types import GenerateContentResponse
from ..config import ENUM_MIME_TYPE, JSON_MIME_TYPE, GenerationConfig, default_model
from ..decode import coerce_enum, decode
from ..exceptions import EmptyResponseError
from ._common import extract_texts, prepare, require_enumerable
from .candidates import AsyncCandidateStream

__all__ = [
    "all_objects_async",
    "first_enum_async",
    "first_object_async",
    "object_candidates_async",
    "raw_generate_async",
    "text_candidates_async",
]

T = TypeVar("T")


async def raw_generate_async(
    tp: Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: AsyncModelClient,
    model: str | None = None,
) -> GenerateContentResponse:
    """Async version of :func:`~genaischema.generate.sync.raw_generate`."""
    request = prepare(tp, contents, config, model)
    return await client.generate_content_async(**request.as_kwargs())


async def text_candidates_async(
    tp: Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: AsyncModelClient,
    model: str | None = None,
) -> list[str]:
    response = await raw_generate_async(tp, contents, config, client=client, model=model)
    return extract_texts(response)


def object_candidates_async(
    tp: type[T] | Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: AsyncModelClient,
    model: str | None = None,
) -> AsyncCandidateStream[T]:
    """
    Lazily decode each candidate into ``tp``.

    Not a coroutine: the stream is returned immediately and the model call
    is awaited on the first ``__anext__``.
    """
    request = prepare(tp, contents, config, model, mime_type=JSON_MIME_TYPE)

    async def fetch() -> list[str]:
        return extract_texts(await client.generate_content_async(**request.as_kwargs()))

    return AsyncCandidateStream(fetch, lambda text, index: decode(tp, text, index))


async def first_object_async(
    tp: type[T] | Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: AsyncModelClient,
    model: str | None = None,
) -> T:
    async with object_candidates_async(
        tp, contents, config, client=client, model=model
    ) as stream:
        async for value in stream:
            return value
    raise EmptyResponseError(details={"model": model or default_model()})


async def all_objects_async(
    tp: type[T] | Any,
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: AsyncModelClient,
    model: str | None = None,
) -> list[T]:
    async with object_candidates_async(
        tp, contents, config, client=client, model=model
    ) as stream:
        return [value async for value in stream]


async def first_enum_async(
    tp: type[T],
    contents: Any,
    config: GenerationConfig | None = None,
    *,
    client: AsyncModelClient,
    model: str | None = None,
) -> T:
    require_enumerable(tp)
    request = prepare(tp, contents, config, model, mime_type=ENUM_MIME_TYPE)
    texts = extract_texts(await client.generate_content_async(**request.as_kwargs()))
    if not texts:
        raise EmptyResponseError(details={"model": model or default_model()})
    return coerce_enum(tp, texts[0], 0)
