"""ModelClient adapter for the Google Gen AI SDK (``google-genai``).

Example:
    >>> from google import genai
    >>> from genaischema.client import GenaiClient
    >>> client = GenaiClient(genai.Client(http_options={"api_version": "v1"}))
    >>> genaischema.first_object(Recipe, "A cookie recipe", client=client)
"""

from __future__ import annotations

from typing import Any

from google import genai
from google.genai import errors
from google.genai import types as genai_types

from .._logging import scoped_logger
from ..config import GenerationConfig, _snake_case
from ..exceptions import ClientError
from ..schema import Schema
from .types import Candidate, Content, GenerateContentResponse, Part

__all__ = [
    "GenaiClient",
    "from_genai_response",
    "to_genai_config",
    "to_genai_contents",
    "to_genai_schema",
]

log = scoped_logger("client")


def to_genai_schema(schema: Schema) -> genai_types.Schema:
    """Translate a target Schema into ``google.genai.types.Schema``."""
    return genai_types.Schema(
        type=genai_types.Type(schema.type.value) if schema.type is not None else None,
        nullable=schema.nullable or None,
        title=schema.title,
        description=schema.description,
        format=schema.format,
        pattern=schema.pattern,
        enum=list(schema.enum) if schema.enum else None,
        minimum=schema.minimum,
        maximum=schema.maximum,
        min_length=schema.min_length,
        max_length=schema.max_length,
        min_items=schema.min_items,
        max_items=schema.max_items,
        min_properties=schema.min_properties,
        max_properties=schema.max_properties,
        items=to_genai_schema(schema.items) if schema.items is not None else None,
        properties=(
            {name: to_genai_schema(prop) for name, prop in schema.properties.items()}
            if schema.properties
            else None
        ),
        required=list(schema.required) if schema.required else None,
        any_of=[to_genai_schema(alt) for alt in schema.any_of] if schema.any_of else None,
        default=schema.default,
        example=list(schema.example) if isinstance(schema.example, tuple) else schema.example,
    )


def _to_genai_part(part: Part) -> genai_types.Part:
    if part.text is not None:
        return genai_types.Part(text=part.text)
    if part.file_uri is not None:
        return genai_types.Part(
            file_data=genai_types.FileData(file_uri=part.file_uri, mime_type=part.mime_type)
        )
    if part.inline_data is not None:
        return genai_types.Part(
            inline_data=genai_types.Blob(data=part.inline_data, mime_type=part.mime_type)
        )
    return genai_types.Part()


def to_genai_contents(contents: list[Content]) -> list[genai_types.Content]:
    """Translate Content turns into ``google.genai.types.Content``."""
    return [
        genai_types.Content(role=content.role, parts=[_to_genai_part(p) for p in content.parts])
        for content in contents
    ]


def to_genai_config(config: GenerationConfig) -> genai_types.GenerateContentConfig:
    """Translate a GenerationConfig; ``extra`` keys are passed through as fields.

    Named fields win over ``extra`` keys of the same name, in snake_case or
    camelCase.
    """
    named: dict[str, Any] = {
        "response_mime_type": config.response_mime_type,
        "candidate_count": config.candidate_count,
        "temperature": config.temperature,
        "top_p": config.top_p,
        "top_k": config.top_k,
        "max_output_tokens": config.max_output_tokens,
        "seed": config.seed,
        "stop_sequences": config.stop_sequences,
        "system_instruction": config.system_instruction,
    }
    if config.response_schema is not None:
        named["response_schema"] = to_genai_schema(config.response_schema)
    named = {k: v for k, v in named.items() if v is not None}
    kwargs: dict[str, Any] = {
        k: v for k, v in config.extra.items() if _snake_case(k) not in named
    }
    kwargs.update(named)
    return genai_types.GenerateContentConfig(**kwargs)


def _from_genai_part(part: genai_types.Part) -> Part:
    thought = bool(part.thought)
    if part.file_data is not None:
        return Part(
            text=part.text,
            file_uri=part.file_data.file_uri,
            mime_type=part.file_data.mime_type,
            thought=thought,
        )
    if part.inline_data is not None:
        return Part(
            text=part.text,
            inline_data=part.inline_data.data,
            mime_type=part.inline_data.mime_type,
            thought=thought,
        )
    return Part(text=part.text, thought=thought)


def from_genai_response(response: genai_types.GenerateContentResponse) -> GenerateContentResponse:
    """Translate an SDK response into a GenerateContentResponse."""
    candidates: list[Candidate] = []
    for position, candidate in enumerate(response.candidates or []):
        content = None
        if candidate.content is not None:
            content = Content(
                parts=[_from_genai_part(p) for p in candidate.content.parts or []],
                role=candidate.content.role or "model",
            )
        finish_reason = candidate.finish_reason
        candidates.append(
            Candidate(
                content=content,
                finish_reason=getattr(finish_reason, "value", finish_reason),
                index=candidate.index if candidate.index is not None else position,
            )
        )
    return GenerateContentResponse(candidates=candidates, model_version=response.model_version)


def _client_error(exc: errors.APIError, model: str) -> ClientError:
    return ClientError(
        f"generate_content failed: {exc}",
        details={"model": model, "status_code": exc.code, "status": exc.status},
    )


class GenaiClient:
    """
    ModelClient backed by ``google.genai.Client``.

    Implements both ``generate_content`` and ``generate_content_async``.
    SDK ``APIError`` exceptions are re-raised as ClientError with the
    original chained; everything else propagates unchanged. No retries.

    Args:
        client: An existing ``google.genai.Client``. When omitted, one is
            created from ``client_kwargs`` (API key and project settings are
            then read from the environment by the SDK).
        **client_kwargs: Passed to ``google.genai.Client`` when ``client``
            is None.
    """

    def __init__(self, client: genai.Client | None = None, **client_kwargs: Any):
        self._client = client if client is not None else genai.Client(**client_kwargs)

    @property
    def client(self) -> genai.Client:
        """The wrapped SDK client."""
        return self._client

    def generate_content(
        self,
        *,
        model: str,
        contents: list[Content],
        config: GenerationConfig,
    ) -> GenerateContentResponse:
        log.debug("generate_content", extra={"model_id": model})
        try:
            response = self._client.models.generate_content(
                model=model,
                contents=to_genai_contents(contents),
                config=to_genai_config(config),
            )
        except errors.APIError as exc:
            raise _client_error(exc, model) from exc
        return from_genai_response(response)

    async def generate_content_async(
        self,
        *,
        model: str,
        contents: list[Content],
        config: GenerationConfig,
    ) -> GenerateContentResponse:
        log.debug("generate_content_async", extra={"model_id": model})
        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=to_genai_contents(contents),
                config=to_genai_config(config),
            )
        except errors.APIError as exc:
            raise _client_error(exc, model) from exc
        return from_genai_response(response)
