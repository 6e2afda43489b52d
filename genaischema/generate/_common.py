"""Request preparation and response extraction shared by sync and async pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .._logging import scoped_logger
from ..client.types import Content, GenerateContentResponse, normalize_contents
from ..config import GenerationConfig, default_model
from ..decode import is_enumerable
from ..exceptions import ValidationError
from ..schema import for_type

log = scoped_logger("generate")


@dataclass(frozen=True)
class Request:
    """Everything one generate call needs, ready for the client."""

    model: str
    contents: list[Content]
    config: GenerationConfig

    def as_kwargs(self) -> dict[str, Any]:
        return {"model": self.model, "contents": self.contents, "config": self.config}


def prepare(
    tp: Any,
    contents: Any,
    config: GenerationConfig | None,
    model: str | None,
    mime_type: str | None = None,
) -> Request:
    """
    Build the request for ``tp``.

    The schema derived for ``tp`` always replaces ``config.response_schema``;
    ``mime_type``, when given, replaces ``config.response_mime_type``. The
    caller's config is never mutated. A None ``model`` resolves to
    :func:`~genaischema.config.default_model`. A config whose ``extra``
    shadows a named field (and so could undo the schema) raises
    ValidationError.
    """
    model = model or default_model()
    schema = for_type(tp)
    overrides: dict[str, Any] = {"response_schema": schema}
    if mime_type is not None:
        overrides["response_mime_type"] = mime_type

    effective = (config if config is not None else GenerationConfig()).override(**overrides)
    effective.check_extra()
    request = Request(model=model, contents=normalize_contents(contents), config=effective)

    log.debug(
        "Prepared request",
        extra={
            "model_id": model,
            "target_type": getattr(tp, "__name__", repr(tp)),
            "mime_type": effective.response_mime_type,
        },
    )
    return request


def require_enumerable(tp: Any) -> None:
    """Raise ValidationError unless ``tp`` can be built from raw enum text."""
    if not is_enumerable(tp):
        raise ValidationError(
            f"{getattr(tp, '__name__', tp)!s} is not enumerable: expected an Enum subclass "
            "or a str subclass with an enum() classmethod",
            details={"param": "tp", "type": getattr(tp, "__name__", repr(tp))},
        )


def extract_texts(response: GenerateContentResponse) -> list[str]:
    """Primary text of each candidate, in order; candidates without text are skipped."""
    texts: list[str] = []
    for candidate in response.candidates:
        value = candidate.text
        if value is None:
            log.debug(
                "Skipping candidate without text",
                extra={"index": candidate.index, "finish_reason": candidate.finish_reason},
            )
            continue
        texts.append(value)
    return texts
