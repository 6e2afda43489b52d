"""Configuration for controlled generation requests."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any

from .exceptions import ValidationError

if TYPE_CHECKING:
    from .schema import Schema

__all__ = [
    "DEFAULT_MODEL",
    "ENUM_MIME_TYPE",
    "GenerationConfig",
    "JSON_MIME_TYPE",
    "default_model",
]

JSON_MIME_TYPE = "application/json"
ENUM_MIME_TYPE = "text/x.enum"

DEFAULT_MODEL = "gemini-2.0-flash"

# SDK fields that also carry a response schema
_SCHEMA_ALIASES = frozenset({"response_json_schema"})


def _snake_case(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()


def default_model() -> str:
    """Model used when none is given: ``GENAISCHEMA_MODEL`` or DEFAULT_MODEL."""
    return os.environ.get("GENAISCHEMA_MODEL") or DEFAULT_MODEL


@dataclass
class GenerationConfig:
    r"""
    Per-request generation configuration.

    Every field defaults to None, meaning "use the model's default".
    genaischema never validates these values; it only sets
    ``response_schema`` (always) and ``response_mime_type`` (for the
    object and enum accessors) before handing the config to the client.

    Mutability
    ----------

    GenerationConfig is mutable. For variations without modifying the
    original, use ``.override()``:

        >>> base = GenerationConfig(temperature=0.7)
        >>> creative = base.override(temperature=1.2)  # base unchanged

    Attributes
    ----------
        response_mime_type: Output MIME type, e.g. "application/json".
        response_schema: Target-dialect schema constraining the output.
        candidate_count: Number of candidates to generate.
        temperature: Sampling temperature.
        top_p: Nucleus sampling threshold.
        top_k: Top-k sampling limit.
        max_output_tokens: Maximum tokens per candidate.
        seed: Random seed for reproducibility.
        stop_sequences: Strings that stop generation.
        system_instruction: System prompt text.
        extra: Additional fields passed through to the client unchanged
            (e.g. ``{"presence_penalty": 0.5}``). Keys may not name a field
            above; generation calls reject such configs.

    Example:
        >>> config = GenerationConfig(candidate_count=3, temperature=0.6)
        >>> recipes = genaischema.all_objects(list[Recipe], prompt, config, client=client)
    """

    response_mime_type: str | None = None
    response_schema: Schema | None = None
    candidate_count: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_output_tokens: int | None = None
    seed: int | None = None
    stop_sequences: list[str] | None = None
    system_instruction: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the set fields as a dict, with ``extra`` merged in.

        ``extra`` is applied first, so a named field always wins over an
        ``extra`` key of the same name. ``response_schema`` is rendered
        through ``Schema.to_dict()``.
        """
        out: dict[str, Any] = dict(self.extra)
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "response_schema":
                value = value.to_dict()
            out[f.name] = value
        return out

    def check_extra(self) -> None:
        """
        Reject ``extra`` keys that shadow a named field.

        Keys are compared in snake_case, so ``responseMimeType`` clashes with
        ``response_mime_type``. SDK aliases of the response schema count too.

        Raises
        ------
            ValidationError: If any ``extra`` key names a field.
        """
        named = {f.name for f in fields(self)} | _SCHEMA_ALIASES
        clashes = sorted(key for key in self.extra if _snake_case(key) in named)
        if clashes:
            raise ValidationError(
                f"extra must not set named config fields: {', '.join(clashes)}; "
                "use the GenerationConfig field instead",
                details={"param": "config.extra", "fields": clashes},
            )

    def override(self, **kwargs: Any) -> GenerationConfig:
        """
        Create a new config with specified fields overridden.

        The original config is unchanged.

        Args:
            **kwargs: Fields to override. Must be valid GenerationConfig fields.

        Returns
        -------
            New GenerationConfig with the specified fields changed.

        Raises
        ------
            ValidationError: If a keyword is not a GenerationConfig field.

        Example:
            >>> config = GenerationConfig(temperature=0.7)
            >>> config.override(temperature=1.2).temperature
            1.2
            >>> config.temperature
            0.7
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ValidationError(
                f"Unknown GenerationConfig field(s): {', '.join(unknown)}",
                details={"fields": unknown},
            )
        # extra is copied so the two configs never share the dict
        kwargs.setdefault("extra", dict(self.extra))
        return replace(self, **kwargs)

    def __or__(self, other: GenerationConfig) -> GenerationConfig:
        """
        Merge two configs with the pipe operator (other wins).

        Only fields ``other`` actually sets (non-None) override ``self``;
        ``extra`` dicts are merged key by key.

        Example:
            >>> sampling = GenerationConfig(temperature=0.7)
            >>> count = GenerationConfig(candidate_count=3)
            >>> merged = sampling | count
            >>> (merged.temperature, merged.candidate_count)
            (0.7, 3)
        """
        if not isinstance(other, GenerationConfig):
            return NotImplemented

        merged_kwargs: dict[str, Any] = {}
        for f in fields(other):
            if f.name == "extra":
                continue
            value = getattr(other, f.name)
            if value is not None:
                merged_kwargs[f.name] = value
        merged_kwargs["extra"] = {**self.extra, **other.extra}
        return replace(self, **merged_kwargs)
