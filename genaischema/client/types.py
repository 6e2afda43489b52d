"""
Request and response data model for the model-client boundary.

These types are SDK-independent; client adapters translate them to and
from the wire types of a concrete SDK.

Example:
    >>> contents = [Content(parts=[
    ...     part_from_uri("gs://bucket/desk.jpeg", "image/jpeg"),
    ...     part_from_text("Generate a list of objects in the images."),
    ... ])]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..exceptions import ValidationError

__all__ = [
    "Candidate",
    "Content",
    "GenerateContentResponse",
    "Part",
    "normalize_contents",
    "part_from_bytes",
    "part_from_text",
    "part_from_uri",
    "text",
]


@dataclass(frozen=True, slots=True)
class Part:
    """
    One piece of a content turn: text or a binary media reference.

    Attributes
    ----------
    text : str | None
        Text content.
    file_uri : str | None
        URI of media stored elsewhere (e.g. ``gs://...``).
    inline_data : bytes | None
        Raw media bytes sent with the request.
    mime_type : str | None
        MIME type of ``file_uri`` or ``inline_data``.
    thought : bool
        True for reasoning summaries emitted by thinking models; such text
        is never the candidate's answer.
    """

    text: str | None = None
    file_uri: str | None = None
    inline_data: bytes | None = None
    mime_type: str | None = None
    thought: bool = False


@dataclass(frozen=True, slots=True)
class Content:
    """A single turn: an ordered list of parts and the role that produced them."""

    parts: list[Part] = field(default_factory=list)
    role: str = "user"


@dataclass(frozen=True, slots=True)
class Candidate:
    """
    One generated response.

    Attributes
    ----------
    content : Content | None
        Generated content; None when the model produced nothing (e.g. blocked).
    finish_reason : str | None
        Why generation stopped ("STOP", "MAX_TOKENS", "SAFETY", ...).
    index : int
        Rank of the candidate in the response.
    """

    content: Content | None = None
    finish_reason: str | None = None
    index: int = 0

    @property
    def text(self) -> str | None:
        """Text of the first non-thought part that has text, or None."""
        if self.content is None:
            return None
        for part in self.content.parts:
            if part.text is not None and not part.thought:
                return part.text
        return None


@dataclass(frozen=True, slots=True)
class GenerateContentResponse:
    """Result of one generate call: candidates in the model's ranking order."""

    candidates: list[Candidate] = field(default_factory=list)
    model_version: str | None = None


def part_from_text(value: str) -> Part:
    """Create a text part."""
    return Part(text=value)


def part_from_uri(file_uri: str, mime_type: str) -> Part:
    """Create a part that references media by URI."""
    return Part(file_uri=file_uri, mime_type=mime_type)


def part_from_bytes(data: bytes, mime_type: str) -> Part:
    """Create a part that carries media bytes inline."""
    return Part(inline_data=data, mime_type=mime_type)


def text(value: str) -> list[Content]:
    """Wrap a prompt string as a single user turn."""
    return [Content(parts=[part_from_text(value)])]


def normalize_contents(contents: Any) -> list[Content]:
    """
    Normalize prompt input to a list of Content turns.

    Accepts:
    - A string (one user turn with one text part)
    - A Part (one user turn)
    - A Content
    - A list mixing the above; consecutive strings and parts are gathered
      into one user turn, Content items are kept as their own turns

    Raises
    ------
        ValidationError: For any other input or an empty list.
    """
    if isinstance(contents, str):
        return text(contents)
    if isinstance(contents, Part):
        return [Content(parts=[contents])]
    if isinstance(contents, Content):
        return [contents]

    if isinstance(contents, (list, tuple)) and contents:
        result: list[Content] = []
        pending: list[Part] = []
        for item in contents:
            if isinstance(item, str):
                pending.append(part_from_text(item))
            elif isinstance(item, Part):
                pending.append(item)
            elif isinstance(item, Content):
                if pending:
                    result.append(Content(parts=pending))
                    pending = []
                result.append(item)
            else:
                raise ValidationError(
                    f"Unsupported content item: {type(item).__name__}",
                    details={"param": "contents", "type": type(item).__name__},
                )
        if pending:
            result.append(Content(parts=pending))
        return result

    raise ValidationError(
        f"Invalid contents type: {type(contents).__name__}. "
        "Expected str, Part, Content, or a list of them.",
        details={"param": "contents", "type": type(contents).__name__},
    )
