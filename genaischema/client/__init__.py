"""Model-client boundary: request/response types, protocols and the google-genai adapter."""

from .base import AsyncModelClient, ModelClient
from .genai import GenaiClient
from .types import (
    Candidate,
    Content,
    GenerateContentResponse,
    Part,
    normalize_contents,
    part_from_bytes,
    part_from_text,
    part_from_uri,
    text,
)

__all__ = [
    "AsyncModelClient",
    "Candidate",
    "Content",
    "GenaiClient",
    "GenerateContentResponse",
    "ModelClient",
    "Part",
    "normalize_contents",
    "part_from_bytes",
    "part_from_text",
    "part_from_uri",
    "text",
]
