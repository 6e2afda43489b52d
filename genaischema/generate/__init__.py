"""Controlled generation: schema-constrained requests and candidate decoding."""

from .async_ import (
    all_objects_async,
    first_enum_async,
    first_object_async,
    object_candidates_async,
    raw_generate_async,
    text_candidates_async,
)
from .candidates import AsyncCandidateStream, CandidateStream, StreamState
from .sync import (
    all_objects,
    first_enum,
    first_object,
    object_candidates,
    raw_generate,
    text_candidates,
)

__all__ = [
    # Sync
    "raw_generate",
    "text_candidates",
    "object_candidates",
    "first_object",
    "all_objects",
    "first_enum",
    # Async
    "raw_generate_async",
    "text_candidates_async",
    "object_candidates_async",
    "first_object_async",
    "all_objects_async",
    "first_enum_async",
    # Streams
    "CandidateStream",
    "AsyncCandidateStream",
    "StreamState",
]
