"""Model-client protocols consumed by the generation pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..config import GenerationConfig
    from .types import Content, GenerateContentResponse

__all__ = ["AsyncModelClient", "ModelClient"]


@runtime_checkable
class ModelClient(Protocol):
    """Anything that can run one non-streaming generate call.

    Implementations raise on transport or API failure; the pipeline
    propagates those errors unchanged and never retries.
    """

    def generate_content(
        self,
        *,
        model: str,
        contents: list[Content],
        config: GenerationConfig,
    ) -> GenerateContentResponse: ...


@runtime_checkable
class AsyncModelClient(Protocol):
    """Async counterpart of ModelClient."""

    async def generate_content_async(
        self,
        *,
        model: str,
        contents: list[Content],
        config: GenerationConfig,
    ) -> GenerateContentResponse: ...
