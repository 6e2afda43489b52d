"""
Global pytest fixtures for genaischema tests.

This module provides:
- MockClient: an in-memory ModelClient/AsyncModelClient that records every
  request and answers with canned candidate texts
- Shared target types used across test packages

No test here talks to a real model. Tests that need the network are marked
``network`` and skipped unless ``GOOGLE_API_KEY`` is set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

import pytest

from genaischema.client.types import Candidate, Content, GenerateContentResponse, Part
from genaischema.config import GenerationConfig

# =============================================================================
# Mock Client
# =============================================================================


def make_response(*texts: str | None, finish_reason: str = "STOP") -> GenerateContentResponse:
    """Build a response with one candidate per text (None = candidate without text)."""
    candidates = []
    for index, value in enumerate(texts):
        content = Content(parts=[Part(text=value)], role="model") if value is not None else None
        candidates.append(Candidate(content=content, finish_reason=finish_reason, index=index))
    return GenerateContentResponse(candidates=candidates, model_version="mock-001")


@dataclass
class Call:
    """One recorded generate call."""

    model: str
    contents: list[Content]
    config: GenerationConfig


class MockClient:
    """
    ModelClient test double.

    Answers every call with ``response`` (or raises ``error``) and records
    the request in ``calls``. Implements both the sync and async protocol.
    """

    def __init__(
        self,
        response: GenerateContentResponse | None = None,
        error: Exception | None = None,
    ):
        self.response = response if response is not None else make_response()
        self.error = error
        self.calls: list[Call] = []

    @classmethod
    def with_texts(cls, *texts: str | None) -> MockClient:
        return cls(make_response(*texts))

    @property
    def last_call(self) -> Call:
        assert self.calls, "client was never called"
        return self.calls[-1]

    def generate_content(
        self,
        *,
        model: str,
        contents: list[Content],
        config: GenerationConfig,
    ) -> GenerateContentResponse:
        self.calls.append(Call(model=model, contents=contents, config=config))
        if self.error is not None:
            raise self.error
        return self.response

    async def generate_content_async(
        self,
        *,
        model: str,
        contents: list[Content],
        config: GenerationConfig,
    ) -> GenerateContentResponse:
        return self.generate_content(model=model, contents=contents, config=config)


# =============================================================================
# Target Types
# =============================================================================


@dataclass
class Recipe:
    recipe_name: str
    ingredients: list[str] = field(default_factory=list)


@dataclass
class Review:
    rating: int
    text: str
    sentiment: str | None = None


class InstrumentCategory(str):
    """String target whose legal values are listed by ``enum()``."""

    @classmethod
    def enum(cls) -> list[str]:
        return ["Percussion", "String", "Woodwind", "Brass", "Keyboard"]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_client_factory():
    """Build a MockClient answering with the given candidate texts."""

    def factory(*texts: str | None, error: Exception | None = None) -> MockClient:
        client = MockClient.with_texts(*texts)
        client.error = error
        return client

    return factory


@pytest.fixture
def empty_client() -> MockClient:
    """A client whose response has no candidates."""
    return MockClient(make_response())


@pytest.fixture
def recipe_type() -> type:
    return Recipe


@pytest.fixture
def review_type() -> type:
    return Review


@pytest.fixture
def instrument_category() -> type:
    return InstrumentCategory


def _env_any(*names: str) -> Any:
    return next((os.environ[n] for n in names if os.environ.get(n)), None)


# =============================================================================
# Skip Markers
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "network: marks tests requiring network access")


def pytest_collection_modifyitems(config, items):
    """Skip network tests when no API key is configured."""
    if _env_any("GOOGLE_API_KEY", "GEMINI_API_KEY"):
        return
    skip_network = pytest.mark.skip(reason="GOOGLE_API_KEY not set")
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip_network)
