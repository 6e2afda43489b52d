"""
Lazy, single-consumer sequences of decoded candidates.

A stream moves through three states:

- NOT_STARTED: nothing requested yet; the model call happens on the first pull
- YIELDING: candidate texts are held; each pull decodes exactly one of them
- EXHAUSTED: all candidates consumed, a pull failed, or the stream was closed

A failing pull (model call or decode error) raises from that pull and
exhausts the stream. Values already handed out stay valid. Closing early
stops all further decode work; the underlying call is non-streaming, so
there is no transport handle to release.

Concurrency:
    Single-consumer. Do not iterate from multiple threads/tasks.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from enum import Enum
from types import TracebackType
from typing import Generic, TypeVar

from .._logging import scoped_logger
from ..exceptions import DecodeError

__all__ = ["AsyncCandidateStream", "CandidateStream", "StreamState"]

T = TypeVar("T")

log = scoped_logger("generate")


class StreamState(str, Enum):
    """Lifecycle state of a candidate stream."""

    NOT_STARTED = "not_started"
    YIELDING = "yielding"
    EXHAUSTED = "exhausted"


class _StreamBase(Generic[T]):
    def __init__(self, decode: Callable[[str, int], T]):
        self._decode = decode
        self._texts: list[str] | None = None
        self._position = 0
        self._state = StreamState.NOT_STARTED

    @property
    def state(self) -> StreamState:
        """Current lifecycle state."""
        return self._state

    @property
    def consumed(self) -> int:
        """Number of candidates decoded so far (including a failed one)."""
        return self._position

    def _finish(self) -> None:
        self._state = StreamState.EXHAUSTED
        # Candidate text does not outlive decoding
        self._texts = None

    def _started(self, texts: list[str]) -> None:
        self._texts = texts
        self._state = StreamState.YIELDING
        log.debug("Candidates received", extra={"candidate_count": len(texts)})

    def _decode_next(self) -> T:
        """Decode the next held text. Caller guarantees YIELDING state."""
        assert self._texts is not None
        if self._position >= len(self._texts):
            self._finish()
            raise _Exhausted

        index = self._position
        self._position += 1
        try:
            return self._decode(self._texts[index], index)
        except DecodeError:
            log.warning("Candidate failed to decode", extra={"index": index})
            self._finish()
            raise
        except BaseException:
            self._finish()
            raise


class _Exhausted(Exception):
    """Internal end-of-candidates signal."""


class CandidateStream(_StreamBase[T], Iterator[T]):
    """
    Lazy iterator over decoded candidates.

    Returned by :func:`genaischema.object_candidates`. Iterate it, pull with
    ``next()``, or use it as a context manager to guarantee ``close()``.

    Example:
        >>> with genaischema.object_candidates(Recipe, prompt, config, client=client) as stream:
        ...     for recipe in stream:
        ...         if good_enough(recipe):
        ...             break  # remaining candidates are never decoded
    """

    def __init__(self, fetch: Callable[[], list[str]], decode: Callable[[str, int], T]):
        super().__init__(decode)
        self._fetch = fetch

    def __iter__(self) -> CandidateStream[T]:
        return self

    def __next__(self) -> T:
        if self._state is StreamState.EXHAUSTED:
            raise StopIteration

        if self._state is StreamState.NOT_STARTED:
            try:
                texts = self._fetch()
            except BaseException:
                self._finish()
                raise
            self._started(texts)

        try:
            return self._decode_next()
        except _Exhausted:
            raise StopIteration from None

    def close(self) -> None:
        """Stop the stream; no further candidates are decoded."""
        self._finish()

    def __enter__(self) -> CandidateStream[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"CandidateStream(state={self._state.value}, consumed={self._position})"


class AsyncCandidateStream(_StreamBase[T], AsyncIterator[T]):
    """
    Async lazy iterator over decoded candidates.

    Returned by :func:`genaischema.generate.async_.object_candidates_async`.

    Example:
        >>> async with object_candidates_async(Recipe, prompt, client=client) as stream:
        ...     async for recipe in stream:
        ...         print(recipe)
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[str]]],
        decode: Callable[[str, int], T],
    ):
        super().__init__(decode)
        self._fetch = fetch

    def __aiter__(self) -> AsyncCandidateStream[T]:
        return self

    async def __anext__(self) -> T:
        if self._state is StreamState.EXHAUSTED:
            raise StopAsyncIteration

        if self._state is StreamState.NOT_STARTED:
            try:
                texts = await self._fetch()
            except BaseException:
                self._finish()
                raise
            self._started(texts)

        try:
            return self._decode_next()
        except _Exhausted:
            raise StopAsyncIteration from None

    async def aclose(self) -> None:
        """Stop the stream; no further candidates are decoded."""
        self._finish()

    async def __aenter__(self) -> AsyncCandidateStream[T]:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"AsyncCandidateStream(state={self._state.value}, consumed={self._position})"
