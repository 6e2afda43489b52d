"""
Tests for the lazy candidate streams.

Streams are driven directly with fetch/decode callables so that every
model call and every decode can be counted.
"""

import logging

import pytest

from genaischema.exceptions import DecodeError
from genaischema.generate import AsyncCandidateStream, CandidateStream, StreamState


class Recorder:
    """fetch/decode callables that record how often they run."""

    def __init__(self, texts, fail_at=None, fetch_error=None):
        self.texts = list(texts)
        self.fail_at = fail_at
        self.fetch_error = fetch_error
        self.fetches = 0
        self.decoded: list[int] = []

    def fetch(self):
        self.fetches += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.texts)

    async def fetch_async(self):
        return self.fetch()

    def decode(self, text, index):
        self.decoded.append(index)
        if index == self.fail_at:
            raise DecodeError(text, ValueError("bad candidate"), index=index)
        return text.upper()


# =============================================================================
# CandidateStream
# =============================================================================


class TestCandidateStream:
    """Tests for the synchronous stream state machine."""

    def test_initial_state(self):
        rec = Recorder(["a"])

        stream = CandidateStream(rec.fetch, rec.decode)

        assert stream.state is StreamState.NOT_STARTED
        assert rec.fetches == 0

    def test_one_decode_per_pull(self):
        """Each next() decodes exactly one candidate."""
        rec = Recorder(["a", "b", "c"])
        stream = CandidateStream(rec.fetch, rec.decode)

        assert next(stream) == "A"
        assert rec.decoded == [0]
        assert stream.state is StreamState.YIELDING

        assert next(stream) == "B"
        assert rec.decoded == [0, 1]
        assert rec.fetches == 1

    def test_exhausts_after_last(self):
        rec = Recorder(["a"])
        stream = CandidateStream(rec.fetch, rec.decode)

        assert list(stream) == ["A"]
        assert stream.state is StreamState.EXHAUSTED
        assert stream.consumed == 1

    def test_reiterating_exhausted_stream_yields_nothing(self):
        rec = Recorder(["a", "b"])
        stream = CandidateStream(rec.fetch, rec.decode)
        list(stream)

        assert list(stream) == []
        assert rec.fetches == 1

    def test_empty(self):
        rec = Recorder([])
        stream = CandidateStream(rec.fetch, rec.decode)

        with pytest.raises(StopIteration):
            next(stream)
        assert stream.state is StreamState.EXHAUSTED

    def test_decode_error_exhausts(self):
        """The failing pull raises; later candidates are never decoded."""
        rec = Recorder(["a", "b", "c"], fail_at=1)
        stream = CandidateStream(rec.fetch, rec.decode)

        assert next(stream) == "A"
        with pytest.raises(DecodeError):
            next(stream)

        assert stream.state is StreamState.EXHAUSTED
        assert list(stream) == []
        assert rec.decoded == [0, 1]

    def test_fetch_error_exhausts(self):
        error = ConnectionError("unreachable")
        rec = Recorder(["a"], fetch_error=error)
        stream = CandidateStream(rec.fetch, rec.decode)

        with pytest.raises(ConnectionError):
            next(stream)

        assert stream.state is StreamState.EXHAUSTED
        assert list(stream) == []
        assert rec.fetches == 1

    def test_close_before_start(self):
        """Closing an unstarted stream means the model is never called."""
        rec = Recorder(["a"])
        stream = CandidateStream(rec.fetch, rec.decode)

        stream.close()

        assert list(stream) == []
        assert rec.fetches == 0

    def test_close_stops_decoding(self):
        rec = Recorder(["a", "b", "c"])
        stream = CandidateStream(rec.fetch, rec.decode)

        next(stream)
        stream.close()

        assert list(stream) == []
        assert rec.decoded == [0]

    def test_context_manager_closes(self):
        rec = Recorder(["a", "b"])

        with CandidateStream(rec.fetch, rec.decode) as stream:
            for value in stream:
                assert value == "A"
                break

        assert stream.state is StreamState.EXHAUSTED
        assert rec.decoded == [0]

    def test_decode_failure_logged(self, caplog):
        rec = Recorder(["a"], fail_at=0)
        stream = CandidateStream(rec.fetch, rec.decode)

        with caplog.at_level(logging.WARNING, logger="genaischema"):
            with pytest.raises(DecodeError):
                next(stream)

        records = [r for r in caplog.records if r.getMessage() == "Candidate failed to decode"]
        assert len(records) == 1
        assert records[0].index == 0
        assert records[0].scope == "generate"

    def test_repr(self):
        rec = Recorder(["a"])
        stream = CandidateStream(rec.fetch, rec.decode)

        assert repr(stream) == "CandidateStream(state=not_started, consumed=0)"


# =============================================================================
# AsyncCandidateStream
# =============================================================================


class TestAsyncCandidateStream:
    """Tests for the async stream state machine."""

    @pytest.mark.asyncio
    async def test_lazy_fetch(self):
        rec = Recorder(["a", "b"])
        stream = AsyncCandidateStream(rec.fetch_async, rec.decode)

        assert rec.fetches == 0
        assert await stream.__anext__() == "A"
        assert rec.fetches == 1
        assert rec.decoded == [0]

    @pytest.mark.asyncio
    async def test_iterate(self):
        rec = Recorder(["a", "b"])

        values = [v async for v in AsyncCandidateStream(rec.fetch_async, rec.decode)]

        assert values == ["A", "B"]

    @pytest.mark.asyncio
    async def test_decode_error_exhausts(self):
        rec = Recorder(["a", "b", "c"], fail_at=0)
        stream = AsyncCandidateStream(rec.fetch_async, rec.decode)

        with pytest.raises(DecodeError):
            await stream.__anext__()

        assert stream.state is StreamState.EXHAUSTED
        assert [v async for v in stream] == []
        assert rec.decoded == [0]

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        rec = Recorder(["a", "b"])

        async with AsyncCandidateStream(rec.fetch_async, rec.decode) as stream:
            async for _ in stream:
                break

        assert stream.state is StreamState.EXHAUSTED
        assert rec.decoded == [0]

    @pytest.mark.asyncio
    async def test_aclose_before_start(self):
        rec = Recorder(["a"])
        stream = AsyncCandidateStream(rec.fetch_async, rec.decode)

        await stream.aclose()

        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
        assert rec.fetches == 0
