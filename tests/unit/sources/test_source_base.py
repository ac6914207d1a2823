"""
Unit tests for ImageSource and ErrorSource.

Tests cover:
- __anext__ (single item, content assignment, fetch failures)
- aclose() (idempotence, release, stream cleanup, release failures)
- Async context manager protocol
- ErrorSource for already failed requests
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from image_intake.exceptions import SourceExcludedError, SourceFetchError
from image_intake.request import ImageContent, ImageRequest
from image_intake.sources import ErrorSource, ImageSource

MakeRequest = Callable[..., ImageRequest]


class StubSource(ImageSource):
    """Source returning fixed content and counting calls."""

    source_type = "stub"

    def __init__(self, request: ImageRequest, content: Any = None) -> None:
        super().__init__(request)
        self.content = content
        self.reads = 0
        self.releases = 0

    async def _read(self) -> ImageContent:
        self.reads += 1
        return self.content

    async def _release(self) -> None:
        self.releases += 1


class FailingSource(StubSource):
    async def _read(self) -> ImageContent:
        self.reads += 1
        raise ConnectionError("connection reset")


class TrackedStream:
    """Async byte stream recording whether it was closed."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)
        self.closed = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)

    async def aclose(self) -> None:
        self.closed = True


class TestImageSourceAnext:
    """Tests for ImageSource.__anext__."""

    @pytest.mark.asyncio
    async def test_yields_request_with_content(
        self, make_request: MakeRequest, png_bytes: bytes
    ) -> None:
        request = make_request("/photos/cat")
        source = StubSource(request, png_bytes)

        image = await source.__anext__()

        assert image is request
        assert image.contents is png_bytes
        assert image.format == "png"
        assert source.reads == 1

    @pytest.mark.asyncio
    async def test_yields_exactly_one_item(
        self, make_request: MakeRequest, png_bytes: bytes
    ) -> None:
        source = StubSource(make_request(), png_bytes)

        items = [image async for image in source]

        assert len(items) == 1
        with pytest.raises(StopAsyncIteration):
            await source.__anext__()
        assert source.reads == 1

    @pytest.mark.asyncio
    async def test_aiter_returns_self(self, make_request: MakeRequest) -> None:
        source = StubSource(make_request())
        assert source.__aiter__() is source

    @pytest.mark.asyncio
    async def test_failed_request_is_not_read(
        self, make_request: MakeRequest, png_bytes: bytes
    ) -> None:
        request = make_request()
        request.fail(SourceExcludedError("s3"))
        source = StubSource(request, png_bytes)

        image = await source.__anext__()

        assert image is request
        assert source.reads == 0
        assert image.contents is None

    @pytest.mark.asyncio
    async def test_read_failure_recorded_on_request(
        self, make_request: MakeRequest
    ) -> None:
        request = make_request()
        source = FailingSource(request)

        image = await source.__anext__()

        assert isinstance(image.error, SourceFetchError)
        assert image.error.source_type == "stub"
        assert isinstance(image.error.__cause__, ConnectionError)
        assert "connection reset" in str(image.error)

    @pytest.mark.asyncio
    async def test_fetch_error_is_kept_after_later_failures(
        self, make_request: MakeRequest
    ) -> None:
        """The fetch error stays the recorded error."""
        request = make_request()
        source = FailingSource(request)

        await source.__anext__()
        first = request.error
        request.fail(SourceExcludedError("s3"))

        assert request.error is first

    @pytest.mark.asyncio
    async def test_validation_failure_from_content(
        self, make_request: MakeRequest
    ) -> None:
        source = StubSource(make_request(), b"BM" + b"\x00" * 30)

        image = await source.__anext__()

        assert image.error is not None
        assert image.error.http_status == 400

    @pytest.mark.asyncio
    async def test_stream_content(self, make_request: MakeRequest) -> None:
        stream = TrackedStream([b"a", b"b"])
        source = StubSource(make_request(), stream)

        image = await source.__anext__()

        assert image.is_stream()
        assert image.contents is stream


class TestImageSourceClose:
    """Tests for ImageSource.aclose() and the context manager protocol."""

    @pytest.mark.asyncio
    async def test_aclose_releases_once(self, make_request: MakeRequest) -> None:
        source = StubSource(make_request())

        await source.aclose()
        await source.aclose()

        assert source.releases == 1
        assert source.closed is True

    @pytest.mark.asyncio
    async def test_aclose_ends_iteration(
        self, make_request: MakeRequest, png_bytes: bytes
    ) -> None:
        source = StubSource(make_request(), png_bytes)
        await source.aclose()

        with pytest.raises(StopAsyncIteration):
            await source.__anext__()
        assert source.reads == 0

    @pytest.mark.asyncio
    async def test_aclose_closes_unconsumed_stream(
        self, make_request: MakeRequest
    ) -> None:
        stream = TrackedStream([b"a", b"b", b"c"])
        source = StubSource(make_request(), stream)

        await source.__anext__()
        await source.aclose()

        assert stream.closed is True

    @pytest.mark.asyncio
    async def test_aclose_with_sync_close_stream(
        self, make_request: MakeRequest
    ) -> None:
        stream = Mock(spec=["read", "close"])
        source = StubSource(make_request(), stream)

        await source.__anext__()
        await source.aclose()

        stream.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_stream_close_errors_are_suppressed(
        self, make_request: MakeRequest
    ) -> None:
        stream = Mock(spec=["read", "aclose"])
        stream.aclose = AsyncMock(side_effect=RuntimeError("already closed"))
        source = StubSource(make_request(), stream)

        await source.__anext__()
        await source.aclose()

        stream.aclose.assert_awaited_once()
        assert source.closed is True

    @pytest.mark.asyncio
    async def test_release_failure_is_logged_not_raised(
        self, make_request: MakeRequest, caplog: pytest.LogCaptureFixture
    ) -> None:
        source = StubSource(make_request())
        source._release = AsyncMock(side_effect=OSError("handle gone"))  # type: ignore[method-assign]

        await source.aclose()

        assert source.closed is True
        assert "handle gone" in caplog.text

    @pytest.mark.asyncio
    async def test_context_manager_releases_on_exit(
        self, make_request: MakeRequest, png_bytes: bytes
    ) -> None:
        source = StubSource(make_request(), png_bytes)

        async with source as entered:
            assert entered is source
            await source.__anext__()

        assert source.releases == 1

    @pytest.mark.asyncio
    async def test_context_manager_releases_on_exception(
        self, make_request: MakeRequest
    ) -> None:
        source = StubSource(make_request())

        with pytest.raises(ValueError, match="consumer failed"):
            async with source:
                raise ValueError("consumer failed")

        assert source.releases == 1
        assert source.closed is True

    @pytest.mark.asyncio
    async def test_release_runs_when_consumer_is_cancelled(
        self, make_request: MakeRequest
    ) -> None:
        source = StubSource(make_request())
        entered = asyncio.Event()

        async def consume() -> None:
            async with source:
                entered.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(consume())
        await entered.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert source.releases == 1

    @pytest.mark.asyncio
    async def test_stream_closed_when_aclose_is_cancelled(
        self, make_request: MakeRequest
    ) -> None:
        """Cancelling aclose() during a slow release still closes the stream."""
        stream = TrackedStream([b"a", b"b"])
        source = StubSource(make_request(), stream)
        release_done = asyncio.Event()

        async def slow_release() -> None:
            await asyncio.sleep(0.05)
            release_done.set()

        source._release = slow_release  # type: ignore[method-assign]
        await source.__anext__()

        task = asyncio.create_task(source.aclose())
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert stream.closed is True
        assert source.closed is True

        # a second aclose() has nothing left to do
        await source.aclose()
        await asyncio.wait_for(release_done.wait(), timeout=1)


class TestErrorSource:
    """Tests for ErrorSource."""

    @pytest.mark.asyncio
    async def test_yields_failed_request_once(self, make_request: MakeRequest) -> None:
        request = make_request()
        request.fail(SourceExcludedError("s3"))

        async with ErrorSource(request) as source:
            items = [image async for image in source]

        assert items == [request]
        assert isinstance(items[0].error, SourceExcludedError)

    @pytest.mark.asyncio
    async def test_source_type(self, make_request: MakeRequest) -> None:
        assert ErrorSource(make_request()).source_type == "error"

    def test_image_source_is_abstract(self, make_request: MakeRequest) -> None:
        with pytest.raises(TypeError):
            ImageSource(make_request())  # type: ignore[abstract]
