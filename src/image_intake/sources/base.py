# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base class for image sources.

A source is an async iterator bound to one ImageRequest. Driving it produces
at most one item, the request itself with its content assigned, and then
ends. Failures raised while fetching are recorded on the request as a
SourceFetchError and the request is still yielded, so consumers drive a
failed source exactly like a successful one.

Sources are also async context managers. aclose() releases whatever the
concrete source holds (file handle, socket, pending response) on every exit
path: normal completion, a validation failure, an exception in the consumer,
or the consumer abandoning the stream early.

Key Design Decisions:
- Single item: __anext__ fetches once; later calls raise StopAsyncIteration
- No I/O for failed requests: a request that already carries an error is
  yielded without calling _read()
- asyncio.shield: release runs shielded so cancellation cannot skip it
- Idempotent close: _closed flag prevents double release
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from ..exceptions import SourceFetchError

if TYPE_CHECKING:
    from ..request import ImageContent, ImageRequest

logger = logging.getLogger(__name__)


class ImageSource(AsyncIterator["ImageRequest"], ABC):
    """
    Abstract byte source for a single image request.

    Subclasses implement _read() and, if they hold a resource, _release().

    Usage:
        source = get_source(image, registry)
        async with source:
            async for image in source:
                if image.is_error():
                    ...
    """

    source_type: str = "source"
    """Name used for logging and metrics."""

    def __init__(self, request: ImageRequest) -> None:
        self.request = request
        self._exhausted = False
        self._closed = False
        self._stream: Any = None

    @abstractmethod
    async def _read(self) -> ImageContent:
        """
        Fetch the image content.

        Returns:
            A bytes-like buffer or an async byte stream.

        Raises:
            Exception: Any failure; it is recorded on the request as a
                SourceFetchError.
        """
        ...

    async def _release(self) -> None:
        """Release resources held by the source. Called once, from aclose()."""
        return None

    async def __anext__(self) -> ImageRequest:
        if self._exhausted:
            raise StopAsyncIteration
        self._exhausted = True

        request = self.request
        if request.is_error():
            return request

        try:
            data = await self._read()
        except Exception as e:
            logger.warning(
                f"{self.source_type} source failed for {request.path!r}: "
                f"{type(e).__name__}: {e}"
            )
            error = SourceFetchError(
                self.source_type, f"{self.source_type} source failed: {e}"
            )
            error.__cause__ = e
            request.fail(error)
            return request

        request.set_content(data)
        if request.is_stream():
            self._stream = data
        return request

    def __aiter__(self) -> Self:
        return self

    async def aclose(self) -> None:
        """
        Release the source and close any stream it produced.

        This method is idempotent - multiple calls are safe.
        """
        if self._closed:
            return
        self._closed = True
        self._exhausted = True

        try:
            await asyncio.shield(self._release())
        except Exception as e:
            logger.warning(
                f"Failed to release {self.source_type} source for "
                f"{self.request.path!r}: {type(e).__name__}: {e}"
            )
        finally:
            # runs on cancellation too, a second aclose() is a no-op
            if self._stream is not None:
                stream, self._stream = self._stream, None
                await asyncio.shield(_close_stream(stream, self.source_type))

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._closed


async def _close_stream(stream: Any, source_type: str) -> None:
    close = getattr(stream, "aclose", None) or getattr(stream, "close", None)
    if close is None:
        return
    try:
        result = close()
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        # cleanup path, log and continue
        logger.debug(
            f"Error closing {source_type} stream: {type(e).__name__}: {e}"
        )


__all__ = ["ImageSource"]
