# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Image request descriptor.

An ImageRequest is created once per incoming path. Construction resolves
the image name, declared formats, modifiers and canonical storage path
synchronously; content and any sniffed format are filled in later during
acquisition.

Errors are recorded on the request, never raised. Once `error` is set the
request is terminally failed: fail() will not overwrite it, it is never
dispatched to a real source, and content assigned to it is not classified.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterable
from enum import Enum
from typing import Any, Union

from .config import IntakeConfig
from .exceptions import ImageRequestError
from .formats import ImageFormat, check_format, normalize_format
from .modifiers import ModifierParser, Modifiers, no_modifiers
from .paths import build_canonical_path, parse_image_name, percent_decode
from .request_log import RequestLog
from .sniffing import sniff_format
from .summary import RequestSummary

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]

# A buffer, an async byte stream, or None when no content has been acquired.
# Objects exposing an async read() are accepted as streams as well.
ImageContent = Union[Buffer, AsyncIterable[bytes], None]


def buffer_length(data: Buffer) -> int:
    """Size of a buffer in bytes, whatever the memoryview item size."""
    return memoryview(data).nbytes


class ContentKind(Enum):
    """Which content variant an ImageRequest currently holds."""

    NONE = "none"
    BUFFER = "buffer"
    STREAM = "stream"


def classify_content(data: Any) -> ContentKind:
    """
    Determine the content variant of a value.

    Raises:
        TypeError: If the value is neither a buffer nor a byte stream
    """
    if data is None:
        return ContentKind.NONE
    if isinstance(data, (bytes, bytearray, memoryview)):
        return ContentKind.BUFFER
    if isinstance(data, AsyncIterable) or callable(getattr(data, "read", None)):
        return ContentKind.STREAM
    raise TypeError(
        f"Image content must be a bytes-like buffer or a byte stream, "
        f"got {type(data).__name__}"
    )


class ImageRequest:
    """
    Descriptor for a single image request.

    Attributes:
        started_at: Unix timestamp taken at construction
        image: Decoded file name with metadata and output suffixes removed
        format: Canonical input format, or None if unknown
        output_format: Output format declared by the path, or None
        is_metadata: True for metadata (".json") requests
        path: Canonical storage path
        modifiers: Directives returned by the modifier parser
        original_content_length: Size in bytes of the first buffer assigned
        expiry: Cache expiry in seconds, sources may override it
        error: The recorded failure, or None
        log: Queued log entries for this request

    Example:
        image = ImageRequest("/s50/photos/cat.jpg", config=config,
                             parse_modifiers=parser)
        if not image.is_error():
            async with acquire_image(image, registry, config) as image:
                ...
    """

    def __init__(
        self,
        path: str,
        config: IntakeConfig | None = None,
        parse_modifiers: ModifierParser = no_modifiers,
        log: RequestLog | None = None,
    ) -> None:
        """
        Resolve a request path.

        Args:
            path: Raw request path
            config: Intake configuration, defaults to IntakeConfig()
            parse_modifiers: Modifier grammar parser
            log: Log sink, defaults to a new RequestLog
        """
        self.config = config if config is not None else IntakeConfig()

        self.error: ImageRequestError | None = None
        self.started_at = time.time()

        # determine the name and declared formats of the requested image
        parsed = parse_image_name(path)
        self.image = percent_decode(parsed.image)
        self.output_format: ImageFormat | None = parsed.output_format
        self.is_metadata = parsed.is_metadata
        self.format: ImageFormat | None = None

        self.modifiers: Modifiers = parse_modifiers(path)

        self.path = build_canonical_path(
            path, parsed.image, self.modifiers.has_modifier_segment
        )

        self._contents: ImageContent = None
        self._content_kind = ContentKind.NONE
        self.original_content_length = 0
        self._original_recorded = False

        self.expiry = self.config.default_expiry

        self.log = log if log is not None else RequestLog(self.config.log_enabled)

        if parsed.format is not None:
            self.set_format(parsed.format)
            self.validate_format()

    # ------------------------------------------------------------------ #
    # Errors
    # ------------------------------------------------------------------ #

    def is_error(self) -> bool:
        return self.error is not None

    def fail(self, error: ImageRequestError) -> bool:
        """
        Record a failure unless one is already recorded.

        Returns:
            True if the error was recorded, False if the request had
            already failed.
        """
        if self.error is not None:
            logger.debug(
                f"Ignoring {type(error).__name__} for {self.path!r}, "
                f"already failed with {type(self.error).__name__}"
            )
            return False

        self.error = error
        self.log.error(str(error), error=type(error).__name__)
        return True

    # ------------------------------------------------------------------ #
    # Format
    # ------------------------------------------------------------------ #

    def set_format(self, value: str) -> ImageFormat:
        """Assign the input format, normalizing aliases."""
        self.format = normalize_format(value)
        return self.format

    def validate_format(self) -> ImageRequestError | None:
        """
        Check the current format against the input/output contract.

        Returns:
            The request's error after validation (an earlier error is kept).
        """
        error = check_format(self.format, self.output_format)
        if error is not None:
            self.fail(error)
        return self.error

    # ------------------------------------------------------------------ #
    # Content
    # ------------------------------------------------------------------ #

    @property
    def contents(self) -> ImageContent:
        return self._contents

    @property
    def content_kind(self) -> ContentKind:
        return self._content_kind

    def is_buffer(self) -> bool:
        return self._content_kind is ContentKind.BUFFER

    def is_stream(self) -> bool:
        return self._content_kind is ContentKind.STREAM

    def set_content(self, data: ImageContent) -> ImageRequestError | None:
        """
        Assign content and classify it.

        Buffers are sniffed for their real format, which replaces any format
        declared by the path, and the format contract is validated again.
        Streams are stored as-is; their consumer validates the bytes.

        Args:
            data: A bytes-like buffer, an async byte stream, or None

        Returns:
            The request's error after classification, or None.

        Raises:
            TypeError: If data is neither a buffer nor a stream
        """
        kind = classify_content(data)
        self._contents = data
        self._content_kind = kind

        if kind is not ContentKind.BUFFER:
            return self.error

        if not self._original_recorded:
            self.original_content_length = buffer_length(data)
            self._original_recorded = True

        if self.is_error():
            return self.error

        sniffed = sniff_format(data)
        if sniffed:
            self.set_format(sniffed)

        return self.validate_format()

    # ------------------------------------------------------------------ #
    # Metrics
    # ------------------------------------------------------------------ #

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the request was created."""
        return (time.time() - self.started_at) * 1000

    def content_length(self) -> int | None:
        """Size in bytes of the current buffer, or None if it is not a buffer."""
        if not self.is_buffer():
            return None
        return buffer_length(self._contents)  # type: ignore[arg-type]

    def size_reduction(self) -> float | None:
        """
        Kilobytes saved relative to the original content (signed).

        Returns:
            The saving in kB, or None if the current content is not a buffer.
        """
        size = self.content_length()
        if size is None:
            return None
        return (self.original_content_length - size) / 1000

    def size_saving(self) -> str | None:
        """
        Percentage saved relative to the original content.

        Returns:
            The percentage formatted with two decimals (e.g. "20.00"), or
            None when it cannot be computed (no original length, or the
            current content is not a buffer).
        """
        size = self.content_length()
        original = self.original_content_length
        if size is None or original == 0:
            return None
        return f"{(original - size) / original * 100:.2f}"

    def summary(self) -> RequestSummary:
        """Serializable snapshot of the request, without its content."""
        return RequestSummary.from_request(self)

    def __repr__(self) -> str:
        return (
            f"ImageRequest(path={self.path!r}, format={self.format!r}, "
            f"output_format={self.output_format!r}, "
            f"content={self._content_kind.value}, error={self.error!r})"
        )


__all__ = [
    "Buffer",
    "ContentKind",
    "ImageContent",
    "ImageRequest",
    "buffer_length",
    "classify_content",
]
