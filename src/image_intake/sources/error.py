# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Source for requests that failed before any I/O."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import ImageSource

if TYPE_CHECKING:
    from ..request import ImageContent


class ErrorSource(ImageSource):
    """
    Yields the request, carrying its recorded error, once and then ends.

    Returned by the dispatcher for excluded or unknown sources and for
    requests that had already failed, so consumers drive it exactly like a
    live source.
    """

    source_type = "error"

    async def _read(self) -> ImageContent:
        return None


__all__ = ["ErrorSource"]
