# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scoped content acquisition.

acquire_image() selects the source for a request, reads its single item and
hands the request to the caller. The source is closed when the block exits,
whether the body completed, raised, or stopped reading a stream early:

    async with acquire_image(image, registry, config) as image:
        if image.is_error():
            return error_response(image.error)
        await respond(image)
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from .sources.dispatch import get_source

if TYPE_CHECKING:
    from .config import IntakeConfig
    from .observability.metrics import IntakeMetrics
    from .request import ImageRequest
    from .sources.registry import SourceRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def acquire_image(
    request: ImageRequest,
    registry: SourceRegistry,
    config: IntakeConfig | None = None,
    metrics: IntakeMetrics | None = None,
) -> AsyncIterator[ImageRequest]:
    """
    Acquire the content for a request.

    Args:
        request: The request to acquire content for
        registry: Registered source implementations
        config: Configuration, defaults to request.config
        metrics: Optional metrics to record the acquisition in

    Yields:
        The request, with content assigned or an error recorded.
    """
    source = get_source(request, registry, config)

    async with source:
        request.log.time(source.source_type)
        started = time.monotonic()

        image = await anext(source, request)

        duration = time.monotonic() - started
        request.log.time_end(source.source_type)

        if image.is_error():
            logger.debug(
                f"Acquisition of {request.path!r} from {source.source_type} "
                f"failed: {image.error}"
            )

        if metrics is not None:
            metrics.record_acquisition(image, source.source_type, duration)

        yield image


__all__ = ["acquire_image"]
