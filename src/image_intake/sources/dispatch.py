# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Source selection for image requests.

decide_source() is the decision procedure; get_source() turns its decision
into a source handle. Selection runs once per request:

1. A source named by the request's modifiers wins if it is a registered
   source. Otherwise, if it names a configured external origin, the
   external factory is used and exclusion is not checked; configured
   origins are trusted. An unknown name is ignored.
2. The selected source type is rejected if it is excluded.
3. The selected source type is looked up in the registry.

Rejections are recorded on the request and answered with an ErrorSource,
never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..exceptions import SourceExcludedError, UnknownSourceError
from .base import ImageSource
from .error import ErrorSource
from .registry import SourceRegistry

if TYPE_CHECKING:
    from ..config import IntakeConfig
    from ..request import ImageRequest

logger = logging.getLogger(__name__)


class DispatchOutcome(Enum):
    """Terminal states of source selection."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    ERROR = "error"


@dataclass(frozen=True)
class SourceDecision:
    """
    Result of source selection.

    Attributes:
        outcome: Which kind of source to build
        source_type: Selected source name (the origin name for external)
        template: Origin template, only set for EXTERNAL
    """

    outcome: DispatchOutcome
    source_type: str
    template: str | None = None


def decide_source(
    request: ImageRequest,
    registry: SourceRegistry,
    config: IntakeConfig | None = None,
) -> SourceDecision:
    """
    Select the source for a request.

    Failures (excluded or unknown source) are recorded on the request.

    Args:
        request: The request to select a source for
        registry: Registered source implementations
        config: Configuration, defaults to request.config

    Returns:
        The SourceDecision.
    """
    config = config if config is not None else request.config
    source_type = config.default_source

    if request.is_error():
        return SourceDecision(DispatchOutcome.ERROR, source_type)

    # look to see if the request has a specified source
    requested = request.modifiers.external_source_name
    if requested:
        if requested in registry:
            source_type = requested
        elif requested in config.external_sources:
            if registry.external is None:
                request.fail(UnknownSourceError(requested))
                return SourceDecision(DispatchOutcome.ERROR, requested)
            return SourceDecision(
                DispatchOutcome.EXTERNAL,
                requested,
                config.external_sources[requested],
            )
        else:
            logger.debug(
                f"Ignoring unknown source {requested!r}, using {source_type!r}"
            )

    if source_type in config.excluded_sources:
        request.fail(SourceExcludedError(source_type))
        return SourceDecision(DispatchOutcome.ERROR, source_type)

    if source_type not in registry:
        request.fail(UnknownSourceError(source_type))
        return SourceDecision(DispatchOutcome.ERROR, source_type)

    return SourceDecision(DispatchOutcome.INTERNAL, source_type)


def get_source(
    request: ImageRequest,
    registry: SourceRegistry,
    config: IntakeConfig | None = None,
) -> ImageSource:
    """
    Select and instantiate the source for a request.

    Args:
        request: The request to acquire content for
        registry: Registered source implementations
        config: Configuration, defaults to request.config

    Returns:
        A source bound to the request. For rejected requests this is an
        ErrorSource yielding the request with its error.
    """
    decision = decide_source(request, registry, config)
    request.log.append(
        "source", source=decision.source_type, outcome=decision.outcome.value
    )

    external = registry.external
    factory = registry.get(decision.source_type)

    if (
        decision.outcome is DispatchOutcome.EXTERNAL
        and external is not None
        and decision.template is not None
    ):
        logger.debug(
            f"Dispatching {request.path!r} to external {decision.source_type!r}"
        )
        return external(request, decision.source_type, decision.template)

    if decision.outcome is DispatchOutcome.INTERNAL and factory is not None:
        logger.debug(f"Dispatching {request.path!r} to {decision.source_type!r}")
        return factory(request)

    logger.debug(f"Request {request.path!r} failed before dispatch: {request.error}")
    return ErrorSource(request)


__all__ = [
    "DispatchOutcome",
    "SourceDecision",
    "decide_source",
    "get_source",
]
