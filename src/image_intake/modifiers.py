# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Modifier types shared with the external modifier grammar parser.

The parser itself lives outside this library. It is injected into every
ImageRequest as a callable matching ModifierParser and must be pure and
total: unrecognized directives are ignored, never raised.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class Modifiers:
    """
    Transformation directives parsed from a request path.

    Only has_modifier_segment and external_source_name are read by this
    library; the remaining directives (crop, resize, quality, ...) are
    carried opaquely for the transformation engine.

    Attributes:
        has_modifier_segment: True when the first path segment is a
            directive block rather than part of the storage path
        external_source_name: Source selected by the request, if any
        directives: Every other directive, keyed by the parser's own names
    """

    has_modifier_segment: bool = False
    external_source_name: str | None = None
    directives: Mapping[str, Any] = field(default_factory=dict)


@runtime_checkable
class ModifierParser(Protocol):
    """Protocol for the modifier grammar parser."""

    def __call__(self, path: str) -> Modifiers:
        """
        Parse the directives embedded in a request path.

        Args:
            path: The raw request path

        Returns:
            The parsed Modifiers. Must not raise on malformed input.
        """
        ...


def no_modifiers(path: str) -> Modifiers:
    """Parser for deployments that never embed directives in the path."""
    return Modifiers()


__all__ = ["ModifierParser", "Modifiers", "no_modifiers"]
