# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Registry of source implementations, keyed by source type name."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING

from .base import ImageSource

if TYPE_CHECKING:
    from ..request import ImageRequest

# factory(request) -> source
SourceFactory = Callable[["ImageRequest"], ImageSource]
# factory(request, name, template) -> source
ExternalSourceFactory = Callable[["ImageRequest", str, str], ImageSource]


class SourceRegistry:
    """
    Maps source type names to source factories.

    Built-in sources are looked up by name. Requests for a configured
    external origin are built with the single external factory.

    Example:
        registry = SourceRegistry(
            {"local": LocalSource, "s3": S3Source},
            external=HttpSource,
        )
    """

    def __init__(
        self,
        sources: Mapping[str, SourceFactory] | None = None,
        external: ExternalSourceFactory | None = None,
    ) -> None:
        self._sources: dict[str, SourceFactory] = {}
        self.external = external
        for name, factory in (sources or {}).items():
            self.register(name, factory)

    def register(
        self, name: str, factory: SourceFactory, replace: bool = False
    ) -> None:
        """
        Register a source factory under a name.

        Raises:
            ValueError: If the name is empty, or already registered and
                replace is False
        """
        if not name:
            raise ValueError("Source name must not be empty")
        if name in self._sources and not replace:
            raise ValueError(f"Source {name!r} is already registered")
        self._sources[name] = factory

    def register_external(self, factory: ExternalSourceFactory) -> None:
        """Set the factory used for configured external origins."""
        self.external = factory

    def get(self, name: str) -> SourceFactory | None:
        return self._sources.get(name)

    def names(self) -> frozenset[str]:
        return frozenset(self._sources)

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __iter__(self) -> Iterator[str]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)


__all__ = ["ExternalSourceFactory", "SourceFactory", "SourceRegistry"]
