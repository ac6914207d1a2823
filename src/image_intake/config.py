# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for image intake.

IntakeConfig is a read-only, process-scoped value passed explicitly to every
ImageRequest and to the source dispatcher. It can be built directly or from
environment variables with IntakeConfig.from_env().
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .exceptions import ConfigurationError

# 90 days
DEFAULT_IMAGE_EXPIRY = 60 * 60 * 24 * 90

DEFAULT_SOURCE = "local"

# Environment variables of the form EXTERNAL_SOURCE_<NAME>=<template>
EXTERNAL_SOURCE_PREFIX = "EXTERNAL_SOURCE_"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_source_list(value: str | None) -> frozenset[str]:
    """
    Parse a comma separated list of source names.

    Whitespace around names and empty items are ignored.

    Example:
        >>> sorted(parse_source_list("s3, local,,"))
        ['local', 's3']
    """
    if not value:
        return frozenset()
    return frozenset(name.strip() for name in value.split(",") if name.strip())


@dataclass(frozen=True)
class IntakeConfig:
    """
    Configuration for request interpretation and source selection.
    """

    default_source: str = DEFAULT_SOURCE
    """Source used when the request does not select one."""

    excluded_sources: frozenset[str] = frozenset()
    """Sources that must never be used. A comma separated string is accepted."""

    external_sources: Mapping[str, str] = field(default_factory=dict)
    """Named external origins, mapping a source name to a fetch template."""

    default_expiry: int = DEFAULT_IMAGE_EXPIRY
    """Default cache expiry in seconds; sources may override it per request."""

    log_enabled: bool = False
    """Emit request logs when RequestLog.flush() is called."""

    def __post_init__(self) -> None:
        """Validate and freeze configuration after initialization."""
        if isinstance(self.excluded_sources, str):
            object.__setattr__(
                self, "excluded_sources", parse_source_list(self.excluded_sources)
            )
        elif not isinstance(self.excluded_sources, frozenset):
            object.__setattr__(
                self, "excluded_sources", frozenset(self.excluded_sources)
            )
        object.__setattr__(
            self, "external_sources", MappingProxyType(dict(self.external_sources))
        )

        if not self.default_source:
            raise ConfigurationError("default_source must not be empty")
        if self.default_expiry < 0:
            raise ConfigurationError("default_expiry must not be negative")
        for name, template in self.external_sources.items():
            if not name:
                raise ConfigurationError("external source names must not be empty")
            if not template:
                raise ConfigurationError(
                    f"external source {name!r} must define a template"
                )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> IntakeConfig:
        """
        Build a configuration from environment variables.

        Recognized variables:
            DEFAULT_SOURCE: default source name
            EXCLUDE_SOURCES: comma separated excluded source names
            IMAGE_EXPIRY: default expiry in seconds
            LOG_ENABLED: "true"/"1" to emit request logs
            EXTERNAL_SOURCE_<NAME>: fetch template for external source <name>

        Args:
            environ: Mapping to read from, defaults to os.environ

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        env = os.environ if environ is None else environ

        expiry_raw = env.get("IMAGE_EXPIRY")
        try:
            expiry = int(expiry_raw) if expiry_raw else DEFAULT_IMAGE_EXPIRY
        except ValueError as e:
            raise ConfigurationError(
                f"IMAGE_EXPIRY must be an integer, got {expiry_raw!r}"
            ) from e

        return cls(
            default_source=env.get("DEFAULT_SOURCE") or DEFAULT_SOURCE,
            excluded_sources=parse_source_list(env.get("EXCLUDE_SOURCES")),
            external_sources=_external_sources_from_env(env.items()),
            default_expiry=expiry,
            log_enabled=env.get("LOG_ENABLED", "").strip().lower() in _TRUTHY,
        )


def _external_sources_from_env(items: Iterable[tuple[str, str]]) -> dict[str, str]:
    sources = {}
    for key, value in items:
        if key.startswith(EXTERNAL_SOURCE_PREFIX) and value:
            name = key[len(EXTERNAL_SOURCE_PREFIX) :].lower()
            if name:
                sources[name] = value
    return sources


__all__ = [
    "DEFAULT_IMAGE_EXPIRY",
    "DEFAULT_SOURCE",
    "EXTERNAL_SOURCE_PREFIX",
    "IntakeConfig",
    "parse_source_list",
]
