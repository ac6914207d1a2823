# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Image sources and source selection.

Concrete sources (local store, object storage, HTTP origins) are provided by
the application and registered in a SourceRegistry. This package only
defines their shape and decides which one serves a request.

Classes:
    ImageSource: Abstract single-item async source bound to a request.
    ExternalImageSource: Abstract source for a configured external origin.
    ErrorSource: Source that yields an already failed request.
    SourceRegistry: Name to factory mapping.
    SourceDecision / DispatchOutcome: Result of source selection.

Functions:
    decide_source: Select a source for a request.
    get_source: Select and instantiate a source for a request.
"""

from .base import ImageSource
from .dispatch import DispatchOutcome, SourceDecision, decide_source, get_source
from .error import ErrorSource
from .external import ExternalImageSource, render_template
from .registry import ExternalSourceFactory, SourceFactory, SourceRegistry

__all__ = [
    "DispatchOutcome",
    "ErrorSource",
    "ExternalImageSource",
    "ExternalSourceFactory",
    "ImageSource",
    "SourceDecision",
    "SourceFactory",
    "SourceRegistry",
    "decide_source",
    "get_source",
    "render_template",
]
