# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Image Intake - Request interpretation and content acquisition for image delivery.

This library is the front end of an image-delivery pipeline. It turns an
incoming request path into an ImageRequest, selects the source that holds
the image, and classifies the content that comes back.

Key Features:
    - Path parsing for metadata (".json") and output format suffixes
    - Canonical storage paths with the modifier segment removed
    - Format normalization and input/output format validation
    - Magic-byte format sniffing of acquired buffers
    - Pluggable source registry with exclusion and external origins
    - Errors recorded on the request instead of raised, with an error
      source that consumers drive like any other source

Quick Start:
    >>> from image_intake import ImageRequest, IntakeConfig, SourceRegistry
    >>> from image_intake import acquire_image
    >>>
    >>> config = IntakeConfig.from_env()
    >>> registry = SourceRegistry({"local": LocalSource})
    >>>
    >>> image = ImageRequest("/s50/photos/cat.jpg", config, parse_modifiers=parser)
    >>> async with acquire_image(image, registry) as image:
    ...     if image.is_error():
    ...         return error_response(image.error)

Main Exports:
    - ImageRequest: Request descriptor
    - IntakeConfig: Configuration
    - ImageSource, ErrorSource, ExternalImageSource: Source base classes
    - SourceRegistry, get_source: Source selection
    - acquire_image: Scoped acquisition
    - RequestSummary: Serializable request snapshot

Version: 1.0.0
"""

__version__ = "1.0.0"

from .acquisition import acquire_image
from .config import IntakeConfig, parse_source_list
from .exceptions import (
    ConfigurationError,
    ImageRequestError,
    MissingInputFormatError,
    SourceExcludedError,
    SourceFetchError,
    UnknownSourceError,
    UnsupportedInputFormatError,
    UnsupportedOutputFormatError,
)
from .formats import (
    VALID_INPUT_FORMATS,
    VALID_OUTPUT_FORMATS,
    check_format,
    normalize_format,
)
from .modifiers import ModifierParser, Modifiers, no_modifiers
from .observability import IntakeMetrics
from .paths import ParsedImageName, build_canonical_path, parse_image_name
from .request import ContentKind, ImageRequest
from .request_log import RequestLog
from .sniffing import sniff_format
from .sources import (
    DispatchOutcome,
    ErrorSource,
    ExternalImageSource,
    ImageSource,
    SourceDecision,
    SourceRegistry,
    decide_source,
    get_source,
)
from .summary import RequestSummary

__all__ = [
    "VALID_INPUT_FORMATS",
    "VALID_OUTPUT_FORMATS",
    # Exceptions
    "ConfigurationError",
    "ContentKind",
    "DispatchOutcome",
    "ErrorSource",
    "ExternalImageSource",
    "ImageRequest",
    "ImageRequestError",
    # Sources
    "ImageSource",
    # Configuration
    "IntakeConfig",
    "IntakeMetrics",
    "MissingInputFormatError",
    # Modifiers
    "ModifierParser",
    "Modifiers",
    "ParsedImageName",
    "RequestLog",
    "RequestSummary",
    "SourceDecision",
    "SourceExcludedError",
    "SourceFetchError",
    "SourceRegistry",
    "UnknownSourceError",
    "UnsupportedInputFormatError",
    "UnsupportedOutputFormatError",
    "acquire_image",
    "build_canonical_path",
    "check_format",
    "decide_source",
    "get_source",
    "no_modifiers",
    "normalize_format",
    "parse_image_name",
    "parse_source_list",
    "sniff_format",
]
