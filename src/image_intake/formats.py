# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Image format constants, normalization and validation.

Format tags are plain lowercase strings. Normalization folds the common
aliases (jpg, tif) into their canonical tag; validation enforces the
input/output contract and reports the first violated rule as an error
value rather than raising it.
"""

from __future__ import annotations

from .exceptions import (
    ImageRequestError,
    MissingInputFormatError,
    UnsupportedInputFormatError,
    UnsupportedOutputFormatError,
)

ImageFormat = str  # Type alias for clarity

JPEG = "jpeg"
PNG = "png"
WEBP = "webp"
TIFF = "tiff"
GIF = "gif"

# Suffix that turns a request into a metadata request
METADATA_MARKER = "json"

VALID_INPUT_FORMATS = frozenset({JPEG, "jpg", PNG, WEBP, TIFF, "tif", GIF})
VALID_OUTPUT_FORMATS = frozenset({JPEG, PNG, WEBP})

_ALIASES = {
    "jpg": JPEG,
    "tif": TIFF,
}


def normalize_format(value: str) -> ImageFormat:
    """
    Return the canonical tag for a format value.

    Values outside the valid sets pass through lower-cased; normalization
    does not validate.

    Example:
        >>> normalize_format("JPG")
        'jpeg'
        >>> normalize_format("bmp")
        'bmp'
    """
    value = value.lower()
    return _ALIASES.get(value, value)


def check_format(
    format: ImageFormat | None, output_format: ImageFormat | None = None
) -> ImageRequestError | None:
    """
    Check a format against the input/output contract.

    Args:
        format: The known input format, or None if nothing is known
        output_format: The explicitly declared output format, if any

    Returns:
        The error for the first rule violated, or None when the format is
        acceptable.
    """
    if not format:
        return MissingInputFormatError()

    if format not in VALID_INPUT_FORMATS:
        return UnsupportedInputFormatError(format)

    if format not in VALID_OUTPUT_FORMATS and not output_format:
        return UnsupportedOutputFormatError(format)

    return None


__all__ = [
    "GIF",
    "JPEG",
    "METADATA_MARKER",
    "PNG",
    "TIFF",
    "VALID_INPUT_FORMATS",
    "VALID_OUTPUT_FORMATS",
    "WEBP",
    "ImageFormat",
    "check_format",
    "normalize_format",
]
