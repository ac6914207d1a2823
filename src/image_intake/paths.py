# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request path parsing.

This module turns a raw request path into the logical image name, the
formats declared by its suffixes, and the canonical storage path:

    /s50/photos/cat.jpg.webp
        -> image "cat", format "jpeg", output format "webp"
        -> path "photos/cat" (with a modifier segment)

    /photos/cat.gif.json
        -> image "cat", format "gif" (metadata request)

Everything here is pure and synchronous, and nothing here raises on bad
input: unknown formats are left for validation to reject later.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import unquote

from .formats import (
    METADATA_MARKER,
    VALID_INPUT_FORMATS,
    VALID_OUTPUT_FORMATS,
    ImageFormat,
)

logger = logging.getLogger(__name__)

# A '%' that does not start a two digit hex escape
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# Escapes for reserved URI characters (# $ & + , / : ; = ? @) stay encoded
_RESERVED_ESCAPE = re.compile(r"(%(?:2[346BCFbcf]|3[ABDFabdf]|40))")


@dataclass(frozen=True)
class ParsedImageName:
    """
    Result of parsing the final segment of a request path.

    Attributes:
        image: The file name with metadata and output suffixes removed
        format: Format declared by a metadata or output suffix (raw token,
            not yet normalized), or None
        output_format: Output format declared by the path, or None
        is_metadata: True when the request asked for metadata (".json")
    """

    image: str
    format: ImageFormat | None = None
    output_format: ImageFormat | None = None
    is_metadata: bool = False


def parse_image_name(path: str) -> ParsedImageName:
    """
    Determine the name and declared formats of the requested image.

    Args:
        path: Raw request path

    Returns:
        ParsedImageName for the final path segment
    """
    tokens = path.split("/")[-1].split(".")
    # suffixes are matched case-insensitively, the stored name keeps its case
    exts = [item.lower() for item in tokens]

    declared: ImageFormat | None = None
    output_format: ImageFormat | None = None
    is_metadata = False

    # clean out any metadata format
    if len(exts) >= 2 and exts[-1] == METADATA_MARKER:
        is_metadata = True
        del exts[-1], tokens[-1]
        declared = exts[-1]
        if len(exts) > 1:
            del exts[-1], tokens[-1]

    # if the name carries a valid input/output pair, consume both
    if len(exts) >= 3:
        input_format, candidate = exts[-2], exts[-1]
        if input_format in VALID_INPUT_FORMATS and candidate in VALID_OUTPUT_FORMATS:
            output_format = candidate
            declared = input_format
            del exts[-2:], tokens[-2:]

    return ParsedImageName(
        image=".".join(tokens),
        format=declared,
        output_format=output_format,
        is_metadata=is_metadata,
    )


def build_canonical_path(path: str, image: str, has_modifier_segment: bool) -> str:
    """
    Build the storage path for a request.

    Args:
        path: Raw request path
        image: Image name from parse_image_name()
        has_modifier_segment: Whether the first segment holds directives

    Returns:
        The storage path without a leading slash, the modifier segment or
        any metadata/output suffix. Each segment is percent-decoded on its
        own, so a malformed escape only keeps its own segment encoded.
    """
    parts = path.removeprefix("/").split("/")

    # overwrite the file name with the parsed version so metadata and
    # output format requests resolve to the stored file
    parts[-1] = image

    if has_modifier_segment and len(parts) > 1:
        parts.pop(0)

    return "/".join(percent_decode(part) for part in parts)


def percent_decode(value: str) -> str:
    """
    Decode percent escapes in a path, keeping reserved characters encoded.

    Malformed escapes or escapes that do not form valid UTF-8 leave the
    value untouched instead of raising.
    """
    if "%" not in value:
        return value

    if _MALFORMED_ESCAPE.search(value):
        logger.debug(f"Malformed percent-encoding in {value!r}, keeping raw path")
        return value

    try:
        return "".join(
            piece if _RESERVED_ESCAPE.fullmatch(piece) else unquote(piece, errors="strict")
            for piece in _RESERVED_ESCAPE.split(value)
        )
    except UnicodeDecodeError:
        logger.debug(f"Percent-encoding in {value!r} is not UTF-8, keeping raw path")
        return value


__all__ = [
    "ParsedImageName",
    "build_canonical_path",
    "parse_image_name",
    "percent_decode",
]
