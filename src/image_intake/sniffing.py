# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Magic-byte format detection for in-memory image buffers."""

from __future__ import annotations

# (signature, extension) - extensions are the raw file extensions,
# callers normalize them (jpg -> jpeg, tif -> tiff).
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "jpg"),
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"GIF87a", "gif"),
    (b"GIF89a", "gif"),
    (b"II*\x00", "tif"),
    (b"MM\x00*", "tif"),
    (b"BM", "bmp"),
    (b"\x00\x00\x01\x00", "ico"),
    (b"8BPS", "psd"),
)

# Bytes needed to recognize every signature, including RIFF....WEBP
SNIFF_LENGTH = 16


def sniff_format(data: bytes | bytearray | memoryview) -> str | None:
    """
    Detect an image format from the leading bytes of a buffer.

    Args:
        data: The image buffer (only the first SNIFF_LENGTH bytes are read)

    Returns:
        The raw file extension for the detected format ("jpg", "png",
        "webp", ...) or None when no signature matches.
    """
    head = bytes(memoryview(data).cast("B")[:SNIFF_LENGTH])

    # WebP: RIFF....WEBP
    if len(head) >= 12 and head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "webp"

    for signature, ext in _SIGNATURES:
        if head.startswith(signature):
            return ext

    return None


__all__ = ["SNIFF_LENGTH", "sniff_format"]
