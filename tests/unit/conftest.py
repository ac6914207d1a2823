"""
Shared fixtures for image intake unit tests.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from image_intake.config import IntakeConfig
from image_intake.modifiers import Modifiers
from image_intake.request import ImageRequest

# ============================================================================
# Image signatures
# ============================================================================


@pytest.fixture
def png_bytes() -> bytes:
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 32


@pytest.fixture
def jpeg_bytes() -> bytes:
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32


@pytest.fixture
def gif_bytes() -> bytes:
    return b"GIF89a" + b"\x01\x00\x01\x00" + b"\x00" * 32


@pytest.fixture
def tiff_bytes() -> bytes:
    return b"II*\x00\x08\x00\x00\x00" + b"\x00" * 32


@pytest.fixture
def webp_bytes() -> bytes:
    return b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 32


# ============================================================================
# Requests
# ============================================================================


@pytest.fixture
def config() -> IntakeConfig:
    """Configuration with a local default, an excluded source and one origin."""
    return IntakeConfig(
        default_source="local",
        excluded_sources=frozenset({"s3"}),
        external_sources={"wiki": "https://upload.example.org/wiki/"},
        default_expiry=3600,
    )


def modifier_parser(
    has_modifier_segment: bool = False,
    external_source_name: str | None = None,
) -> Callable[[str], Modifiers]:
    """Build a modifier parser returning fixed modifiers."""

    def parse(path: str) -> Modifiers:
        return Modifiers(
            has_modifier_segment=has_modifier_segment,
            external_source_name=external_source_name,
        )

    return parse


@pytest.fixture
def make_request(config: IntakeConfig) -> Callable[..., ImageRequest]:
    """Factory for ImageRequest objects bound to the test configuration."""

    def factory(
        path: str = "/photos/cat.jpg",
        source: str | None = None,
        modifier_segment: bool = False,
        config_override: IntakeConfig | None = None,
    ) -> ImageRequest:
        return ImageRequest(
            path,
            config=config_override or config,
            parse_modifiers=modifier_parser(modifier_segment, source),
        )

    return factory
