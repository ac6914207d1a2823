# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base class for sources bound to a configured external origin.

External origins are declared in IntakeConfig.external_sources as a name
mapped to a template. A template either contains a "{path}" placeholder or
is a URL prefix the canonical path is appended to:

    EXTERNAL_SOURCE_WIKIPEDIA=https://upload.wikimedia.org/wikipedia/
    EXTERNAL_SOURCE_CDN=https://cdn.example.com/{path}?raw=1
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import ImageSource

if TYPE_CHECKING:
    from ..request import ImageRequest


def render_template(template: str, path: str) -> str:
    """
    Build the fetch location for a canonical path.

    Example:
        >>> render_template("https://img.example.com/", "cats/tom.jpg")
        'https://img.example.com/cats/tom.jpg'
        >>> render_template("https://img.example.com/{path}?v=2", "tom.jpg")
        'https://img.example.com/tom.jpg?v=2'
    """
    if "{path}" in template:
        return template.replace("{path}", path)
    return f"{template.rstrip('/')}/{path.lstrip('/')}"


class ExternalImageSource(ImageSource):
    """
    Abstract source for a named external origin.

    The fetch itself is left to subclasses; this class binds the origin
    name and template and resolves the location to fetch.
    """

    source_type = "external"

    def __init__(self, request: ImageRequest, name: str, template: str) -> None:
        super().__init__(request)
        self.name = name
        self.template = template

    @property
    def location(self) -> str:
        """Location of the image at the external origin."""
        return render_template(self.template, self.request.path)


__all__ = ["ExternalImageSource", "render_template"]
