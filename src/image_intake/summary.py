# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Serializable request summaries.

A RequestSummary is a validated snapshot of an ImageRequest, used as the
body of metadata (".json") responses and as structured log payloads. It
never holds the image content itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, model_validator

if TYPE_CHECKING:
    from .request import ImageRequest


class RequestSummary(BaseModel):
    """
    Snapshot of an image request using Pydantic for validation.

    Example:
        async with acquire_image(image, registry) as image:
            if image.is_metadata:
                return JSONResponse(image.summary().to_dict())
    """

    path: str
    image: str
    format: str | None = None
    output_format: str | None = None
    is_metadata: bool = False
    content: str = "none"
    content_length: int | None = Field(default=None, ge=0)
    original_content_length: int = Field(default=0, ge=0)
    size_reduction: float | None = None
    size_saving: str | None = None
    expiry: int = Field(ge=0)
    error: str | None = None
    error_kind: str | None = None
    http_status: int = 200
    elapsed_ms: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _validate_error(self) -> RequestSummary:
        """An error message and its kind are set together."""
        if (self.error is None) != (self.error_kind is None):
            raise ValueError("error and error_kind must be set together")
        if self.error is None and self.http_status != 200:
            raise ValueError("http_status must be 200 for a request without error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_request(cls, request: ImageRequest) -> RequestSummary:
        """Build a summary from the current state of a request."""
        error = request.error
        return cls(
            path=request.path,
            image=request.image,
            format=request.format,
            output_format=request.output_format,
            is_metadata=request.is_metadata,
            content=request.content_kind.value,
            content_length=request.content_length(),
            original_content_length=request.original_content_length,
            size_reduction=request.size_reduction(),
            size_saving=request.size_saving(),
            expiry=request.expiry,
            error=str(error) if error is not None else None,
            error_kind=type(error).__name__ if error is not None else None,
            http_status=error.http_status if error is not None else 200,
            elapsed_ms=max(request.elapsed_ms, 0.0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return self.model_dump()


__all__ = ["RequestSummary"]
