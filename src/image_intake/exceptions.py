# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the image intake library.

Request errors are not raised across the parsing, dispatch and acquisition
call chain. They are recorded on the ImageRequest (see ImageRequest.fail)
and inspected by the caller through ImageRequest.error. The only exception
that is raised is ConfigurationError, from invalid configuration values.

All request errors inherit from ImageRequestError and carry an http_status
hint so an HTTP-facing layer can translate a failed request into a response
without knowing every error kind.
"""


class ImageRequestError(Exception):
    """Base class for every error recorded on an image request.

    Attributes:
        http_status: Suggested HTTP status for the response.

    Example:
        image = ImageRequest(path, config=config, parse_modifiers=parser)
        if image.is_error():
            return Response(str(image.error), status=image.error.http_status)
    """

    http_status: int = 500


class MissingInputFormatError(ImageRequestError):
    """No input format could be determined from the path or the content."""

    http_status = 400

    def __init__(self, message: str = "Input format not recognized"):
        super().__init__(message)


class UnsupportedInputFormatError(ImageRequestError):
    """The input format is known but cannot be decoded.

    Attributes:
        format: The normalized format tag that was rejected.
    """

    http_status = 400

    def __init__(self, format: str):
        super().__init__(f'Unsupported input format "{format}"')
        self.format = format


class UnsupportedOutputFormatError(ImageRequestError):
    """The input format is decodable but cannot be written back out.

    Raised for inputs such as tiff or gif when the path did not declare an
    explicit output format to convert to.

    Attributes:
        format: The normalized input format tag.
    """

    http_status = 400

    def __init__(self, format: str):
        super().__init__(f'Unsupported output format "{format}"')
        self.format = format


class SourceExcludedError(ImageRequestError):
    """The selected source is administratively excluded.

    Attributes:
        source_type: Name of the excluded source.
    """

    http_status = 403

    def __init__(self, source_type: str):
        super().__init__(f"{source_type} is an excluded source")
        self.source_type = source_type


class UnknownSourceError(ImageRequestError):
    """The selected source name has no registered implementation.

    Attributes:
        source_type: Name that was looked up.
    """

    http_status = 404

    def __init__(self, source_type: str):
        super().__init__(f"{source_type} is not a registered source")
        self.source_type = source_type


class SourceFetchError(ImageRequestError):
    """A concrete source failed while producing content.

    The exception raised by the source is chained as __cause__.

    Attributes:
        source_type: Name of the source that failed.
    """

    http_status = 502

    def __init__(self, source_type: str, message: str | None = None):
        super().__init__(message or f"{source_type} source failed to fetch image")
        self.source_type = source_type


class ConfigurationError(ValueError):
    """Raised when an IntakeConfig is constructed with invalid values.

    Common causes include:
    - A negative default expiry
    - An empty default source name
    - An external source registered without a template

    Example:
        try:
            config = IntakeConfig.from_env()
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
            raise SystemExit(1)
    """

    pass


__all__ = [
    "ConfigurationError",
    "ImageRequestError",
    "MissingInputFormatError",
    "SourceExcludedError",
    "SourceFetchError",
    "UnknownSourceError",
    "UnsupportedInputFormatError",
    "UnsupportedOutputFormatError",
]
