"""Unit tests for the exceptions module.

Tests all exception classes defined in image_intake.exceptions.
"""

import pytest

from image_intake.exceptions import (
    ConfigurationError,
    ImageRequestError,
    MissingInputFormatError,
    SourceExcludedError,
    SourceFetchError,
    UnknownSourceError,
    UnsupportedInputFormatError,
    UnsupportedOutputFormatError,
)


class TestImageRequestError:
    """Tests for the base ImageRequestError exception."""

    def test_can_be_caught_as_exception(self):
        """ImageRequestError can be caught as a standard Exception."""
        with pytest.raises(Exception):  # noqa: B017
            raise ImageRequestError("test error")

    def test_message_preserved(self):
        assert str(ImageRequestError("test message")) == "test message"

    def test_default_http_status(self):
        assert ImageRequestError.http_status == 500


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (MissingInputFormatError(), 400),
        (UnsupportedInputFormatError("bmp"), 400),
        (UnsupportedOutputFormatError("gif"), 400),
        (SourceExcludedError("s3"), 403),
        (UnknownSourceError("ftp"), 404),
        (SourceFetchError("s3"), 502),
    ],
)
def test_request_errors_share_base_and_status(error, status):
    """Every request error is an ImageRequestError with a status hint."""
    assert isinstance(error, ImageRequestError)
    assert error.http_status == status


class TestMessages:
    def test_missing_input_format(self):
        assert str(MissingInputFormatError()) == "Input format not recognized"

    def test_unsupported_output_format(self):
        error = UnsupportedOutputFormatError("tiff")
        assert error.format == "tiff"
        assert str(error) == 'Unsupported output format "tiff"'

    def test_source_excluded(self):
        error = SourceExcludedError("facebook")
        assert error.source_type == "facebook"
        assert str(error) == "facebook is an excluded source"

    def test_unknown_source(self):
        error = UnknownSourceError("ftp")
        assert error.source_type == "ftp"
        assert "ftp" in str(error)

    def test_source_fetch_default_message(self):
        error = SourceFetchError("s3")
        assert error.source_type == "s3"
        assert str(error) == "s3 source failed to fetch image"

    def test_source_fetch_custom_message(self):
        assert str(SourceFetchError("s3", "timed out")) == "timed out"


class TestConfigurationError:
    def test_is_value_error(self):
        with pytest.raises(ValueError):
            raise ConfigurationError("bad value")

    def test_is_not_a_request_error(self):
        assert not issubclass(ConfigurationError, ImageRequestError)
