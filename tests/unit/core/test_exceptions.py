"""Regression tests for the ncserial exception hierarchy."""

import logging

import pytest

from ncserial.core.exceptions import (
    CodecError,
    ConfigurationError,
    FileOperationError,
    InvalidFormatError,
    NCSerialError,
    ProviderError,
    RecordFormatError,
    ShapeMismatchError,
    TooLargeError,
    UnknownAxisTagError,
    UnsupportedLayoutError,
    ncserial_error_handler,
    require,
)


class TestHierarchy:
    @pytest.mark.parametrize("exc_cls", [
        ConfigurationError,
        CodecError,
        InvalidFormatError,
        TooLargeError,
        UnsupportedLayoutError,
        ShapeMismatchError,
        RecordFormatError,
        UnknownAxisTagError,
        FileOperationError,
        ProviderError,
    ])
    def test_all_exceptions_subclass_base(self, exc_cls):
        assert issubclass(exc_cls, NCSerialError)

    @pytest.mark.parametrize("exc_cls", [
        InvalidFormatError,
        TooLargeError,
        UnsupportedLayoutError,
        RecordFormatError,
    ])
    def test_codec_errors(self, exc_cls):
        assert issubclass(exc_cls, CodecError)

    def test_shape_mismatch_is_unsupported_layout(self):
        assert issubclass(ShapeMismatchError, UnsupportedLayoutError)

    def test_io_errors_are_not_codec_errors(self):
        assert not issubclass(FileOperationError, CodecError)


class TestRequire:
    def test_passes(self):
        require(True, "never raised")

    def test_default_error_type(self):
        with pytest.raises(CodecError, match="bad"):
            require(False, "bad")

    def test_custom_error_type(self):
        with pytest.raises(TooLargeError):
            require(False, "too big", TooLargeError)


class TestErrorHandler:
    def test_converts_foreign_exception(self):
        with pytest.raises(ProviderError, match="Failed during reading") as info:
            with ncserial_error_handler("reading", error_type=ProviderError):
                raise KeyError("time")
        assert isinstance(info.value.__cause__, KeyError)

    def test_keeps_own_exceptions(self):
        with pytest.raises(RecordFormatError):
            with ncserial_error_handler("decoding", error_type=ProviderError):
                raise RecordFormatError("truncated")

    def test_logs_and_swallows_when_not_reraising(self, caplog):
        logger = logging.getLogger("ncserial.test")
        with caplog.at_level(logging.ERROR):
            with ncserial_error_handler("cleanup", logger, reraise=False):
                raise RuntimeError("boom")
        assert "Error during cleanup: boom" in caplog.text
