"""Tests for the logging facade."""
import logging

import pytest

from navigator_aws.log import (
    DEFAULT_LOGGER_NAME,
    Logger,
    StdLogger,
    format_attrs,
    get_logger,
)

from conftest import RecordingLogger


class TestFormatAttrs:

    def test_empty(self):
        assert format_attrs({}) == ""

    def test_pairs_in_order(self):
        assert format_attrs({"region": "us-east-1", "attempts": 3}) == (
            " region='us-east-1' attempts=3"
        )


class TestStdLogger:
    """Tests for StdLogger."""

    def test_default_name(self):
        assert StdLogger().logger.name == DEFAULT_LOGGER_NAME

    def test_debug_with_attrs(self, caplog):
        """Test attributes are rendered and attached to the record."""
        caplog.set_level(logging.DEBUG, logger=DEFAULT_LOGGER_NAME)
        StdLogger().debug("configured retry mode", mode="standard")
        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.getMessage() == "configured retry mode mode='standard'"
        assert record.attrs == {"mode": "standard"}

    @pytest.mark.parametrize("method,level", [
        ("info", logging.INFO),
        ("warn", logging.WARNING),
        ("error", logging.ERROR),
    ])
    def test_levels(self, caplog, method, level):
        caplog.set_level(logging.DEBUG, logger=DEFAULT_LOGGER_NAME)
        getattr(StdLogger(), method)("message")
        assert caplog.records[-1].levelno == level
        assert caplog.records[-1].getMessage() == "message"

    def test_disabled_level_skipped(self, caplog):
        """Test nothing is emitted below the configured level."""
        caplog.set_level(logging.INFO, logger=DEFAULT_LOGGER_NAME)
        StdLogger().debug("hidden", key="value")
        assert caplog.records == []

    def test_satisfies_protocol(self):
        assert isinstance(StdLogger(), Logger)


class TestGetLogger:
    """Tests for get_logger coercion."""

    def test_none(self):
        assert isinstance(get_logger(None), StdLogger)

    def test_stdlib_logger(self):
        wrapped = get_logger(logging.getLogger("service"))
        assert isinstance(wrapped, StdLogger)
        assert wrapped.logger.name == "service"

    def test_protocol_implementation(self):
        recorder = RecordingLogger()
        assert get_logger(recorder) is recorder

    def test_invalid(self):
        with pytest.raises(TypeError):
            get_logger("navigator")
