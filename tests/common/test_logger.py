"""Tests for logging utilities."""

import logging

from common.logger import error, get_logger, success, warning


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_logger_instance(self):
        """Test that get_logger returns a logger instance."""
        logger = get_logger("test")
        assert isinstance(logger, logging.Logger)

    def test_default_level_is_info(self, monkeypatch):
        """Test that default logging level is INFO."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        logger = get_logger("test.default")
        assert logger.level == logging.INFO

    def test_level_from_env(self, monkeypatch):
        """Test that LOG_LEVEL is used when no level is given."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        logger = get_logger("test.env_level")
        assert logger.level == logging.DEBUG

    def test_custom_level(self):
        """Test that custom logging level can be set."""
        logger = get_logger("test.custom", level="WARNING")
        assert logger.level == logging.WARNING

    def test_reuses_existing_logger(self):
        """Test that get_logger does not stack handlers."""
        logger1 = get_logger("test.reuse")
        logger2 = get_logger("test.reuse")
        assert logger1 is logger2
        assert len(logger1.handlers) == 1

    def test_propagates_to_caplog(self, caplog):
        """Test that records reach pytest's capture handler."""
        logger = get_logger("test.output")

        with caplog.at_level(logging.INFO):
            logger.info("Patch accepted")

        assert "Patch accepted" in caplog.text

    def test_info_level_filters_debug(self, caplog):
        """Test that INFO level filters out DEBUG messages."""
        logger = get_logger("test.filter", level="INFO")

        with caplog.at_level(logging.DEBUG):
            logger.debug("This should not appear")
            logger.info("This should appear")

        assert "This should not appear" not in caplog.text
        assert "This should appear" in caplog.text


class TestStatusLines:
    """Tests for CLI status helpers."""

    def test_messages_with_brackets_are_printed_literally(self, capsys):
        """Test that paths like [draft] are not read as rich markup."""
        success("saved to out/[draft].diff")
        warning("rejected [patch_too_large]")
        error("failed [persist_failure]")

        captured = capsys.readouterr()
        assert "out/[draft].diff" in captured.out
        assert "[patch_too_large]" in captured.out
        assert "[persist_failure]" in captured.err
