"""Tests for logging setup."""

import io
import logging

import pytest

from docsnap.logging_config import setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave the package logger without handlers after each test."""
    yield
    logger = logging.getLogger("docsnap")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_stream_and_level(self):
        """Test records at or above the level reach the given stream."""
        stream = io.StringIO()
        logger = setup_logging("WARNING", stream=stream)

        logging.getLogger("docsnap.core.batch").info("hidden")
        logging.getLogger("docsnap.core.batch").warning("shown")

        assert logger.propagate is False
        assert stream.getvalue() == "WARNING docsnap.core.batch: shown\n"

    def test_log_file_gets_timestamps(self, tmp_path):
        """Test the file handler creates missing directories and logs with timestamps."""
        log_file = tmp_path / "logs" / "docsnap.log"
        setup_logging("DEBUG", log_file=log_file, stream=io.StringIO())

        logging.getLogger("docsnap.http.client").debug("fetching page")
        for handler in logging.getLogger("docsnap").handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").strip()
        assert line.endswith(" - docsnap.http.client - DEBUG - fetching page")

    def test_existing_handlers_kept_unless_forced(self):
        """Test a second call only changes the level unless force is set."""
        first = io.StringIO()
        second = io.StringIO()
        setup_logging("INFO", stream=first)
        setup_logging("ERROR", stream=second)

        logger = logging.getLogger("docsnap")
        assert len(logger.handlers) == 1
        assert logger.level == logging.ERROR

        setup_logging("INFO", stream=second, force=True)
        logging.getLogger("docsnap").info("after")

        assert first.getvalue() == ""
        assert "after" in second.getvalue()

    def test_unknown_level_means_info(self):
        """Test an unrecognized level name falls back to INFO."""
        logger = setup_logging("chatty", stream=io.StringIO())
        assert logger.level == logging.INFO
