"""
Tests for the logging handler on top of the rotating writer
"""

import logging
import os
import shutil
import tempfile
from unittest.mock import patch

from rotating_sink import (
    Clock,
    RotatingLogConfig,
    RotatingLogWriter,
    RotatingSinkHandler,
    create_file_logger,
)
from rotating_sink.reconcile import extract_timestamp
from rotating_sink.retention import list_backups

from conftest import TickingTime


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestRotatingSinkHandler:
    def setup_method(self):
        # Create temporary directory for tests
        self.temp_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.temp_dir, "test.log")

        self.config = RotatingLogConfig(
            directory=self.temp_dir,
            name="test",
            max_size=1024,  # Small size for testing
        )

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _handler(self) -> RotatingSinkHandler:
        writer = RotatingLogWriter(self.config, clock=Clock(time_func=TickingTime()))
        handler = RotatingSinkHandler(writer=writer)
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def test_handler_creation(self):
        handler = RotatingSinkHandler(self.config)

        assert handler.base_filename == self.log_file
        assert handler.writer.max_size == 1024
        assert handler.writer.closed

        handler.close()

    def test_log_writing(self):
        handler = self._handler()

        handler.emit(_record("Test message"))
        handler.flush()

        with open(self.log_file) as f:
            assert f.read() == "Test message\n"

        handler.close()

    def test_rotation_on_size(self):
        handler = self._handler()

        large_message = "x" * 500
        for i in range(5):
            handler.emit(_record(f"{large_message}_{i}"))

        backups = list_backups(self.temp_dir, "test-", ".log")
        assert len(backups) == 2
        assert all(b.size <= 1024 for b in backups)
        assert os.path.getsize(self.log_file) <= 1024

        handler.close()

    def test_oversized_record_goes_to_handle_error(self):
        handler = self._handler()

        with patch.object(handler, "handleError") as handle_error:
            handler.emit(_record("x" * 2000))

        handle_error.assert_called_once()
        assert not os.path.exists(self.log_file)

        handler.close()

    def test_close_closes_writer(self):
        handler = self._handler()
        handler.emit(_record("message"))

        handler.close()

        assert handler.writer.closed


class TestCreateFileLogger:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.temp_dir, "app.log")
        self.config = RotatingLogConfig(directory=self.temp_dir, name="app")

    def teardown_method(self):
        for name in ("test_rotating", "test_custom", "test_replace"):
            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
                handler.close()

        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_create_rotating_file_logger(self):
        logger = create_file_logger("test_rotating", self.config)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RotatingSinkHandler)

        logger.info("Test message")
        logger.handlers[0].flush()

        with open(self.log_file) as f:
            content = f.read()
        assert "test_rotating - INFO - Test message" in content

    def test_default_format_starts_with_timestamp(self):
        logger = create_file_logger("test_rotating", self.config)

        logger.info("stamped")

        with open(self.log_file) as f:
            line = f.readline()
        clock = logger.handlers[0].writer.clock

        assert extract_timestamp(line, self.config.log_time_format, clock)

    def test_custom_formatter(self):
        custom_formatter = logging.Formatter("CUSTOM: %(message)s")
        logger = create_file_logger("test_custom", self.config, custom_formatter)

        logger.info("Test message")

        with open(self.log_file) as f:
            assert f.read() == "CUSTOM: Test message\n"

    def test_replaces_existing_handlers(self):
        create_file_logger("test_replace", self.config)
        logger = create_file_logger("test_replace", self.config)

        assert len(logger.handlers) == 1
