"""
Tests for logging setup and configuration utilities.
"""

import logging
from pathlib import Path
from unittest.mock import Mock, patch

from event_consumer.infrastructure.config.models import LoggingConfig
from event_consumer.infrastructure.logging.setup import (
    CONSOLE_FORMAT,
    InterceptHandler,
    setup_logging,
)


class TestSetupLogging:
    """Test cases for setup_logging."""

    @patch('event_consumer.infrastructure.logging.setup.logging.basicConfig')
    @patch('event_consumer.infrastructure.logging.setup.logger')
    def test_console_only(self, mock_logger: Mock, mock_basic_config: Mock) -> None:
        mock_logger.add.return_value = 1
        config = LoggingConfig(level="debug")

        sink_ids = setup_logging(config)

        assert sink_ids == [1]
        mock_logger.remove.assert_called_once_with()
        kwargs = mock_logger.add.call_args.kwargs
        assert kwargs["format"] == CONSOLE_FORMAT
        assert kwargs["level"] == "DEBUG"

        handlers = mock_basic_config.call_args.kwargs["handlers"]
        assert isinstance(handlers[0], InterceptHandler)
        assert mock_basic_config.call_args.kwargs["force"] is True

    @patch('event_consumer.infrastructure.logging.setup.logging.basicConfig')
    @patch('event_consumer.infrastructure.logging.setup.logger')
    def test_file_sinks(self, mock_logger: Mock, mock_basic_config: Mock, tmp_path: Path) -> None:
        mock_logger.add.side_effect = [1, 2, 3]
        log_dir = tmp_path / "logs"
        config = LoggingConfig(file_enabled=True, log_directory=str(log_dir),
                               rotation="1 MB", retention="3 days")

        sink_ids = setup_logging(config)

        assert sink_ids == [1, 2, 3]
        assert log_dir.is_dir()

        main_sink, error_sink = mock_logger.add.call_args_list[1:]
        assert main_sink.args[0] == log_dir / "consumer.log"
        assert main_sink.kwargs["rotation"] == "1 MB"
        assert main_sink.kwargs["retention"] == "3 days"
        assert error_sink.args[0] == log_dir / "error.log"
        assert error_sink.kwargs["level"] == "ERROR"

    @patch('event_consumer.infrastructure.logging.setup.logging.basicConfig')
    @patch('event_consumer.infrastructure.logging.setup.logger')
    def test_no_sinks(self, mock_logger: Mock, mock_basic_config: Mock) -> None:
        config = LoggingConfig(console_enabled=False, file_enabled=False)

        assert setup_logging(config) == []
        mock_logger.add.assert_not_called()
        mock_basic_config.assert_called_once()


class TestInterceptHandler:
    """Test cases for the standard library bridge."""

    def test_forwards_stdlib_records(self, log_records) -> None:
        std_logger = logging.getLogger("paho.mqtt.test")
        handler = InterceptHandler()
        std_logger.addHandler(handler)
        std_logger.setLevel(logging.DEBUG)
        std_logger.propagate = False
        try:
            std_logger.warning("connection lost: %s", "timeout")
        finally:
            std_logger.removeHandler(handler)

        record = log_records[-1]
        assert record["message"] == "connection lost: timeout"
        assert record["level"].name == "WARNING"

    def test_custom_level_number(self, log_records) -> None:
        record = logging.LogRecord("custom", 25, __file__, 1, "custom level", None, None)
        record.levelname = "Level 25"

        InterceptHandler().emit(record)

        assert log_records[-1]["message"] == "custom level"
        assert log_records[-1]["level"].no == 25
